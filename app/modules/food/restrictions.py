"""
Static restriction maps and the ingredient matcher.

Each map goes from a restriction tag to the ingredient terms that conflict
with it. Matching is a case-insensitive substring test of every term
against every ingredient, so "peanut" flags "peanut oil" and, equally,
"egg" flags "eggplant".
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

ALLERGY = "allergy"
PREFERENCE = "preference"
HEALTH = "health"

ALLERGEN_MAP: Dict[str, List[str]] = {
    "peanuts": ["peanuts", "peanut", "peanut oil", "peanut butter"],
    "tree-nuts": ["almonds", "cashews", "walnuts", "pecans", "pistachios", "hazelnuts"],
    "dairy": ["milk", "cheese", "butter", "cream", "yogurt", "lactose", "whey", "casein"],
    "eggs": ["egg", "eggs", "mayonnaise", "meringue"],
    "shellfish": ["shrimp", "crab", "lobster", "crawfish", "prawns"],
    "fish": ["fish", "cod", "salmon", "tuna", "tilapia", "anchovies"],
    "wheat": ["wheat", "flour", "bread", "pasta", "croutons", "bran"],
    "soy": ["soy", "tofu", "edamame", "soy sauce", "soy lecithin"],
    "sesame": ["sesame", "sesame oil", "tahini"],
    "gluten": ["wheat", "barley", "rye", "oats", "bread", "pasta"],
}

DIETARY_PREFERENCE_MAP: Dict[str, List[str]] = {
    "vegetarian": ["beef", "chicken", "pork", "lamb", "fish", "shellfish", "gelatin"],
    "vegan": ["beef", "chicken", "pork", "lamb", "fish", "shellfish", "milk", "cheese",
              "butter", "egg", "honey", "gelatin"],
    "keto": ["sugar", "flour", "rice", "pasta", "bread", "potatoes", "corn"],
    "paleo": ["dairy", "grains", "wheat", "sugar", "legumes", "peanuts"],
    "halal": ["pork", "alcohol", "non-halal meat"],
    "kosher": ["pork", "shellfish", "mixture of meat and dairy"],
}

HEALTH_RESTRICTION_MAP: Dict[str, List[str]] = {
    "diabetes": ["sugar", "high fructose corn syrup", "honey", "agave nectar", "white bread", "white rice"],
    "hypertension": ["salt", "sodium", "monosodium glutamate", "cured meats"],
    "heart-disease": ["trans fat", "saturated fat", "cholesterol", "salt", "sodium"],
    "celiac-disease": ["wheat", "barley", "rye", "gluten"],
    "kidney-disease": ["potassium", "phosphorus", "sodium", "protein"],
    "low-sugar": ["sugar", "corn syrup", "honey", "maple syrup", "agave nectar"],
}

# Prompt wording for each tag the analyzer may mention
RESTRICTION_DETAILS: Dict[str, str] = {
    # Allergies
    "peanuts": "peanuts and peanut derivatives",
    "tree-nuts": "tree nuts like almonds, walnuts, cashews",
    "dairy": "milk, cheese, yogurt, and other dairy products",
    "eggs": "eggs and egg-derived ingredients",
    "fish": "fish and fish-derived ingredients",
    "shellfish": "shellfish like shrimp, crab, lobster",
    "soy": "soy and soy-derived products",
    "wheat": "wheat and wheat-derived products",
    # Dietary preferences
    "vegetarian": "meat, including beef, pork, poultry",
    "vegan": "all animal products including meat, dairy, eggs, honey",
    "pescatarian": "meat excluding fish and seafood",
    "halal": "non-halal meat, alcohol, and certain food additives",
    "kosher": "non-kosher meat, shellfish, certain food combinations",
    "gluten-free": "wheat, barley, rye, and other gluten-containing grains",
    # Health restrictions
    "low-sodium": "high-sodium ingredients and foods",
    "low-sugar": "high-sugar ingredients and foods",
    "low-carb": "high-carbohydrate foods like pasta, bread, potatoes",
    "low-fat": "high-fat ingredients and foods",
    "low-cholesterol": "high-cholesterol foods like egg yolks, organ meats",
    "low-calorie": "high-calorie dense foods",
    "kidney-disease": "high-phosphorus, high-potassium, and high-sodium foods",
    "diabetes": "high glycemic index foods and added sugars",
}


def normalize_tag(tag: str) -> str:
    """Map key for a user tag: "Tree Nuts" and "tree_nuts" both become "tree-nuts"."""
    return "-".join(tag.strip().lower().replace("_", " ").split())


def describe_restriction(tag: str) -> str:
    return RESTRICTION_DETAILS.get(normalize_tag(tag), tag)


@dataclass
class Conflict:
    ingredient: str
    category: str
    tag: str
    message: str


@dataclass
class MatchResult:
    safe: bool
    reason: Optional[str] = None
    incompatible_ingredients: List[str] = field(default_factory=list)
    conflicts: List[Conflict] = field(default_factory=list)


def _allergy_terms(tag: str) -> List[str]:
    # Unknown allergens are matched literally
    return ALLERGEN_MAP.get(normalize_tag(tag), [tag])


def _preference_terms(tag: str) -> List[str]:
    return DIETARY_PREFERENCE_MAP.get(normalize_tag(tag), [])


def _health_terms(tag: str) -> List[str]:
    return HEALTH_RESTRICTION_MAP.get(normalize_tag(tag), [])


def _conflict_message(category: str, ingredient: str, tag: str) -> str:
    if category == ALLERGY:
        return f"Contains {ingredient} which you're allergic to"
    if category == PREFERENCE:
        return f"Contains {ingredient} which doesn't match your {tag} preference"
    return f"Contains {ingredient} which may not be suitable for your {tag} condition"


def contains_any(ingredient: str, terms: Iterable[str]) -> bool:
    lowered = ingredient.lower()
    return any(term.lower() in lowered for term in terms if term)


def match_ingredients(
    food_name: str,
    ingredients: List[str],
    allergies: Iterable[str] = (),
    dietary_preferences: Iterable[str] = (),
    health_restrictions: Iterable[str] = (),
) -> MatchResult:
    """
    Cross-reference ingredients against a user's restriction tags.

    Categories are checked in order (allergies, preferences, health
    restrictions). Every (tag, ingredient) hit is recorded as a Conflict;
    an ingredient is listed once in incompatible_ingredients, and the
    first conflict's message becomes the reason.
    """
    checks = (
        (ALLERGY, allergies or [], _allergy_terms),
        (PREFERENCE, dietary_preferences or [], _preference_terms),
        (HEALTH, health_restrictions or [], _health_terms),
    )
    conflicts: List[Conflict] = []
    incompatible: List[str] = []

    for category, tags, terms_for in checks:
        for tag in tags:
            if not tag or not tag.strip():
                continue
            terms = terms_for(tag)
            for ingredient in ingredients:
                if not contains_any(ingredient, terms):
                    continue
                conflicts.append(Conflict(
                    ingredient=ingredient,
                    category=category,
                    tag=tag,
                    message=_conflict_message(category, ingredient, tag),
                ))
                if ingredient not in incompatible:
                    incompatible.append(ingredient)

    return MatchResult(
        safe=not incompatible,
        reason=conflicts[0].message if conflicts else None,
        incompatible_ingredients=incompatible,
        conflicts=conflicts,
    )


def match_profile(food_name: str, ingredients: List[str], profile) -> MatchResult:
    """match_ingredients for anything shaped like a dietary profile."""
    return match_ingredients(
        food_name,
        ingredients,
        allergies=getattr(profile, "allergies", None) or [],
        dietary_preferences=getattr(profile, "dietary_preferences", None) or [],
        health_restrictions=getattr(profile, "health_restrictions", None) or [],
    )
