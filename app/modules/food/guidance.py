"""
Rule-based follow-up guidance for a finished scan: the direct safety
check used by the client, safe alternative dishes, and a short list of
foods to avoid.
"""

from typing import List

from app.modules.food.restrictions import match_profile
from app.modules.food.schemas import (
    ConflictResponse,
    DietaryInfoResponse,
    FoodAlternative,
    FoodSafetyCheckResponse,
)

SALAD_ALTERNATIVES = [
    FoodAlternative(
        name="Green Salad",
        description="Lettuce, tomatoes, cucumber with oil and vinegar",
        ingredients=["lettuce", "tomato", "cucumber", "olive oil", "vinegar"],
    ),
    FoodAlternative(
        name="Grilled Chicken Salad",
        description="With olive oil dressing (no egg-based dressing)",
        ingredients=["chicken", "lettuce", "tomato", "cucumber", "olive oil"],
    ),
    FoodAlternative(
        name="Mediterranean Salad",
        description="With lemon and olive oil dressing",
        ingredients=["lettuce", "cucumber", "tomato", "olives", "lemon juice", "olive oil"],
    ),
]

PIZZA_ALTERNATIVES = [
    FoodAlternative(
        name="Cauliflower Crust Pizza",
        description="Pizza with gluten-free cauliflower crust",
        ingredients=["cauliflower", "tomato sauce", "vegetables"],
    ),
    FoodAlternative(
        name="Vegan Pizza",
        description="Pizza with dairy-free cheese alternative",
        ingredients=["wheat", "tomato sauce", "vegan cheese", "vegetables"],
    ),
]

DEFAULT_ALTERNATIVES = [
    FoodAlternative(
        name="Fresh Fruit Plate",
        description="Selection of seasonal fruits",
        ingredients=["apple", "banana", "orange", "grapes", "berries"],
    ),
    FoodAlternative(
        name="Steamed Vegetables",
        description="Assorted vegetables lightly seasoned",
        ingredients=["broccoli", "carrots", "zucchini", "bell peppers", "olive oil"],
    ),
]

GENERAL_INFO = DietaryInfoResponse(
    title="General Information",
    description="No specific dietary concerns for this food item.",
    avoid_list=[],
)

EGG_INFO = DietaryInfoResponse(
    title="Common egg-containing foods to avoid:",
    description=(
        "People with egg allergies should avoid foods containing eggs or egg derivatives. "
        "Traditional Caesar dressing contains raw or coddled eggs."
    ),
    avoid_list=[
        "Mayonnaise-based dressings",
        "Caesar dressing",
        "Aioli",
        "Hollandaise sauce",
        "Some baked goods",
    ],
)

PEANUT_INFO = DietaryInfoResponse(
    title="Common peanut-containing foods to avoid:",
    description=(
        "People with peanut allergies should be careful with these items "
        "that may contain peanuts or peanut oil."
    ),
    avoid_list=[
        "Peanut butter",
        "Many baked goods",
        "Some Asian and African cuisines",
        "Some candy bars",
        "Some cereals and granola",
    ],
)


def check_food_safety(food_name: str, ingredients: List[str], profile) -> FoodSafetyCheckResponse:
    match = match_profile(food_name, ingredients, profile)
    return FoodSafetyCheckResponse(
        food=food_name,
        safe=match.safe,
        ingredients=list(ingredients),
        incompatible_ingredients=match.incompatible_ingredients,
        reason=match.reason or "",
        conflicts=[ConflictResponse(**vars(c)) for c in match.conflicts],
    )


def unsafe_ingredients_for(scan, profile) -> List[str]:
    """Ingredients of a scan that conflict with the profile"""
    if profile is None:
        return []
    return match_profile(scan.food_name, scan.ingredients, profile).incompatible_ingredients


def get_safe_alternatives(food_name: str, unsafe_ingredients: List[str]) -> List[FoodAlternative]:
    food = (food_name or "").lower()
    unsafe = [ingredient.lower() for ingredient in unsafe_ingredients]

    if "salad" in food and any("egg" in i for i in unsafe):
        return [a.model_copy() for a in SALAD_ALTERNATIVES]
    if "pizza" in food and any("cheese" in i or "wheat" in i for i in unsafe):
        return [a.model_copy() for a in PIZZA_ALTERNATIVES]
    return [a.model_copy() for a in DEFAULT_ALTERNATIVES]


def get_dietary_info(scan, profile) -> DietaryInfoResponse:
    """Avoid-list guidance for unsafe scans whose reason mentions egg or peanut"""
    reason = (scan.safety_reason or "").lower()
    if scan.is_safe is False and reason and profile is not None:
        if "egg" in reason:
            return EGG_INFO.model_copy()
        if "peanut" in reason:
            return PEANUT_INFO.model_copy()
    return GENERAL_INFO.model_copy()
