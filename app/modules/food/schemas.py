from pydantic import Field, field_validator
from typing import List, Optional

from app.core.schemas import CamelModel


class AnalysisResult(CamelModel):
    """What the vision model reported for one image, after cross-checking."""

    food_name: str = "Unknown food"
    ingredients: List[str] = Field(default_factory=list)
    is_safe: Optional[bool] = None
    unsafe_reasons: List[str] = Field(default_factory=list)
    description: str = "No detailed description provided."
    safety_reason: Optional[str] = None

    @field_validator("food_name", mode="before")
    @classmethod
    def default_food_name(cls, value):
        return value if isinstance(value, str) and value.strip() else "Unknown food"

    @field_validator("ingredients", "unsafe_reasons", mode="before")
    @classmethod
    def string_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [str(item) for item in value if item is not None and str(item).strip()]

    @field_validator("is_safe", mode="before")
    @classmethod
    def strict_verdict(cls, value):
        # Anything but a real boolean means the model could not decide
        return value if isinstance(value, bool) else None

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value):
        return value if isinstance(value, str) and value.strip() else "No detailed description provided."


class FoodSafetyCheckRequest(CamelModel):
    food_name: str
    ingredients: List[str] = Field(default_factory=list)


class ConflictResponse(CamelModel):
    ingredient: str
    category: str
    tag: str
    message: str


class FoodSafetyCheckResponse(CamelModel):
    food: str
    safe: bool
    ingredients: List[str]
    incompatible_ingredients: List[str] = Field(default_factory=list)
    reason: str = ""
    conflicts: List[ConflictResponse] = Field(default_factory=list)


class FoodAlternative(CamelModel):
    name: str
    description: str
    ingredients: List[str]


class DietaryInfoResponse(CamelModel):
    title: str
    description: str
    avoid_list: List[str] = Field(default_factory=list)
