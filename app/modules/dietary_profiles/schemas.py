from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.core.schemas import CamelModel


class DietaryProfileUpdate(CamelModel):
    allergies: List[str] = Field(default_factory=list)
    dietary_preferences: List[str] = Field(default_factory=list)
    health_restrictions: List[str] = Field(default_factory=list)

    @field_validator("allergies", "dietary_preferences", "health_restrictions", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("allergies", "dietary_preferences", "health_restrictions")
    @classmethod
    def strip_blank_tags(cls, tags: List[str]) -> List[str]:
        return [tag.strip() for tag in tags if tag and tag.strip()]


class DietaryProfileResponse(CamelModel):
    id: str
    user_id: str
    allergies: List[str] = Field(default_factory=list)
    dietary_preferences: List[str] = Field(default_factory=list)
    health_restrictions: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("allergies", "dietary_preferences", "health_restrictions", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    @property
    def active_restrictions(self) -> List[str]:
        return [*self.allergies, *self.dietary_preferences, *self.health_restrictions]
