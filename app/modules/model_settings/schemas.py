from pydantic import Field
from typing import List

from app.core.schemas import CamelModel


class ModelSettingsResponse(CamelModel):
    model: str
    available_models: List[str] = Field(default_factory=list)


class ModelSettingsUpdate(CamelModel):
    model: str = Field(..., min_length=1)
