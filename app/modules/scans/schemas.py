from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.core.schemas import CamelModel


class FoodScanResponse(CamelModel):
    id: str
    user_id: str
    food_name: str
    image_url: str
    ingredients: List[str] = Field(default_factory=list)
    is_safe: Optional[bool] = None
    safety_reason: Optional[str] = None
    unsafe_reasons: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    scanned_at: Optional[datetime] = None

    @field_validator("ingredients", "unsafe_reasons", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value


class ScanUploadResponse(CamelModel):
    success: bool = True
    scan_id: str
    status: str  # processing | completed


class ScanStatsResponse(CamelModel):
    safe: int = 0
    caution: int = 0
    unsafe: int = 0


class DeleteScansResponse(CamelModel):
    message: str
    count: int


class SaveScanResponse(CamelModel):
    success: bool = True
