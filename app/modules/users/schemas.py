from typing import Optional
from datetime import datetime

from app.core.schemas import CamelModel


class UserResponse(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    emergency_name: Optional[str] = None
    emergency_relation: Optional[str] = None
    emergency_phone: Optional[str] = None
    ai_model: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserProfileUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    emergency_name: Optional[str] = None
    emergency_relation: Optional[str] = None
    emergency_phone: Optional[str] = None


class UserProfileResponse(CamelModel):
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    emergency_name: Optional[str] = None
    emergency_relation: Optional[str] = None
    emergency_phone: Optional[str] = None
