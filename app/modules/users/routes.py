from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import UserProfileUpdate, UserProfileResponse
from app.modules.users.service import UserService
from app.core.dependencies import require_self
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/{user_id}/profile", response_model=UserProfileResponse)
async def get_user_profile(
    user_id: str,
    user_data: Dict = Depends(require_self),
    service: UserService = Depends(get_user_service)
):
    """Get contact and emergency details for the current user"""
    return service.get_profile(user_id)


@router.put("/{user_id}/profile", response_model=UserProfileResponse)
async def update_user_profile(
    user_id: str,
    profile_data: UserProfileUpdate,
    user_data: Dict = Depends(require_self),
    service: UserService = Depends(get_user_service)
):
    """Update contact and emergency details for the current user"""
    service.get_or_create_user(user_id, user_data.get("email"))
    return service.update_profile(user_id, profile_data)
