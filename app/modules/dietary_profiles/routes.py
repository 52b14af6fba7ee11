from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.dietary_profiles.schemas import DietaryProfileUpdate, DietaryProfileResponse
from app.modules.dietary_profiles.service import DietaryProfileService
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserService
from app.core.dependencies import get_current_app_user, require_self
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/dietary-profile", tags=["dietary-profile"])


def get_dietary_profile_service(supabase: Client = Depends(get_supabase)) -> DietaryProfileService:
    return DietaryProfileService(supabase)


@router.get("/{user_id}", response_model=DietaryProfileResponse)
async def get_dietary_profile(
    user_id: str,
    user_data: Dict = Depends(require_self),
    service: DietaryProfileService = Depends(get_dietary_profile_service),
    supabase: Client = Depends(get_supabase)
):
    """Get the user's dietary profile, creating an empty one on first access"""
    UserService(supabase).get_or_create_user(user_id, user_data.get("email"))
    return service.get_or_create_profile(user_id)


@router.post("", response_model=DietaryProfileResponse)
async def save_own_dietary_profile(
    profile_data: DietaryProfileUpdate,
    current_user: UserResponse = Depends(get_current_app_user),
    service: DietaryProfileService = Depends(get_dietary_profile_service)
):
    """Create or replace the authenticated user's dietary profile"""
    return service.save_profile(current_user.id, profile_data)


@router.put("/{user_id}", response_model=DietaryProfileResponse)
async def update_dietary_profile(
    user_id: str,
    profile_data: DietaryProfileUpdate,
    user_data: Dict = Depends(require_self),
    service: DietaryProfileService = Depends(get_dietary_profile_service),
    supabase: Client = Depends(get_supabase)
):
    """Create or replace the dietary profile of the user in the path"""
    UserService(supabase).get_or_create_user(user_id, user_data.get("email"))
    return service.save_profile(user_id, profile_data)
