from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.dietary_profiles.service import DietaryProfileService
from app.modules.food.guidance import (
    check_food_safety, get_dietary_info, get_safe_alternatives, unsafe_ingredients_for
)
from app.modules.food.schemas import (
    DietaryInfoResponse, FoodAlternative, FoodSafetyCheckRequest, FoodSafetyCheckResponse
)
from app.modules.scans.routes import get_scan_service
from app.modules.scans.service import ScanService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/food", tags=["food"])


def get_dietary_profile_service(supabase: Client = Depends(get_supabase)) -> DietaryProfileService:
    return DietaryProfileService(supabase)


@router.get("/alternatives/{scan_id}", response_model=List[FoodAlternative])
async def get_food_alternatives(
    scan_id: str,
    user_data: Dict = Depends(get_current_user_id),
    scans: ScanService = Depends(get_scan_service),
    profiles: DietaryProfileService = Depends(get_dietary_profile_service)
):
    """Safe dishes to try instead of the scanned food"""
    scan = scans.get_owned_scan(scan_id, user_data["id"])
    profile = profiles.get_profile(scan.user_id)
    return get_safe_alternatives(scan.food_name, unsafe_ingredients_for(scan, profile))


@router.get("/dietary-info/{scan_id}", response_model=DietaryInfoResponse)
async def get_food_dietary_info(
    scan_id: str,
    user_data: Dict = Depends(get_current_user_id),
    scans: ScanService = Depends(get_scan_service),
    profiles: DietaryProfileService = Depends(get_dietary_profile_service)
):
    scan = scans.get_owned_scan(scan_id, user_data["id"])
    return get_dietary_info(scan, profiles.get_profile(scan.user_id))


@router.post("/check-safety", response_model=FoodSafetyCheckResponse)
async def check_safety(
    request: FoodSafetyCheckRequest,
    user_data: Dict = Depends(get_current_user_id),
    profiles: DietaryProfileService = Depends(get_dietary_profile_service)
):
    """Match a food's ingredient list against the caller's dietary profile"""
    profile = profiles.get_profile(user_data["id"])
    return check_food_safety(request.food_name, request.ingredients, profile)
