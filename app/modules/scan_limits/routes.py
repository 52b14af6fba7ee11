from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.scan_limits.schemas import ScanLimitResponse
from app.modules.scan_limits.service import ScanLimitService
from app.modules.users.service import UserService
from app.core.dependencies import require_self
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/scan-limits", tags=["scan-limits"])


def get_scan_limit_service(supabase: Client = Depends(get_supabase)) -> ScanLimitService:
    return ScanLimitService(supabase)


@router.get("/{user_id}", response_model=ScanLimitResponse)
async def get_scan_limit(
    user_id: str,
    user_data: Dict = Depends(require_self),
    service: ScanLimitService = Depends(get_scan_limit_service),
    supabase: Client = Depends(get_supabase)
):
    """Monthly scan quota for the user, created with defaults on first access"""
    UserService(supabase).get_or_create_user(user_id, user_data.get("email"))
    return service.get_or_create_limit(user_id)
