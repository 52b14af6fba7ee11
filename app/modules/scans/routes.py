from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from app.config.settings import settings
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.dietary_profiles.service import DietaryProfileService
from app.modules.food.analyzer import FoodAnalyzer, FoodAnalysisError, get_food_analyzer
from app.modules.scan_limits.service import ScanLimitService
from app.modules.scans.analysis_worker import analyze_scan_async
from app.modules.scans.image_storage import ALLOWED_IMAGE_EXTENSIONS, build_image_key, get_image_storage
from app.modules.scans.schemas import (
    FoodScanResponse, ScanUploadResponse, ScanStatsResponse, DeleteScansResponse, SaveScanResponse
)
from app.modules.scans.service import ScanService
from app.modules.users.schemas import UserResponse
from app.core.dependencies import get_current_app_user, get_current_user_id, check_user_access, require_self
from supabase import Client
from typing import Dict, List
import os
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scans"])


def get_scan_service(supabase: Client = Depends(get_supabase)) -> ScanService:
    return ScanService(supabase)


def get_scan_image_storage(supabase: Client = Depends(get_supabase)):
    return get_image_storage(supabase)


def _present(scans: List[FoodScanResponse], storage) -> List[FoodScanResponse]:
    return [s.model_copy(update={"image_url": storage.resolve_url(s.image_url)}) for s in scans]


def _create_scan(scan_service: ScanService, storage, user_id: str, image_url: str, analysis=None):
    """Insert the scan row, removing the stored image when the insert fails"""
    try:
        return scan_service.create_scan(user_id, image_url, analysis)
    except HTTPException:
        storage.delete_images([image_url])
        raise


def _validate_image(file: UploadFile, content: bytes):
    ext = os.path.splitext(file.filename or "")[1].lower()
    content_type = file.content_type or ""
    if ext not in ALLOWED_IMAGE_EXTENSIONS or not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")
    if not content:
        raise HTTPException(status_code=400, detail="No image file uploaded")
    if len(content) > settings.max_upload_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"Image is larger than {settings.max_upload_size_mb} MB"
        )


@router.post("/scan/upload", response_model=ScanUploadResponse)
async def upload_scan(
    background_tasks: BackgroundTasks,
    image: UploadFile = File(...),
    current_user: UserResponse = Depends(get_current_app_user),
    scan_service: ScanService = Depends(get_scan_service),
    analyzer: FoodAnalyzer = Depends(get_food_analyzer),
    storage=Depends(get_scan_image_storage),
    supabase: Client = Depends(get_supabase),
    worker_supabase: Client = Depends(get_service_supabase)
):
    """
    Upload a food photo for analysis.
    Checks the monthly quota and the dietary profile, stores the image under
    the user's folder and counts the scan. In async mode the response carries
    a placeholder scan id to poll; in sync mode the finished scan.
    """
    user_id = current_user.id
    limits = ScanLimitService(supabase)
    limits.ensure_can_scan(user_id)

    # One byte past the limit is enough to reject an oversized upload
    content = await image.read(settings.max_upload_size_bytes + 1)
    _validate_image(image, content)
    content_type = image.content_type

    profile = DietaryProfileService(supabase).get_profile(user_id)
    if not profile:
        raise HTTPException(
            status_code=400,
            detail="Please set up your dietary profile before scanning food"
        )

    try:
        image_url = storage.upload_image(content, build_image_key(user_id, image.filename), content_type)
    except Exception as e:
        logger.error(f"Image upload failed for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to store image")

    model = current_user.ai_model or settings.default_ai_model

    if settings.scan_processing_mode == "sync":
        try:
            analysis = await run_in_threadpool(
                analyzer.analyze, content, profile, model=model, content_type=content_type
            )
        except FoodAnalysisError as e:
            logger.error(f"Analysis failed for user {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to analyze the image")
        scan = _create_scan(scan_service, storage, user_id, image_url, analysis)
        limits.increment_scan_count(user_id)
        return ScanUploadResponse(success=True, scan_id=scan.id, status="completed")

    scan = _create_scan(scan_service, storage, user_id, image_url)
    limits.increment_scan_count(user_id)
    background_tasks.add_task(
        analyze_scan_async,
        scan_id=scan.id,
        image_bytes=content,
        content_type=content_type,
        profile=profile,
        model=model,
        analyzer=analyzer,
        supabase=worker_supabase,
    )
    logger.info(f"Queued analysis for scan {scan.id}")
    return ScanUploadResponse(success=True, scan_id=scan.id, status="processing")


@router.get("/scans", response_model=List[FoodScanResponse])
async def list_own_scans(
    user_data: Dict = Depends(get_current_user_id),
    service: ScanService = Depends(get_scan_service),
    storage=Depends(get_scan_image_storage)
):
    """All scans of the authenticated user, newest first"""
    return _present(service.list_scans(user_data["id"]), storage)


@router.get("/scans/user/{user_id}", response_model=List[FoodScanResponse])
async def list_user_scans(
    user_id: str,
    user_data: Dict = Depends(require_self),
    service: ScanService = Depends(get_scan_service),
    storage=Depends(get_scan_image_storage)
):
    return _present(service.list_scans(user_id), storage)


@router.delete("/scans/user/{user_id}", response_model=DeleteScansResponse)
async def delete_user_scans(
    user_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ScanService = Depends(get_scan_service),
    storage=Depends(get_scan_image_storage)
):
    """Delete all of the user's scans and their stored images"""
    check_user_access(user_id, user_data, detail="Forbidden: You can only delete your own scans")
    deleted = service.delete_user_scans(user_id)
    if deleted:
        removed = storage.delete_images([s.image_url for s in deleted])
        logger.info(f"Removed {removed} stored images for user {user_id}")
    return DeleteScansResponse(
        message=f"Successfully deleted {len(deleted)} scan(s)",
        count=len(deleted)
    )


@router.get("/scans/recent/{user_id}", response_model=List[FoodScanResponse])
async def list_recent_scans(
    user_id: str,
    user_data: Dict = Depends(require_self),
    service: ScanService = Depends(get_scan_service),
    storage=Depends(get_scan_image_storage)
):
    return _present(service.list_scans(user_id, limit=settings.recent_scans_limit), storage)


@router.get("/scans/{scan_id}", response_model=FoodScanResponse)
async def get_scan(
    scan_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ScanService = Depends(get_scan_service),
    storage=Depends(get_scan_image_storage)
):
    """Single scan; clients poll this while async analysis runs"""
    scan = service.get_owned_scan(scan_id, user_data["id"])
    return _present([scan], storage)[0]


@router.post("/scans/{scan_id}/save", response_model=SaveScanResponse)
async def save_scan(
    scan_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: ScanService = Depends(get_scan_service)
):
    service.get_owned_scan(scan_id, user_data["id"])
    return SaveScanResponse(success=True)


@router.get("/scan-stats/{user_id}", response_model=ScanStatsResponse)
async def get_scan_stats(
    user_id: str,
    user_data: Dict = Depends(require_self),
    service: ScanService = Depends(get_scan_service)
):
    """Counts of safe, caution and unsafe scans"""
    return service.get_stats(user_id)
