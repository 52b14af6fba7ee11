from fastapi import APIRouter, Depends, HTTPException
from app.config.settings import settings
from app.database.supabase_client import get_supabase
from app.modules.model_settings.schemas import ModelSettingsResponse, ModelSettingsUpdate
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserService
from app.core.dependencies import get_current_app_user
from supabase import Client
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/model", response_model=ModelSettingsResponse)
async def get_model_settings(current_user: UserResponse = Depends(get_current_app_user)):
    """The caller's analysis model and the models they may choose from"""
    available = settings.get_available_models_list()
    model = current_user.ai_model if current_user.ai_model in available else settings.default_ai_model
    return ModelSettingsResponse(model=model, available_models=available)


@router.put("/model", response_model=ModelSettingsResponse)
async def update_model_settings(
    update: ModelSettingsUpdate,
    current_user: UserResponse = Depends(get_current_app_user),
    supabase: Client = Depends(get_supabase)
):
    available = settings.get_available_models_list()
    if update.model not in available:
        raise HTTPException(status_code=400, detail=f"Unknown model: {update.model}")
    model = UserService(supabase).set_ai_model(current_user.id, update.model)
    logger.info(f"User {current_user.id} switched analysis model to {model}")
    return ModelSettingsResponse(model=model, available_models=available)
