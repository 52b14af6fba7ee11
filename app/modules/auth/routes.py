from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase, get_session_supabase
from app.config.settings import settings
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, SupabaseCredentialsResponse
)
from app.modules.auth.service import AuthService
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserService
from app.core.dependencies import get_current_app_user
from app.core.schemas import MessageResponse
from supabase import Client

router = APIRouter(prefix="/auth", tags=["auth"])

# Public browser configuration, mounted without the /auth prefix
config_router = APIRouter(tags=["config"])


def get_session_auth_service(supabase: Client = Depends(get_session_supabase)) -> AuthService:
    return AuthService(supabase)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_session_auth_service),
    supabase: Client = Depends(get_supabase)
):
    """Register a new user and create their users row and default scan limit"""
    users = UserService(supabase)
    if users.get_user_by_email(register_data.email):
        raise HTTPException(status_code=409, detail="User with this email already exists")
    registered = service.register(register_data)
    users.get_or_create_user(registered.user_id, registered.email)
    return registered


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout():
    """Logout; tokens are stateless JWTs, so the client just drops its token"""
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserResponse = Depends(get_current_app_user)):
    """Get current authenticated user (without the placeholder password)"""
    return current_user


@config_router.get("/supabase-credentials", response_model=SupabaseCredentialsResponse)
async def get_supabase_credentials():
    """Public Supabase URL and anon key for the browser client"""
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise HTTPException(status_code=500, detail="Supabase credentials are not configured")
    return SupabaseCredentialsResponse(
        supabase_url=settings.supabase_url,
        supabase_anon_key=settings.supabase_anon_key
    )
