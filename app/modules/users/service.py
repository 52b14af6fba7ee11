from supabase import Client
from app.database.supabase_client import first_row
from app.modules.users.models import USERS_TABLE
from app.modules.users.schemas import UserResponse, UserProfileUpdate, UserProfileResponse
from app.modules.scan_limits.service import ScanLimitService
from typing import Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# Supabase Auth owns credentials; the users table only needs a non-null value
PLACEHOLDER_PASSWORD = "placeholder_password"


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user(self, user_id: str) -> Optional[UserResponse]:
        """Get user record by ID"""
        try:
            result = self.supabase.table(USERS_TABLE)\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return UserResponse(**row) if row else None
        except Exception as e:
            logger.error(f"Error getting user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load user")

    def get_user_by_email(self, email: str) -> Optional[UserResponse]:
        """Get user record by email"""
        try:
            result = self.supabase.table(USERS_TABLE)\
                .select("*")\
                .eq("email", email)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return UserResponse(**row) if row else None
        except Exception as e:
            logger.error(f"Error getting user by email {email}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load user")

    def create_user(self, user_id: str, email: str) -> UserResponse:
        """Create the users row mirroring a Supabase Auth user"""
        existing = self.get_user_by_email(email)
        if existing:
            if existing.id != user_id:
                logger.warning(f"User with email {email} already exists with id {existing.id}")
            return existing
        now = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(USERS_TABLE).insert({
                "id": user_id,
                "email": email,
                "password": PLACEHOLDER_PASSWORD,
                "created_at": now,
                "updated_at": now,
            }).execute()
            row = first_row(result)
            if not row:
                raise HTTPException(status_code=500, detail="Failed to create user record")
            logger.info(f"Created user record {user_id}")
            return UserResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create user record")

    def get_or_create_user(self, user_id: str, email: Optional[str]) -> UserResponse:
        """Return the user's row, creating it and its default scan limit on first access"""
        user = self.get_user(user_id)
        if user:
            return user
        if not email:
            raise HTTPException(status_code=404, detail="User not found")
        user = self.create_user(user_id, email)
        limits = ScanLimitService(self.supabase)
        if limits.get_limit(user.id) is None:
            limits.create_limit(user.id)
        return user

    def get_profile(self, user_id: str) -> UserProfileResponse:
        user = self.get_user(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User profile not found")
        return UserProfileResponse(**user.model_dump(include=set(UserProfileResponse.model_fields)))

    def update_profile(self, user_id: str, profile_data: UserProfileUpdate) -> UserProfileResponse:
        """Update user profile fields that were provided"""
        update_data = profile_data.model_dump(exclude_none=True)
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        row = self._update(user_id, update_data)
        return UserProfileResponse(**{k: row.get(k) for k in UserProfileResponse.model_fields})

    def get_ai_model(self, user_id: str) -> Optional[str]:
        user = self.get_user(user_id)
        return user.ai_model if user else None

    def set_ai_model(self, user_id: str, model: str) -> str:
        row = self._update(user_id, {
            "ai_model": model,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        return row["ai_model"]

    def _update(self, user_id: str, update_data: dict) -> dict:
        try:
            result = self.supabase.table(USERS_TABLE)\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            row = first_row(result)
            if not row:
                raise HTTPException(status_code=404, detail="User not found")
            return row
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update user")
