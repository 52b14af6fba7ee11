from supabase import Client
from app.database.supabase_client import first_row
from app.modules.dietary_profiles.models import DIETARY_PROFILES_TABLE
from app.modules.dietary_profiles.schemas import DietaryProfileUpdate, DietaryProfileResponse
from typing import Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import uuid
import logging

logger = logging.getLogger(__name__)


class DietaryProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> Optional[DietaryProfileResponse]:
        """Get a user's dietary profile, or None when they have not set one up"""
        try:
            result = self.supabase.table(DIETARY_PROFILES_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return DietaryProfileResponse(**row) if row else None
        except Exception as e:
            logger.error(f"Error getting dietary profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load dietary profile")

    def create_profile(self, user_id: str, profile_data: Optional[DietaryProfileUpdate] = None) -> DietaryProfileResponse:
        profile_data = profile_data or DietaryProfileUpdate()
        now = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(DIETARY_PROFILES_TABLE).insert({
                "id": str(uuid.uuid4()),
                "user_id": user_id,
                "allergies": profile_data.allergies,
                "dietary_preferences": profile_data.dietary_preferences,
                "health_restrictions": profile_data.health_restrictions,
                "created_at": now,
                "updated_at": now,
            }).execute()
            row = first_row(result)
            if not row:
                raise HTTPException(status_code=500, detail="Failed to create dietary profile")
            logger.info(f"Created dietary profile for user {user_id}")
            return DietaryProfileResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating dietary profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create dietary profile")

    def update_profile(self, profile_id: str, profile_data: DietaryProfileUpdate) -> Optional[DietaryProfileResponse]:
        """Replace all three tag lists; None when the row no longer exists"""
        try:
            result = self.supabase.table(DIETARY_PROFILES_TABLE)\
                .update({
                    "allergies": profile_data.allergies,
                    "dietary_preferences": profile_data.dietary_preferences,
                    "health_restrictions": profile_data.health_restrictions,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", profile_id)\
                .execute()
            row = first_row(result)
            return DietaryProfileResponse(**row) if row else None
        except Exception as e:
            logger.error(f"Error updating dietary profile {profile_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update dietary profile")

    def get_or_create_profile(self, user_id: str) -> DietaryProfileResponse:
        profile = self.get_profile(user_id)
        if profile:
            return profile
        return self.create_profile(user_id)

    def save_profile(self, user_id: str, profile_data: DietaryProfileUpdate) -> DietaryProfileResponse:
        """Update the user's profile, or create it if there is none yet"""
        existing = self.get_profile(user_id)
        if existing:
            updated = self.update_profile(existing.id, profile_data)
            if updated:
                return updated
            logger.info(f"Dietary profile {existing.id} vanished during update, recreating")
        return self.create_profile(user_id, profile_data)
