import calendar
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from supabase import Client

from app.config.settings import settings
from app.database.supabase_client import first_row
from app.modules.scan_limits.models import scan_limits_table
from app.modules.scan_limits.schemas import ScanLimitResponse

logger = logging.getLogger(__name__)


def add_month(moment: datetime) -> datetime:
    """Same day next month, clamped to the last day of a shorter month."""
    year = moment.year + moment.month // 12
    month = moment.month % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class ScanLimitService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.table = scan_limits_table()

    def get_limit(self, user_id: str) -> Optional[ScanLimitResponse]:
        """Get the stored scan limit row for a user, without creating one"""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return ScanLimitResponse(**row) if row else None
        except Exception as e:
            logger.error(f"Error getting scan limit for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load scan limit")

    def create_limit(self, user_id: str, max_scans: Optional[int] = None) -> ScanLimitResponse:
        """Create the default monthly limit for a user"""
        now = datetime.now(timezone.utc)
        try:
            result = self.supabase.table(self.table).insert({
                "id": str(uuid.uuid4()),
                "user_id": user_id,
                "scans_used": 0,
                "max_scans": max_scans if max_scans is not None else settings.default_max_scans,
                "reset_date": add_month(now).isoformat(),
            }).execute()
            row = first_row(result)
            if not row:
                raise HTTPException(status_code=500, detail="Failed to create scan limit")
            logger.info(f"Created default scan limit for user {user_id}")
            return ScanLimitResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating scan limit for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create scan limit")

    def get_or_create_limit(self, user_id: str) -> ScanLimitResponse:
        """Return the user's limit, creating it on first access and rolling the monthly window"""
        limit = self.get_limit(user_id)
        if limit is None:
            return self.create_limit(user_id)
        return self._reset_if_due(limit)

    def _reset_if_due(self, limit: ScanLimitResponse) -> ScanLimitResponse:
        now = datetime.now(timezone.utc)
        reset_date = _as_utc(limit.reset_date)
        if now < reset_date:
            return limit
        while reset_date <= now:
            reset_date = add_month(reset_date)
        logger.info(f"Resetting monthly scan count for user {limit.user_id}")
        return self._update(limit.user_id, {
            "scans_used": 0,
            "reset_date": reset_date.isoformat(),
        })

    def ensure_can_scan(self, user_id: str) -> ScanLimitResponse:
        """Raise 403 when the monthly quota is used up"""
        limit = self.get_or_create_limit(user_id)
        if limit.is_exhausted:
            raise HTTPException(
                status_code=403,
                detail="Monthly scan limit reached. Upgrade to continue scanning."
            )
        return limit

    def increment_scan_count(self, user_id: str) -> ScanLimitResponse:
        limit = self.get_or_create_limit(user_id)
        return self._update(user_id, {"scans_used": limit.scans_used + 1})

    def _update(self, user_id: str, update_data: dict) -> ScanLimitResponse:
        try:
            result = self.supabase.table(self.table)\
                .update(update_data)\
                .eq("user_id", user_id)\
                .execute()
            row = first_row(result)
            if not row:
                raise HTTPException(status_code=404, detail="Scan limit not found")
            return ScanLimitResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating scan limit for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update scan limit")
