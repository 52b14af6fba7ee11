from supabase import Client
from app.database.supabase_client import first_row
from app.modules.food.schemas import AnalysisResult
from app.modules.scans.models import (
    FOOD_SCANS_TABLE, PROCESSING_FOOD_NAME, PROCESSING_SAFETY_REASON, PROCESSING_DESCRIPTION
)
from app.modules.scans.schemas import FoodScanResponse, ScanStatsResponse
from typing import List, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import uuid
import logging

logger = logging.getLogger(__name__)


def analysis_row(analysis: AnalysisResult) -> dict:
    """Scan columns written from a finished analysis"""
    return {
        "food_name": analysis.food_name,
        "ingredients": analysis.ingredients,
        "is_safe": analysis.is_safe,
        "safety_reason": analysis.safety_reason,
        "unsafe_reasons": [] if analysis.is_safe is True else analysis.unsafe_reasons,
        "description": analysis.description,
    }


class ScanService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_scan(
        self,
        user_id: str,
        image_url: str,
        analysis: Optional[AnalysisResult] = None
    ) -> FoodScanResponse:
        """Insert a scan row; without an analysis the row is a processing placeholder"""
        if analysis is not None:
            values = analysis_row(analysis)
        else:
            values = {
                "food_name": PROCESSING_FOOD_NAME,
                "ingredients": [],
                "is_safe": None,
                "safety_reason": PROCESSING_SAFETY_REASON,
                "unsafe_reasons": [],
                "description": PROCESSING_DESCRIPTION,
            }
        try:
            result = self.supabase.table(FOOD_SCANS_TABLE).insert({
                "id": str(uuid.uuid4()),
                "user_id": user_id,
                "image_url": image_url,
                "scanned_at": datetime.now(timezone.utc).isoformat(),
                **values,
            }).execute()
            row = first_row(result)
            if not row:
                raise HTTPException(status_code=500, detail="Failed to create scan")
            return FoodScanResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating scan for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create scan")

    def get_scan(self, scan_id: str) -> Optional[FoodScanResponse]:
        try:
            result = self.supabase.table(FOOD_SCANS_TABLE)\
                .select("*")\
                .eq("id", scan_id)\
                .limit(1)\
                .execute()
            row = first_row(result)
            return FoodScanResponse(**row) if row else None
        except Exception as e:
            logger.error(f"Error getting scan {scan_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load scan")

    def get_owned_scan(self, scan_id: str, user_id: str) -> FoodScanResponse:
        """Scan by id; 404 when missing, 403 when it belongs to someone else"""
        scan = self.get_scan(scan_id)
        if not scan:
            raise HTTPException(status_code=404, detail="Scan not found")
        if scan.user_id != user_id:
            logger.info(f"Forbidden: {user_id} tried to access scan {scan_id}")
            raise HTTPException(status_code=403, detail="Forbidden")
        return scan

    def list_scans(self, user_id: str, limit: Optional[int] = None) -> List[FoodScanResponse]:
        """User's scans, newest first"""
        try:
            query = self.supabase.table(FOOD_SCANS_TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("scanned_at", desc=True)
            if limit is not None:
                query = query.limit(limit)
            result = query.execute()
            return [FoodScanResponse(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error listing scans for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load scans")

    def apply_analysis(self, scan_id: str, analysis: AnalysisResult) -> FoodScanResponse:
        try:
            result = self.supabase.table(FOOD_SCANS_TABLE)\
                .update(analysis_row(analysis))\
                .eq("id", scan_id)\
                .execute()
            row = first_row(result)
            if not row:
                raise HTTPException(status_code=404, detail="Scan not found")
            return FoodScanResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating scan {scan_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update scan")

    def delete_user_scans(self, user_id: str) -> List[FoodScanResponse]:
        """Delete every scan of a user and return the removed rows"""
        scans = self.list_scans(user_id)
        if not scans:
            return []
        try:
            self.supabase.table(FOOD_SCANS_TABLE)\
                .delete()\
                .eq("user_id", user_id)\
                .execute()
            logger.info(f"Deleted {len(scans)} scans for user {user_id}")
            return scans
        except Exception as e:
            logger.error(f"Error deleting scans for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error when deleting scans")

    def get_stats(self, user_id: str) -> ScanStatsResponse:
        scans = self.list_scans(user_id)
        return ScanStatsResponse(
            safe=sum(1 for s in scans if s.is_safe is True),
            caution=sum(1 for s in scans if s.is_safe is None),
            unsafe=sum(1 for s in scans if s.is_safe is False),
        )
