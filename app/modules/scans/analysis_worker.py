import logging
from typing import Optional

from supabase import Client

from app.modules.dietary_profiles.schemas import DietaryProfileResponse
from app.modules.food.analyzer import FoodAnalyzer, fallback_result
from app.modules.scans.service import ScanService

logger = logging.getLogger(__name__)


def analyze_scan_async(
    scan_id: str,
    image_bytes: bytes,
    content_type: str,
    profile: DietaryProfileResponse,
    model: Optional[str],
    analyzer: FoodAnalyzer,
    supabase: Client
):
    """
    Background analysis for a placeholder scan.
    Runs after the upload response is sent; the outcome is only visible by
    polling the scan row. Any failure writes the fallback analysis so the
    scan never stays in the processing state.
    """
    scan_service = ScanService(supabase)
    try:
        analysis = analyzer.analyze(image_bytes, profile, model=model, content_type=content_type)
    except Exception as e:
        logger.error(f"Background analysis failed for scan {scan_id}: {str(e)}")
        analysis = fallback_result()

    try:
        scan_service.apply_analysis(scan_id, analysis)
        logger.info(f"Scan {scan_id} analysed: {analysis.food_name} (is_safe={analysis.is_safe})")
    except Exception as e:
        logger.error(f"Could not store analysis for scan {scan_id}: {str(e)}")
