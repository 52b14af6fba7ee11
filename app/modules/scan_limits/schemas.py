from datetime import datetime
from typing import Optional

from app.core.schemas import CamelModel


class ScanLimitResponse(CamelModel):
    id: Optional[str] = None
    user_id: str
    scans_used: int = 0
    max_scans: int = 10
    reset_date: datetime

    @property
    def is_exhausted(self) -> bool:
        return self.scans_used >= self.max_scans
