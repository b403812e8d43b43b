"""In-memory holder of the latest scan result.

Readers always see either the previous complete result or the new complete
result: a cycle publishes by swapping a single reference, never by mutating
the published tuple.
"""
from datetime import datetime, timezone
from typing import Optional

from common.logger import get_logger
from common.models import ScanResult

logger = get_logger("storage")


class ScanStore:
    def __init__(self):
        self._latest: Optional[ScanResult] = None
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None

    @property
    def latest(self) -> Optional[ScanResult]:
        return self._latest

    def publish(self, result: ScanResult) -> None:
        self._latest = result
        self.last_error = None
        self.last_error_at = None
        logger.info("Published %d scored assets (page %d)", len(result.assets), result.page)

    def record_failure(self, message: str) -> None:
        """Remember the failure for the UI; the last good result stays visible."""
        self.last_error = message
        self.last_error_at = datetime.now(timezone.utc)

    def clear(self) -> None:
        self._latest = None
        self.last_error = None
        self.last_error_at = None


store = ScanStore()
