"""Base ingestor abstract class."""
import random
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import ValidationError

from common.logger import get_logger
from common.models import AssetSnapshot, PricePoint
from config.settings import MAX_PAGE


class FetchError(Exception):
    """Market data could not be fetched or parsed; the whole batch is unusable."""


class BaseIngestor(ABC):
    def __init__(self, max_page: int = MAX_PAGE, rng: Optional[random.Random] = None):
        self.logger = get_logger(self.__class__.__name__)
        self.max_page = max_page
        self.rng = rng or random.Random()

    def pick_page(self) -> int:
        """Uniformly pick one of the first `max_page` pages."""
        return self.rng.randint(1, self.max_page)

    @abstractmethod
    def fetch(self, page: int) -> list[AssetSnapshot]:
        """Fetch one page of market snapshots. Raises FetchError on any failure."""
        pass

    def parse(self, data) -> list[AssetSnapshot]:
        """Convert a /coins/markets style payload into snapshots.

        A single malformed record fails the whole batch.
        """
        if not isinstance(data, list):
            raise FetchError(f"Unexpected payload type: {type(data).__name__}")
        try:
            return [self._to_snapshot(c) for c in data]
        except (ValidationError, KeyError, TypeError, AttributeError) as e:
            raise FetchError(f"Malformed market record: {e}") from e

    @staticmethod
    def _to_snapshot(c: dict) -> AssetSnapshot:
        sparkline = (c.get("sparkline_in_7d") or {}).get("price") or []
        return AssetSnapshot(
            id=c["id"],
            symbol=c["symbol"].upper(),
            name=c["name"],
            image=c.get("image") or "",
            price=c["current_price"],
            change_24h=c.get("price_change_percentage_24h"),
            volume=c.get("total_volume"),
            market_cap=c.get("market_cap"),
            price_history=tuple(PricePoint(time=i, price=p) for i, p in enumerate(sparkline)),
        )
