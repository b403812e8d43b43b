"""Offline market generator, seeded by page so every run is reproducible."""
import numpy as np

from common.models import AssetSnapshot
from config.settings import PER_PAGE
from ingest.base import BaseIngestor

SPARKLINE_POINTS = 168  # 7 days of hourly samples


class MockIngestor(BaseIngestor):
    def __init__(self, per_page: int = PER_PAGE, **kwargs):
        super().__init__(**kwargs)
        self.per_page = per_page

    def fetch(self, page: int) -> list[AssetSnapshot]:
        self.logger.info(f"Generating mock page {page}...")
        return self.parse(self._mock_data(page))

    def _mock_data(self, page: int) -> list[dict]:
        """CoinGecko-shaped records, ordered by volume descending."""
        rng = np.random.default_rng(page)
        n = self.per_page
        market_cap = np.exp(rng.uniform(np.log(5e6), np.log(1e12), n))
        volume = market_cap * rng.uniform(0.01, 0.8, n)
        base_price = np.exp(rng.uniform(np.log(1e-4), np.log(5e4), n))
        change = rng.normal(0, 6, n)
        rows = []
        for i in range(n):
            path = base_price[i] * np.exp(np.cumsum(rng.normal(0, 0.01, SPARKLINE_POINTS)))
            rank = (page - 1) * n + i + 1
            rows.append({
                "id": f"mock-coin-{rank}",
                "symbol": f"mc{rank}",
                "name": f"Mock Coin {rank}",
                "image": "",
                "current_price": float(path[-1]),
                "price_change_percentage_24h": float(change[i]),
                "total_volume": float(volume[i]),
                "market_cap": float(market_cap[i]),
                "sparkline_in_7d": {"price": [float(p) for p in path]},
            })
        rows.sort(key=lambda r: r["total_volume"], reverse=True)
        return rows
