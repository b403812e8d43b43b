"""CoinGecko public API ingestor (API key optional)."""
import requests

from common.models import AssetSnapshot
from config.settings import COINGECKO_API_KEY, COINGECKO_BASE_URL, PER_PAGE, REQUEST_TIMEOUT_SEC
from ingest.base import BaseIngestor, FetchError


class CoinGeckoIngestor(BaseIngestor):
    def __init__(self, base_url: str = COINGECKO_BASE_URL, api_key: str = COINGECKO_API_KEY,
                 per_page: int = PER_PAGE, **kwargs):
        super().__init__(**kwargs)
        self.markets_url = f"{base_url.rstrip('/')}/coins/markets"
        self.api_key = api_key
        self.per_page = per_page

    def fetch(self, page: int) -> list[AssetSnapshot]:
        params = {
            "vs_currency": "usd",
            "order": "volume_desc",
            "per_page": self.per_page,
            "page": page,
            "price_change_percentage": "24h",
            "sparkline": "true",
        }
        headers = {"x-cg-demo-api-key": self.api_key} if self.api_key else {}
        try:
            self.logger.info(f"Fetching page {page} from CoinGecko...")
            resp = requests.get(self.markets_url, params=params, headers=headers,
                                timeout=REQUEST_TIMEOUT_SEC)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"CoinGecko request failed: {e}") from e
        snapshots = self.parse(data)
        self.logger.info(f"Got {len(snapshots)} assets from page {page}")
        return snapshots
