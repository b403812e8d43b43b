"""One scan cycle: fetch a page, classify every asset, publish the sorted result."""
import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, Optional

from common.logger import get_logger, new_request_id
from common.models import AssetSnapshot, ScanResult, ScoredAsset, Signal
from config.settings import MARKET_DATA_SOURCE
from ingest.base import BaseIngestor, FetchError
from ingest.coingecko import CoinGeckoIngestor
from ingest.mock import MockIngestor
from scanner.views import scores_payload
from scoring.aggregator import score_asset
from storage.latest import ScanStore

logger = get_logger("scanner")

FAILURE_MESSAGE = "Scanner temporarily rate-limited. Please wait 30s."

INGESTORS = {
    "coingecko": CoinGeckoIngestor,
    "mock":      MockIngestor,
}

Notifier = Callable[[dict], Awaitable[None]]


def make_ingestor(source: str = MARKET_DATA_SOURCE) -> BaseIngestor:
    try:
        return INGESTORS[source]()
    except KeyError:
        raise ValueError(f"Unknown market data source '{source}'. "
                         f"Available: {', '.join(sorted(INGESTORS))}") from None


def classify(snapshots: Iterable[AssetSnapshot]) -> tuple[ScoredAsset, ...]:
    """Score every snapshot and order by score, highest first."""
    scored = [ScoredAsset(snapshot=s, analysis=score_asset(s)) for s in snapshots]
    return tuple(sorted(scored, key=lambda a: a.analysis.score, reverse=True))


def scan_once(ingestor: BaseIngestor, page: Optional[int] = None,
              request_id: str = "") -> ScanResult:
    """Blocking fetch + classify. Raises FetchError; returns a complete result otherwise."""
    page = page if page is not None else ingestor.pick_page()
    snapshots = ingestor.fetch(page)
    return ScanResult(
        assets=classify(snapshots),
        page=page,
        timestamp=datetime.now(timezone.utc),
        request_id=request_id,
    )


async def run_scan_cycle(ingestor: BaseIngestor, store: ScanStore,
                         notify: Optional[Notifier] = None) -> Optional[ScanResult]:
    """Run one cycle; on FetchError the store keeps its previous result."""
    rid = new_request_id()
    logger.info("🔄 Starting scan cycle...")
    try:
        result = await asyncio.to_thread(scan_once, ingestor, None, rid)
    except FetchError as e:
        logger.error(f"❌ Scan failed: {e}")
        store.record_failure(FAILURE_MESSAGE)
        if notify is not None:
            await notify({
                "type": "scan_error",
                "timestamp": store.last_error_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
                "message": FAILURE_MESSAGE,
            })
        return None

    store.publish(result)
    buys = sum(1 for a in result.assets if a.analysis.signal == Signal.BUY)
    logger.info(f"🏁 Scan cycle done: {len(result.assets)} assets, {buys} BUY")
    if notify is not None:
        await notify(scores_payload(result))
    return result
