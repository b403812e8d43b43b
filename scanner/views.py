"""Read-side helpers: filtering, sorting and summarising a scan result."""
import math
from enum import Enum
from typing import Iterable

from common.formatting import format_change, format_price, format_volume
from common.models import ScanResult, ScoredAsset


class SignalFilter(str, Enum):
    ALL = "ALL"
    BUY = "BUY"
    WAIT = "WAIT"
    SELL = "SELL"


class SortKey(str, Enum):
    SCORE = "score"
    CHANGE = "change"
    VOLUME = "volume"


def _sort_value(asset: ScoredAsset, key: SortKey) -> float:
    snap = asset.snapshot
    if key == SortKey.CHANGE:
        return snap.change_24h if snap.change_24h is not None else 0.0
    if key == SortKey.VOLUME:
        return snap.volume if snap.volume is not None else 0.0
    return asset.analysis.score


def filter_and_sort(assets: Iterable[ScoredAsset],
                    signal: SignalFilter = SignalFilter.ALL,
                    sort: SortKey = SortKey.SCORE) -> list[ScoredAsset]:
    """Descending by the chosen key; ties keep their incoming order."""
    signal, sort = SignalFilter(signal), SortKey(sort)
    selected = [a for a in assets
                if signal == SignalFilter.ALL or a.analysis.signal.value == signal.value]
    return sorted(selected, key=lambda a: _sort_value(a, sort), reverse=True)


def summarize(assets: Iterable[ScoredAsset]) -> dict:
    assets = list(assets)
    counts = {s.value: 0 for s in SignalFilter if s != SignalFilter.ALL}
    for a in assets:
        counts[a.analysis.signal.value] += 1
    avg_conf = math.floor(sum(a.analysis.confidence for a in assets) / len(assets) + 0.5) if assets else 0
    return {
        "total": len(assets),
        "buy": counts["BUY"],
        "sell": counts["SELL"],
        "wait": counts["WAIT"],
        "avg_confidence": avg_conf,
    }


def to_row(asset: ScoredAsset) -> dict:
    s, a = asset.snapshot, asset.analysis
    return {
        "id": s.id,
        "symbol": s.symbol,
        "name": s.name,
        "image": s.image,
        "price": s.price,
        "change_24h": s.change_24h,
        "volume": s.volume,
        "market_cap": s.market_cap,
        "score": a.score,
        "signal": a.signal.value,
        "confidence": a.confidence,
        "risk_score": a.risk_score,
        "trend": a.trend.value,
        "sentiment": a.sentiment.value,
        "display": {
            "price": format_price(s.price),
            "change_24h": format_change(s.change_24h),
            "volume": format_volume(s.volume),
        },
    }


def to_detail(asset: ScoredAsset) -> dict:
    row = to_row(asset)
    row["factor_scores"] = asset.analysis.factor_scores.model_dump()
    row["price_history"] = [{"time": p.time, "price": p.price} for p in asset.snapshot.price_history]
    return row


def scores_payload(result: ScanResult) -> dict:
    return {
        "type": "scores_update",
        "timestamp": result.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "page": result.page,
        "scores": [to_row(a) for a in result.assets],
    }
