"""Volatility scorer: turnover (volume / market cap) buckets."""
from common.models import AssetSnapshot
from scoring.base import BaseScorer, NEUTRAL


class VolatilityScorer(BaseScorer):
    def score(self, snapshot: AssetSnapshot) -> float:
        ratio = snapshot.volume_to_cap
        if ratio is None:
            return NEUTRAL
        if ratio > 0.5:
            return 85.0
        if ratio > 0.25:
            return 70.0
        if ratio > 0.1:
            return 60.0
        if ratio > 0.05:
            return 45.0
        return NEUTRAL
