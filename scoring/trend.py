"""Trend scorer: monotonic run over the tail of the sparkline."""
import pandas as pd
from common.models import AssetSnapshot
from scoring.base import BaseScorer, NEUTRAL

MIN_POINTS = 3
WINDOW = 5


class TrendScorer(BaseScorer):
    def score(self, snapshot: AssetSnapshot) -> float:
        if len(snapshot.price_history) < MIN_POINTS:
            return NEUTRAL

        recent = pd.Series([p.price for p in snapshot.price_history]).tail(WINDOW)

        # non-strict: a flat tail counts as an uptrend
        if recent.is_monotonic_increasing:
            return 80.0
        if recent.is_monotonic_decreasing:
            return 30.0
        return NEUTRAL
