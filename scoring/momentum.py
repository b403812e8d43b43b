"""Momentum scorer: step function of the 24h price change."""
from common.models import AssetSnapshot
from scoring.base import BaseScorer, NEUTRAL


class MomentumScorer(BaseScorer):
    def score(self, snapshot: AssetSnapshot) -> float:
        change = snapshot.change_24h if snapshot.change_24h is not None else 0.0
        if change > 10:
            return 90.0
        if change > 5:
            return 75.0
        if change > 2:
            return 60.0
        if change < -5:
            return 25.0
        if change < -2:
            return 35.0
        return NEUTRAL
