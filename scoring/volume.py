"""Volume scorer: linear in turnover, capped at 99."""
from common.models import AssetSnapshot
from scoring.base import BaseScorer, NEUTRAL


class VolumeScorer(BaseScorer):
    def score(self, snapshot: AssetSnapshot) -> float:
        ratio = snapshot.volume_to_cap
        if ratio is None:
            return NEUTRAL
        return self.clip(NEUTRAL + ratio * 100, high=99.0)
