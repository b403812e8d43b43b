"""
QuantAI Signal — Master Aggregator

Blends four sub-scores into a single score (1..99) and derives the
categorical labels shown on the scanner.

Weights:
  Momentum    35% — 24h price change
  Volatility  25% — turnover buckets (volume / market cap)
  Volume      20% — turnover, linear
  Trend       20% — monotonic run over the last sparkline points

Confidence and risk are computed from the same snapshot and the final score.
"""
import math
from typing import Optional

import numpy as np

from common.logger import get_logger
from common.models import AssetAnalysis, AssetSnapshot, FactorScores, Sentiment, Signal, Trend
from config.settings import SCORING_WEIGHTS
from scoring.momentum import MomentumScorer
from scoring.trend import TrendScorer
from scoring.volatility import VolatilityScorer
from scoring.volume import VolumeScorer

logger = get_logger("aggregator")

WEIGHTS = dict(SCORING_WEIGHTS)

assert abs(sum(WEIGHTS.values()) - 1.0) < 0.001, "Weights must sum to 1.0"

SCORERS = {
    "momentum":   MomentumScorer(),
    "volatility": VolatilityScorer(),
    "volume":     VolumeScorer(),
    "trend":      TrendScorer(),
}

SMALL_CAP_USD = 100_000_000


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def composite_score(factor_scores: dict[str, float]) -> int:
    raw = sum(factor_scores[k] * WEIGHTS[k] for k in WEIGHTS)
    return int(np.clip(_round_half_up(raw), 1, 99))


def signal_from_score(score: int) -> Signal:
    if score > 80: return Signal.BUY
    if score < 40: return Signal.SELL
    return Signal.WAIT


def sentiment_from_score(score: int) -> Sentiment:
    if score > 75: return Sentiment.BULLISH
    if score < 35: return Sentiment.BEARISH
    return Sentiment.NEUTRAL


def trend_from_change(change_24h: Optional[float]) -> Trend:
    change = change_24h if change_24h is not None else 0.0
    if change > 2:  return Trend.UP
    if change < -2: return Trend.DOWN
    return Trend.STABLE


def confidence(snapshot: AssetSnapshot) -> int:
    """Data completeness: every present field adds to the base of 50."""
    value = 50
    if snapshot.market_cap is not None:
        value += 20
    if snapshot.volume is not None:
        value += 15
    if snapshot.change_24h is not None:
        value += 15
    return int(np.clip(value, 0, 100))


def risk_score(snapshot: AssetSnapshot, score: int) -> int:
    risk = 50
    ratio = snapshot.volume_to_cap
    if ratio is not None:
        if ratio > 0.5:
            risk += 30
        elif ratio > 0.25:
            risk += 15
    if score > 85:
        risk += 10
    if score < 25:
        risk += 20
    if snapshot.market_cap is not None and snapshot.market_cap < SMALL_CAP_USD:
        risk += 25
    return int(np.clip(risk, 0, 100))


def score_asset(snapshot: AssetSnapshot) -> AssetAnalysis:
    """
    Main scoring entry point.
    Pure function of the snapshot: identical input yields an identical analysis.
    """
    factor_scores = {name: scorer.score(snapshot) for name, scorer in SCORERS.items()}
    score = composite_score(factor_scores)

    logger.debug(f"{snapshot.symbol} factors: {', '.join(f'{k}={v:.1f}' for k, v in factor_scores.items())}"
                 f" → {score} {signal_from_score(score).value}")

    return AssetAnalysis(
        score=score,
        signal=signal_from_score(score),
        confidence=confidence(snapshot),
        risk_score=risk_score(snapshot, score),
        trend=trend_from_change(snapshot.change_24h),
        sentiment=sentiment_from_score(score),
        factor_scores=FactorScores(**{k: round(v, 2) for k, v in factor_scores.items()}),
    )
