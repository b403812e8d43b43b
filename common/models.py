"""Core Pydantic models for the QuantAI signal scanner."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Signal(str, Enum):
    BUY = "BUY"
    WAIT = "WAIT"
    SELL = "SELL"


class Trend(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class Sentiment(str, Enum):
    BULLISH = "BULLISH"
    NEUTRAL = "NEUTRAL"
    BEARISH = "BEARISH"


class PricePoint(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    time: int
    price: float


class AssetSnapshot(BaseModel):
    """Raw market fields for one asset in one polling cycle."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str
    symbol: str
    name: str
    image: str = ""
    price: float = Field(gt=0)
    change_24h: Optional[float] = None
    volume: Optional[float] = Field(default=None, ge=0)
    market_cap: Optional[float] = Field(default=None, ge=0)
    price_history: tuple[PricePoint, ...] = ()

    @property
    def volume_to_cap(self) -> Optional[float]:
        """volume / market_cap, or None when either side is missing or the cap is zero."""
        if self.volume is None or self.market_cap is None or self.market_cap == 0:
            return None
        return self.volume / self.market_cap


class FactorScores(BaseModel):
    """Sub-scores that fed the composite, each in [0, 100]."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    momentum: float
    volatility: float
    volume: float
    trend: float


class AssetAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=1, le=99)
    signal: Signal
    confidence: int = Field(ge=0, le=100)
    risk_score: int = Field(ge=0, le=100)
    trend: Trend
    sentiment: Sentiment
    factor_scores: FactorScores

    @property
    def signal_emoji(self) -> str:
        return {"BUY": "🟢", "WAIT": "⚪", "SELL": "🔴"}.get(self.signal.value, "⚪")


class ScoredAsset(BaseModel):
    model_config = ConfigDict(frozen=True)

    snapshot: AssetSnapshot
    analysis: AssetAnalysis


class ScanResult(BaseModel):
    """Everything one successful scan cycle produced, sorted by score descending."""
    model_config = ConfigDict(frozen=True)

    assets: tuple[ScoredAsset, ...] = ()
    page: int
    timestamp: datetime
    request_id: str = ""
