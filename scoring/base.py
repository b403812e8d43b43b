"""Base scorer abstract class."""
from abc import ABC, abstractmethod
import numpy as np
from common.logger import get_logger
from common.models import AssetSnapshot

NEUTRAL = 50.0


class BaseScorer(ABC):
    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def score(self, snapshot: AssetSnapshot) -> float:
        """Return sub-score in [0, 100]; 50 is neutral."""
        pass

    @staticmethod
    def clip(value: float, low: float = 0.0, high: float = 100.0) -> float:
        return float(np.clip(value, low, high))
