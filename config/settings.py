"""Configuration loader."""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# "coingecko" for the live API, "mock" for the offline generator
MARKET_DATA_SOURCE = os.getenv("MARKET_DATA_SOURCE", "coingecko")

COINGECKO_BASE_URL = os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3")
COINGECKO_API_KEY = os.getenv("COINGECKO_API_KEY", "")
PER_PAGE = int(os.getenv("PER_PAGE", "50"))
MAX_PAGE = int(os.getenv("MAX_PAGE", "10"))
REQUEST_TIMEOUT_SEC = float(os.getenv("REQUEST_TIMEOUT_SEC", "10"))

POLL_INTERVAL_SEC = float(os.getenv("POLL_INTERVAL_SEC", "30"))

PRO_USERS = [u.strip().lower() for u in os.getenv("PRO_USERS", "").split(",") if u.strip()]

SCORING_WEIGHTS = {
    "momentum": 0.35,
    "volatility": 0.25,
    "volume": 0.20,
    "trend": 0.20,
}
