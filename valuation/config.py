import os
from pathlib import Path

METRIC_THRESHOLDS = {
    "ev_ebitda": (15.0, 25.0),
    "pe": (15.0, 25.0),
    "pb": (1.5, 3.0),
    "ev_revenue": (2.0, 5.0),
    # yield: above the first is cheap, below the second is expensive
    "fcf_yield": (5.0, 2.0),
    "debt_to_equity": (1.0, 2.0),
}

METRIC_WEIGHTS = {
    "ev_ebitda": 1.0,
    "pe": 1.0,
    "pb": 0.8,
    "ev_revenue": 0.8,
    "fcf_yield": 1.0,
    "debt_to_equity": 0.6,
}

MAJORITY_SHARE = 0.5
DISPLAY_DECIMALS = 2

DEFAULT_WATCHLIST = ["AAPL", "MSFT", "GOOGL", "AMZN", "JNJ", "KO", "XOM", "JPM"]
SEARCH_MAX_RESULTS = 8

CACHE_DIR = Path(os.environ.get("VALUATION_CACHE_DIR", "data_cache"))
CACHE_VERSION = "v1"
CACHE_DATE_FILE = CACHE_DIR / "cache_meta.json"
CACHE_FRAME_NAME = "watchlist"

LOOKUP_TTL_SECONDS = 60 * 10
WATCHLIST_TTL_SECONDS = 60 * 30
