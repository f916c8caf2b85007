import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from . import config

logger = logging.getLogger(__name__)


def _cache_path(name: str) -> Path:
    config.CACHE_DIR.mkdir(parents=True, exist_ok=True)
    return config.CACHE_DIR / f"{name.lower()}_{config.CACHE_VERSION}.pkl"


def save_valuation_frame(df: pd.DataFrame, name: str = config.CACHE_FRAME_NAME) -> None:
    path = _cache_path(name)
    df.to_pickle(path)
    logger.debug(f"Saved {len(df)} valuation rows to {path}")


def load_valuation_frame(name: str = config.CACHE_FRAME_NAME) -> pd.DataFrame | None:
    path = _cache_path(name)
    if not path.exists():
        return None
    return pd.read_pickle(path)


def save_meta(updates: dict[str, str]) -> None:
    config.CACHE_DIR.mkdir(parents=True, exist_ok=True)
    meta = load_meta()
    meta.update(updates)
    meta["updated_at_utc"] = datetime.now(timezone.utc).isoformat()
    _meta_path().write_text(json.dumps(meta, ensure_ascii=False, indent=2), encoding="utf-8")


def load_meta() -> dict[str, str]:
    path = _meta_path()
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


def _meta_path() -> Path:
    return config.CACHE_DIR / config.CACHE_DATE_FILE.name
