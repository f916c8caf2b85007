from __future__ import annotations

import argparse
import logging
from datetime import datetime, timezone
from pathlib import Path

from valuation.analysis import build_valuation_frame
from valuation.cache_store import save_meta, save_valuation_frame
from valuation.config import CACHE_FRAME_NAME, DEFAULT_WATCHLIST

logger = logging.getLogger(__name__)


def read_ticker_file(path: Path) -> list[str]:
    tickers = []
    for line in path.read_text(encoding="utf-8").splitlines():
        text = line.split("#", 1)[0].strip()
        if text:
            tickers.append(text)
    return tickers


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Value a list of tickers and cache the results.")
    parser.add_argument("tickers", nargs="*", help="Ticker symbols or company names")
    parser.add_argument("--file", type=Path, default=None, help="Text file with one ticker per line")
    parser.add_argument("--json", action="store_true", help="Print the result frame as JSON records")
    parser.add_argument("--no-cache", action="store_true", help="Do not write the result frame to the cache")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tickers = list(args.tickers)
    if args.file is not None:
        tickers.extend(read_ticker_file(args.file))
    if not tickers:
        tickers = list(DEFAULT_WATCHLIST)

    logger.info(f"Valuing {len(tickers)} tickers")
    df = build_valuation_frame(tickers)
    failed = int((df["error"] != "").sum()) if not df.empty else 0
    logger.info(f"Finished: {len(df) - failed} valued, {failed} failed")

    if not args.no_cache:
        save_valuation_frame(df)
        save_meta({CACHE_FRAME_NAME: datetime.now(timezone.utc).isoformat()})

    if args.json:
        print(df.to_json(orient="records", indent=2))
    else:
        print(df[["ticker", "verdict", "confidence", "metric_count", "error"]].to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
