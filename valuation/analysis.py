from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from .errors import ValuationDataError
from .market_data import fetch_financial_snapshot, normalize_ticker_input, resolve_symbol
from .metrics import METRIC_RULES, derive_metrics
from .models import FAIRLY_VALUED, INSUFFICIENT_DATA, OVERVALUED, UNDERVALUED, FinancialSnapshot, ValuationReport
from .verdict import aggregate_verdict, verdict_weight_shares

logger = logging.getLogger(__name__)

VERDICT_RANK = {UNDERVALUED: 0, FAIRLY_VALUED: 1, OVERVALUED: 2, INSUFFICIENT_DATA: 3}
FRAME_COLUMNS = [
    "ticker",
    "name",
    "sector",
    "verdict",
    "confidence",
    "metric_count",
    *[rule.key for rule in METRIC_RULES],
    "reasoning",
    "error",
]


def build_valuation_report(snapshot: FinancialSnapshot) -> ValuationReport:
    metrics = derive_metrics(snapshot)
    return ValuationReport(snapshot=snapshot, overall=aggregate_verdict(metrics), metrics=tuple(metrics))


def evaluate_ticker(ticker_input: str) -> dict:
    """Resolve, fetch and score one ticker.

    Always returns a dict. Failures carry ``error`` and an HTTP-style ``status``
    so a hosting layer can pass them straight through.
    """
    query = (ticker_input or "").strip()
    if not query:
        return {"error": "Ticker is required", "status": 400}

    try:
        symbol = resolve_symbol(query)
        snapshot = fetch_financial_snapshot(symbol)
    except ValuationDataError as exc:
        logger.warning(f"Valuation lookup failed for {query}: {exc.message}")
        return {"ticker": normalize_ticker_input(query), "error": exc.message, "status": exc.status}

    report = build_valuation_report(snapshot)
    result = report.to_dict()
    result["weightShares"] = verdict_weight_shares(report.metrics)
    if not report.metrics:
        result["error"] = f"Not enough financial data to evaluate {snapshot.symbol}."
        result["status"] = 422
        return result

    logger.info(
        f"{snapshot.symbol}: {report.overall.verdict} ({report.overall.confidence}%) "
        f"from {len(report.metrics)} metrics"
    )
    result["status"] = 200
    return result


def _frame_row(ticker: str, result: dict) -> dict:
    overall = result.get("overall") or {}
    row = {
        "ticker": result.get("ticker") or normalize_ticker_input(ticker),
        "name": result.get("companyName") or result.get("ticker") or ticker,
        "sector": result.get("sector") or "Unknown",
        "verdict": overall.get("verdict") or INSUFFICIENT_DATA,
        "confidence": int(overall.get("confidence") or 0),
        "metric_count": len(result.get("metrics") or []),
        "reasoning": overall.get("reasoning") or "",
        "error": result.get("error") or "",
    }
    values = {m["key"]: m["value"] for m in result.get("metrics") or []}
    for rule in METRIC_RULES:
        row[rule.key] = values.get(rule.key)
    return row


def build_valuation_frame(tickers: Iterable[str]) -> pd.DataFrame:
    rows = []
    for ticker in tickers:
        if not (ticker or "").strip():
            continue
        rows.append(_frame_row(ticker, evaluate_ticker(ticker)))

    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    if df.empty:
        return df

    df["_rank"] = df["verdict"].map(VERDICT_RANK).fillna(len(VERDICT_RANK))
    df = df.sort_values(by=["_rank", "confidence"], ascending=[True, False], kind="stable").drop(columns=["_rank"])
    return df.reset_index(drop=True)
