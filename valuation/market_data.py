from __future__ import annotations

import logging
import re

import pandas as pd
import yfinance as yf

from .config import SEARCH_MAX_RESULTS
from .errors import (
    AmbiguousIdentifierError,
    IncompleteDataError,
    UnresolvedIdentifierError,
    UpstreamUnavailableError,
)
from .models import FinancialSnapshot

logger = logging.getLogger(__name__)

EBITDA_KEYS = ["EBITDA", "Normalized EBITDA"]
NET_INCOME_KEYS = ["Net Income", "Net Income Common Stockholders", "NetIncome"]
REVENUE_KEYS = ["Total Revenue", "Revenue", "Operating Revenue", "TotalRevenue"]
OCF_KEYS = [
    "Operating Cash Flow",
    "Total Cash From Operating Activities",
    "Cash Flow From Continuing Operating Activities",
    "OperatingCashFlow",
]
TOTAL_ASSETS_KEYS = ["Total Assets", "TotalAssets"]
TOTAL_LIABILITIES_KEYS = ["Total Liabilities Net Minority Interest", "Total Liabilities", "TotalLiabilities"]
TOTAL_DEBT_KEYS = ["Total Debt", "TotalDebt"]
CASH_KEYS = [
    "Cash And Cash Equivalents",
    "Cash Cash Equivalents And Short Term Investments",
    "CashAndCashEquivalents",
]

_TICKER_PATTERN = re.compile(r"^[A-Z0-9]{1,6}([.-][A-Z0-9]{1,3})?$")
_CLASS_SHARE_PATTERN = re.compile(r"^([A-Z]{1,5})\.([A-C])$")


def _safe_float(value) -> float | None:
    if value is None:
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(num):
        return None
    return num


def _norm_token(text: str) -> str:
    return "".join(ch for ch in (text or "").upper() if ch.isalnum())


def _pick_row(df: pd.DataFrame | None, keys: list[str]) -> pd.Series | None:
    if df is None or df.empty:
        return None
    for key in keys:
        if key in df.index:
            selected = df.loc[key]
            return selected.iloc[0] if isinstance(selected, pd.DataFrame) else selected
    for idx in df.index:
        idx_text = str(idx).lower().replace(" ", "")
        # "Cost Of Revenue" must never stand in for revenue
        if idx_text.startswith("cost"):
            continue
        if any(key.lower().replace(" ", "") in idx_text for key in keys):
            selected = df.loc[idx]
            return selected.iloc[0] if isinstance(selected, pd.DataFrame) else selected
    return None


def _latest_value(df: pd.DataFrame | None, keys: list[str]) -> float | None:
    row = _pick_row(df, keys)
    if row is None:
        return None
    work = row
    if isinstance(row.index, pd.DatetimeIndex):
        work = row.sort_index(ascending=False)
    vals = pd.to_numeric(work, errors="coerce").dropna().tolist()
    return float(vals[0]) if vals else None


def _statement(ticker: yf.Ticker, attr: str) -> pd.DataFrame:
    frame = getattr(ticker, attr, None)
    return frame if isinstance(frame, pd.DataFrame) else pd.DataFrame()


def _extract_market_cap(ticker: yf.Ticker, info: dict) -> float | None:
    candidates = [info.get("marketCap"), info.get("market_cap")]
    try:
        fi = ticker.fast_info
        candidates.extend([fi.get("market_cap"), fi.get("marketCap")])
    except Exception:
        pass

    for candidate in candidates:
        val = _safe_float(candidate)
        if val and val > 0:
            return val
    return None


def _extract_enterprise_value(
    market_cap: float | None, balance: pd.DataFrame, info: dict
) -> float | None:
    total_debt = _latest_value(balance, TOTAL_DEBT_KEYS)
    cash = _latest_value(balance, CASH_KEYS) or 0.0
    if market_cap is not None and total_debt is not None:
        return market_cap + total_debt - cash
    return _safe_float(info.get("enterpriseValue"))


def normalize_ticker_input(ticker_input: str) -> str:
    ticker = (ticker_input or "").strip().upper()
    if not ticker:
        return ""
    match = _CLASS_SHARE_PATTERN.match(ticker)
    if match:
        return f"{match.group(1)}-{match.group(2)}"
    return ticker


def looks_like_ticker(text: str) -> bool:
    return bool(_TICKER_PATTERN.match(normalize_ticker_input(text)))


def _search_quotes(query: str) -> list[dict]:
    try:
        quotes = yf.Search(query, max_results=SEARCH_MAX_RESULTS).quotes or []
    except Exception as exc:
        raise UpstreamUnavailableError(query, str(exc)) from exc
    return [q for q in quotes if str(q.get("quoteType", "")).upper() == "EQUITY" and q.get("symbol")]


def resolve_symbol(query: str) -> str:
    symbol = normalize_ticker_input(query)
    if not symbol:
        raise UnresolvedIdentifierError(query)

    quotes = _search_quotes(query.strip())
    symbols = [str(q["symbol"]).upper() for q in quotes]
    if symbol in symbols:
        return symbol
    if not quotes:
        if looks_like_ticker(symbol):
            logger.debug(f"No search hit for {symbol}, passing through as a ticker")
            return symbol
        raise UnresolvedIdentifierError(query)
    if len(quotes) == 1:
        return symbols[0]

    key = _norm_token(query)
    named = [
        str(q["symbol"]).upper()
        for q in quotes
        if _norm_token(q.get("shortname") or q.get("longname") or "").startswith(key)
    ]
    if len(named) == 1:
        return named[0]
    raise AmbiguousIdentifierError(query, named or symbols)


def snapshot_from_ticker(ticker: yf.Ticker, symbol: str) -> FinancialSnapshot:
    try:
        info = ticker.info or {}
        income = _statement(ticker, "income_stmt")
        balance = _statement(ticker, "balance_sheet")
        cashflow = _statement(ticker, "cashflow")
    except Exception as exc:
        raise UpstreamUnavailableError(symbol, str(exc)) from exc

    sections = {"income statement": income, "balance sheet": balance, "cash flow statement": cashflow}
    missing = [label for label, frame in sections.items() if frame.empty]
    if len(missing) == len(sections) and not info.get("marketCap"):
        raise UnresolvedIdentifierError(symbol)
    if missing:
        raise IncompleteDataError(symbol, missing)

    market_cap = _extract_market_cap(ticker, info)
    return FinancialSnapshot(
        enterprise_value=_extract_enterprise_value(market_cap, balance, info),
        ebitda=_latest_value(income, EBITDA_KEYS),
        net_income=_latest_value(income, NET_INCOME_KEYS),
        total_revenue=_latest_value(income, REVENUE_KEYS),
        operating_cash_flow=_latest_value(cashflow, OCF_KEYS),
        market_cap=market_cap,
        total_assets=_latest_value(balance, TOTAL_ASSETS_KEYS),
        total_liabilities=_latest_value(balance, TOTAL_LIABILITIES_KEYS),
        symbol=symbol,
        company_name=info.get("shortName") or info.get("longName") or symbol,
        sector=info.get("sector") or info.get("industry") or "Unknown",
        currency=info.get("financialCurrency") or info.get("currency") or "N/A",
    )


def fetch_financial_snapshot(symbol: str) -> FinancialSnapshot:
    logger.info(f"Fetching latest annual statements for {symbol}")
    return snapshot_from_ticker(yf.Ticker(symbol), symbol)
