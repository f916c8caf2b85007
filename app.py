from __future__ import annotations

from datetime import datetime, timezone

import streamlit as st

from valuation.analysis import build_valuation_frame, evaluate_ticker
from valuation.cache_store import load_meta, load_valuation_frame, save_meta, save_valuation_frame
from valuation.config import CACHE_FRAME_NAME, DEFAULT_WATCHLIST, LOOKUP_TTL_SECONDS, WATCHLIST_TTL_SECONDS
from valuation.ui_components import render_hero, render_valuation_result, render_watchlist_table
from valuation.ui_theme import inject_theme


@st.cache_data(show_spinner=False, ttl=LOOKUP_TTL_SECONDS)
def _lookup_ticker(ticker_input: str):
    return evaluate_ticker(ticker_input)


@st.cache_data(show_spinner=False, ttl=WATCHLIST_TTL_SECONDS)
def _refresh_watchlist(tickers: tuple[str, ...]):
    return build_valuation_frame(tickers)


def _load_or_build(tickers: tuple[str, ...], force_refresh: bool):
    if not force_refresh:
        cached = load_valuation_frame()
        if cached is not None and not cached.empty and set(cached["ticker"]) >= set(tickers):
            return cached[cached["ticker"].isin(tickers)].reset_index(drop=True), True

    fresh = _refresh_watchlist(tickers)
    if not fresh.empty:
        save_valuation_frame(fresh)
        save_meta({CACHE_FRAME_NAME: datetime.now(timezone.utc).isoformat()})
    return fresh, False


def _parse_tickers(text: str) -> tuple[str, ...]:
    seen = []
    for part in text.replace("\n", ",").split(","):
        token = part.strip().upper()
        if token and token not in seen:
            seen.append(token)
    return tuple(seen)


def main() -> None:
    st.set_page_config(page_title="Stock Valuation Verdict", layout="wide")
    st.markdown(inject_theme(), unsafe_allow_html=True)

    st.sidebar.title("Menu")
    menu = st.sidebar.radio("View", options=["Single ticker", "Watchlist"])

    if menu == "Single ticker":
        render_hero("Stock Valuation Verdict", "Six valuation ratios from the latest annual report, weighted into one verdict")
        ticker_input = st.sidebar.text_input("Ticker or company name", value="", placeholder="e.g. AAPL, Microsoft, BRK.B")
        result = None
        if ticker_input.strip():
            with st.spinner("Fetching financial statements..."):
                result = _lookup_ticker(ticker_input.strip())
        render_valuation_result(result)
        return

    watchlist_text = st.sidebar.text_area("Tickers (comma separated)", value=", ".join(DEFAULT_WATCHLIST))
    force_refresh = st.sidebar.button("Refresh data")
    tickers = _parse_tickers(watchlist_text)
    if not tickers:
        st.warning("Enter at least one ticker.")
        return

    with st.spinner("Valuing watchlist..."):
        df, from_cache = _load_or_build(tickers, force_refresh)

    updated_at = load_meta().get(CACHE_FRAME_NAME) or "N/A"
    if from_cache:
        updated_at = f"{updated_at} (cache)"
    render_hero("Watchlist valuation", f"{len(tickers)} tickers | Last refresh: {updated_at}")
    render_watchlist_table(df)


if __name__ == "__main__":
    main()
