from __future__ import annotations

import pytest

from valuation import analysis
from valuation.analysis import build_valuation_frame, build_valuation_report, evaluate_ticker
from valuation.errors import AmbiguousIdentifierError, IncompleteDataError, UnresolvedIdentifierError
from valuation.models import INSUFFICIENT_DATA, OVERVALUED, UNDERVALUED, FinancialSnapshot

REFERENCE = dict(
    enterprise_value=2_000_000_000.0,
    ebitda=200_000_000.0,
    net_income=150_000_000.0,
    total_revenue=1_000_000_000.0,
    operating_cash_flow=180_000_000.0,
    market_cap=2_100_000_000.0,
    total_assets=3_000_000_000.0,
    total_liabilities=1_200_000_000.0,
)

EXPENSIVE = dict(
    enterprise_value=5_000.0,
    ebitda=100.0,
    net_income=100.0,
    total_revenue=500.0,
    operating_cash_flow=10.0,
    market_cap=5_000.0,
    total_assets=1_000.0,
    total_liabilities=800.0,
)


def _snapshot(symbol: str, values: dict) -> FinancialSnapshot:
    return FinancialSnapshot(**values, symbol=symbol, company_name=f"{symbol} Inc.", sector="Industrials", currency="USD")


def _empty_snapshot(symbol: str) -> FinancialSnapshot:
    return FinancialSnapshot(None, None, None, None, None, None, None, None, symbol=symbol)


@pytest.fixture
def fake_provider(monkeypatch):
    snapshots = {
        "GOOD": _snapshot("GOOD", REFERENCE),
        "RICH": _snapshot("RICH", EXPENSIVE),
        "EMPTY": _empty_snapshot("EMPTY"),
    }

    def _resolve(query):
        symbol = query.strip().upper()
        if symbol == "APPLE":
            raise AmbiguousIdentifierError(query, ["AAPL", "APLE"])
        if symbol == "HALF":
            return symbol
        if symbol not in snapshots:
            raise UnresolvedIdentifierError(query)
        return symbol

    def _fetch(symbol):
        if symbol == "HALF":
            raise IncompleteDataError(symbol, ["balance sheet"])
        return snapshots[symbol]

    monkeypatch.setattr(analysis, "resolve_symbol", _resolve)
    monkeypatch.setattr(analysis, "fetch_financial_snapshot", _fetch)
    return snapshots


def test_reference_report_end_to_end():
    report = build_valuation_report(_snapshot("GOOD", REFERENCE))

    assert len(report.metrics) == 6
    assert report.overall.verdict == UNDERVALUED
    assert report.overall.confidence == 85
    assert report.overall.reasoning == "85% of valuation metrics suggest the stock is undervalued"


def test_report_dict_matches_output_contract():
    payload = build_valuation_report(_snapshot("GOOD", REFERENCE)).to_dict()

    assert payload["ticker"] == "GOOD"
    assert payload["companyName"] == "GOOD Inc."
    assert payload["overall"] == {
        "verdict": UNDERVALUED,
        "confidence": 85,
        "reasoning": "85% of valuation metrics suggest the stock is undervalued",
    }
    assert payload["interpretation"] == payload["overall"]["reasoning"]
    first = payload["metrics"][0]
    assert first["name"] == "EV/EBITDA"
    assert first["rawValue"] == 10.0
    assert first["verdict"] == UNDERVALUED
    assert first["weight"] == 1.0
    assert payload["rawData"]["marketCap"] == 2_100_000_000.0


def test_evaluate_ticker_success(fake_provider):
    result = evaluate_ticker(" good ")

    assert result["status"] == 200
    assert "error" not in result
    assert result["overall"]["verdict"] == UNDERVALUED
    assert round(sum(result["weightShares"].values()), 10) == 1.0


def test_evaluate_ticker_requires_input(fake_provider):
    assert evaluate_ticker("   ") == {"error": "Ticker is required", "status": 400}


@pytest.mark.parametrize(
    "query, status, fragment",
    [
        ("nothing", 404, "No company found"),
        ("apple", 409, "matches several companies"),
        ("half", 422, "missing balance sheet"),
    ],
)
def test_evaluate_ticker_surfaces_distinct_errors(fake_provider, query, status, fragment):
    result = evaluate_ticker(query)
    assert result["status"] == status
    assert fragment in result["error"]


def test_evaluate_ticker_without_metrics_is_an_error(fake_provider):
    result = evaluate_ticker("EMPTY")

    assert result["status"] == 422
    assert result["overall"]["verdict"] == INSUFFICIENT_DATA
    assert result["overall"]["confidence"] == 0
    assert result["metrics"] == []
    assert "Not enough financial data" in result["error"]


def test_valuation_frame_is_ranked_by_verdict(fake_provider):
    df = build_valuation_frame(["RICH", "nothing", "GOOD", ""])

    assert df["ticker"].tolist() == ["GOOD", "RICH", "NOTHING"]
    assert df["verdict"].tolist() == [UNDERVALUED, OVERVALUED, INSUFFICIENT_DATA]
    assert df.loc[0, "ev_ebitda"] == 10.0
    assert df.loc[0, "error"] == ""
    assert df.loc[2, "metric_count"] == 0
    assert "No company found" in df.loc[2, "error"]


def test_valuation_frame_empty_input():
    df = build_valuation_frame([])
    assert df.empty
    assert "verdict" in df.columns
