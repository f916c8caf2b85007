from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .config import DISPLAY_DECIMALS, METRIC_THRESHOLDS, METRIC_WEIGHTS
from .models import FAIRLY_VALUED, OVERVALUED, UNDERVALUED, FinancialSnapshot, MetricResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricRule:
    """One row of the valuation table: how to compute a ratio and how to read it."""

    key: str
    name: str
    numerator: Callable[[FinancialSnapshot], float | None]
    denominator: Callable[[FinancialSnapshot], float | None]
    unit: str = "x"
    scale: float = 1.0
    higher_is_better: bool = False
    positive_numerator: bool = False


def _usable(value: float | None) -> bool:
    if value is None:
        return False
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False
    return bool(np.isfinite(num)) and num != 0.0


def _book_value(snapshot: FinancialSnapshot) -> float | None:
    if not (_usable(snapshot.total_assets) and _usable(snapshot.total_liabilities)):
        return None
    return float(snapshot.total_assets) - float(snapshot.total_liabilities)


METRIC_RULES: tuple[MetricRule, ...] = (
    MetricRule("ev_ebitda", "EV/EBITDA", lambda s: s.enterprise_value, lambda s: s.ebitda),
    MetricRule("pe", "P/E Ratio", lambda s: s.market_cap, lambda s: s.net_income),
    MetricRule("pb", "P/B Ratio", lambda s: s.market_cap, _book_value),
    MetricRule("ev_revenue", "EV/Revenue", lambda s: s.enterprise_value, lambda s: s.total_revenue),
    MetricRule(
        "fcf_yield",
        "FCF Yield",
        lambda s: s.operating_cash_flow,
        lambda s: s.market_cap,
        unit="%",
        scale=100.0,
        higher_is_better=True,
        positive_numerator=True,
    ),
    MetricRule("debt_to_equity", "Debt/Equity", lambda s: s.total_liabilities, _book_value),
)


def classify_ratio(value: float, thresholds: tuple[float, float], higher_is_better: bool = False) -> str:
    # both edges fall through to fairly valued
    cheap, expensive = thresholds
    if higher_is_better:
        if value > cheap:
            return UNDERVALUED
        if value < expensive:
            return OVERVALUED
        return FAIRLY_VALUED
    if value < cheap:
        return UNDERVALUED
    if value > expensive:
        return OVERVALUED
    return FAIRLY_VALUED


def _compute_ratio(rule: MetricRule, snapshot: FinancialSnapshot) -> tuple[float | None, str]:
    denominator = rule.denominator(snapshot)
    if not _usable(denominator) or float(denominator) <= 0:
        return None, "denominator<=0"
    numerator = rule.numerator(snapshot)
    if not _usable(numerator):
        return None, "numerator missing"
    if rule.positive_numerator and float(numerator) <= 0:
        return None, "numerator<=0"
    return float(numerator) / float(denominator) * rule.scale, ""


def evaluate_metric(rule: MetricRule, snapshot: FinancialSnapshot) -> MetricResult | None:
    raw, reason = _compute_ratio(rule, snapshot)
    if raw is None:
        logger.debug(f"Skipping {rule.name} for {snapshot.symbol or '?'}: {reason}")
        return None
    return MetricResult(
        name=rule.name,
        key=rule.key,
        raw_value=raw,
        value=round(raw, DISPLAY_DECIMALS),
        unit=rule.unit,
        verdict=classify_ratio(raw, METRIC_THRESHOLDS[rule.key], rule.higher_is_better),
        weight=METRIC_WEIGHTS[rule.key],
    )


def derive_metrics(snapshot: FinancialSnapshot, rules: tuple[MetricRule, ...] = METRIC_RULES) -> list[MetricResult]:
    """Evaluate every rule whose inputs are defined, in table order."""
    results: list[MetricResult] = []
    for rule in rules:
        result = evaluate_metric(rule, snapshot)
        if result is not None:
            results.append(result)
    return results
