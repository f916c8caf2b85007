from __future__ import annotations

import math
from typing import Iterable

from .config import MAJORITY_SHARE
from .models import (
    FAIRLY_VALUED,
    INSUFFICIENT_DATA,
    OVERVALUED,
    UNDERVALUED,
    MetricResult,
    OverallVerdict,
)

INSUFFICIENT_REASONING = "Not enough data to determine valuation"
MIXED_REASONING = "Valuation metrics are mixed, suggesting the stock is fairly valued"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def verdict_weight_shares(metrics: Iterable[MetricResult]) -> dict[str, float]:
    totals = {UNDERVALUED: 0.0, OVERVALUED: 0.0, FAIRLY_VALUED: 0.0}
    for metric in metrics:
        bucket = metric.verdict if metric.verdict in (UNDERVALUED, OVERVALUED) else FAIRLY_VALUED
        totals[bucket] += metric.weight

    total_weight = sum(totals.values())
    if total_weight <= 0:
        return {key: 0.0 for key in totals}
    return {key: weight / total_weight for key, weight in totals.items()}


def aggregate_verdict(metrics: Iterable[MetricResult]) -> OverallVerdict:
    metrics = list(metrics)
    if not metrics:
        return OverallVerdict(verdict=INSUFFICIENT_DATA, confidence=0, reasoning=INSUFFICIENT_REASONING)

    shares = verdict_weight_shares(metrics)
    for verdict in (UNDERVALUED, OVERVALUED):
        if shares[verdict] > MAJORITY_SHARE:
            confidence = _round_half_up(shares[verdict] * 100.0)
            return OverallVerdict(
                verdict=verdict,
                confidence=confidence,
                reasoning=f"{confidence}% of valuation metrics suggest the stock is {verdict}",
            )

    return OverallVerdict(
        verdict=FAIRLY_VALUED,
        confidence=_round_half_up(shares[FAIRLY_VALUED] * 100.0),
        reasoning=MIXED_REASONING,
    )
