from dataclasses import dataclass, field

UNDERVALUED = "undervalued"
OVERVALUED = "overvalued"
FAIRLY_VALUED = "fairly_valued"
INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class FinancialSnapshot:
    enterprise_value: float | None
    ebitda: float | None
    net_income: float | None
    total_revenue: float | None
    operating_cash_flow: float | None
    market_cap: float | None
    total_assets: float | None
    total_liabilities: float | None
    symbol: str = ""
    company_name: str = ""
    sector: str = "Unknown"
    currency: str = "N/A"

    def raw_data(self) -> dict[str, float | None]:
        return {
            "marketCap": self.market_cap,
            "enterpriseValue": self.enterprise_value,
            "ebitda": self.ebitda,
            "netIncome": self.net_income,
            "revenue": self.total_revenue,
            "operatingCashFlow": self.operating_cash_flow,
            "totalAssets": self.total_assets,
            "totalLiabilities": self.total_liabilities,
        }


@dataclass(frozen=True)
class MetricResult:
    name: str
    key: str
    raw_value: float
    value: float
    unit: str
    verdict: str
    weight: float

    @property
    def display(self) -> str:
        if self.unit == "%":
            return f"{self.value:.2f}%"
        return f"{self.value:.2f}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "key": self.key,
            "rawValue": self.raw_value,
            "value": self.value,
            "display": self.display,
            "verdict": self.verdict,
            "weight": self.weight,
        }


@dataclass(frozen=True)
class OverallVerdict:
    verdict: str
    confidence: int
    reasoning: str

    def to_dict(self) -> dict:
        return {"verdict": self.verdict, "confidence": self.confidence, "reasoning": self.reasoning}


@dataclass(frozen=True)
class ValuationReport:
    snapshot: FinancialSnapshot
    overall: OverallVerdict
    metrics: tuple[MetricResult, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "ticker": self.snapshot.symbol,
            "companyName": self.snapshot.company_name,
            "sector": self.snapshot.sector,
            "currency": self.snapshot.currency,
            "rawData": self.snapshot.raw_data(),
            "metrics": [m.to_dict() for m in self.metrics],
            "overall": self.overall.to_dict(),
            "interpretation": self.overall.reasoning,
        }
