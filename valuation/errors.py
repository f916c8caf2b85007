from __future__ import annotations


class ValuationDataError(Exception):
    """Raised when a ticker cannot be turned into a usable financial snapshot."""

    status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnresolvedIdentifierError(ValuationDataError):
    status = 404

    def __init__(self, query: str) -> None:
        super().__init__(f"No company found matching '{query}'.")
        self.query = query


class AmbiguousIdentifierError(ValuationDataError):
    status = 409

    def __init__(self, query: str, candidates: list[str]) -> None:
        shown = ", ".join(candidates[:5])
        super().__init__(f"'{query}' matches several companies ({shown}). Enter the ticker symbol instead.")
        self.query = query
        self.candidates = list(candidates)


class UpstreamUnavailableError(ValuationDataError):
    status = 502

    def __init__(self, symbol: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Financial data provider is unavailable for {symbol}{detail}")
        self.symbol = symbol


class IncompleteDataError(ValuationDataError):
    status = 422

    def __init__(self, symbol: str, missing: list[str]) -> None:
        super().__init__(f"Incomplete financial data for {symbol}: missing {', '.join(missing)}.")
        self.symbol = symbol
        self.missing = list(missing)
