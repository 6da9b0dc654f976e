"""Custom exception hierarchy for the journal engine."""


class TradeZenError(Exception):
    """Base exception for all journal engine errors."""


# --- Configuration ---
class ConfigError(TradeZenError):
    """Invalid or missing configuration."""


# --- Ingestion ---
class ParseError(TradeZenError):
    """Export file could not be parsed."""


class ReportStructureError(ParseError):
    """Report is missing a structural element (e.g. the Positions table)."""


class UnknownFormatError(ParseError):
    """CSV header matches none of the supported export dialects."""


# --- Trades ---
class InvalidTransitionError(TradeZenError):
    """Trade status change not allowed by the lifecycle."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move trade from {current!r} to {requested!r}")


# --- Rates ---
class RateSourceError(TradeZenError):
    """Exchange-rate source unreachable or returned an unusable payload."""
