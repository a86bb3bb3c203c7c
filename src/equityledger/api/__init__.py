"""EquityLedger HTTP API."""

from equityledger.api.router import router

__all__ = ["router"]
