"""EquityLedger - equity accounting and legal-document lifecycle engine."""

__version__ = "0.1.0"
