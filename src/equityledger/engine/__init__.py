"""EquityLedger engine - ledger intents and lifecycle guards."""

from equityledger.engine.core import EquityLedgerEngine
from equityledger.engine.errors import (
    AllocationExceeded,
    DeletionBlocked,
    EquityLedgerError,
    InvalidInput,
    InvalidTransition,
    MissingPrerequisiteDocument,
    NotFound,
    NotSignable,
    PartialApprovalFailure,
    TransientStoreError,
)

__all__ = [
    "AllocationExceeded",
    "DeletionBlocked",
    "EquityLedgerEngine",
    "EquityLedgerError",
    "InvalidInput",
    "InvalidTransition",
    "MissingPrerequisiteDocument",
    "NotFound",
    "NotSignable",
    "PartialApprovalFailure",
    "TransientStoreError",
]
