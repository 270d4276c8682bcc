"""Ledger boundaries, read-only queries and event confirmation."""

from suu_core.network.boundaries import (
    NATIVE_COIN,
    Clock,
    CreatedObject,
    LedgerClient,
    SubmissionReceipt,
    SystemClock,
    TransactionSigner,
)
from suu_core.network.clock import ChainClock
from suu_core.network.confirmation import (
    BackoffPolicy,
    ConfirmationResult,
    ConfirmationStatus,
    EventRetryFetcher,
)
from suu_core.network.reader import EventScan, LedgerReader

__all__ = [
    "NATIVE_COIN",
    "BackoffPolicy",
    "ChainClock",
    "Clock",
    "ConfirmationResult",
    "ConfirmationStatus",
    "CreatedObject",
    "EventRetryFetcher",
    "EventScan",
    "LedgerClient",
    "LedgerReader",
    "SubmissionReceipt",
    "SystemClock",
    "TransactionSigner",
]
