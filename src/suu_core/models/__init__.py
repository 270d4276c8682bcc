"""Data models for suu: ledger records, commitments, events and sessions."""

from suu_core.models.asset import (
    AssetRecord,
    ContractBalances,
    ContractInfo,
    EncounterRecord,
    GameConfig,
    ListingRecord,
)
from suu_core.models.commitment import (
    COMMITMENT_ID_FIELDS,
    CommitKind,
    CommitmentRecord,
    SecretEntry,
    secret_key,
)
from suu_core.models.events import (
    BattleOutcome,
    CaptureOutcome,
    EventPage,
    LedgerEvent,
    ListingCancelledEvent,
    ListingCreatedEvent,
    ListingPurchasedEvent,
    MintedEvent,
)
from suu_core.models.session import Phase, SubjectSession

__all__ = [
    "COMMITMENT_ID_FIELDS",
    "AssetRecord",
    "BattleOutcome",
    "CaptureOutcome",
    "CommitKind",
    "CommitmentRecord",
    "ContractBalances",
    "ContractInfo",
    "EncounterRecord",
    "EventPage",
    "GameConfig",
    "LedgerEvent",
    "ListingCancelledEvent",
    "ListingCreatedEvent",
    "ListingPurchasedEvent",
    "ListingRecord",
    "MintedEvent",
    "Phase",
    "SecretEntry",
    "SubjectSession",
    "secret_key",
]
