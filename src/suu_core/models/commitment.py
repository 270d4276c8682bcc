"""Commitments and the local secret entries that back them.

A commitment is the on-chain half of a commit-reveal round; the secret
entry is the off-chain half.  Revealing needs both, so the secret entry is
persisted outside process memory and survives a reload.
"""

from __future__ import annotations

import json
from enum import Enum

from pydantic import BaseModel, Field, ValidationError

from suu_core.models.asset import EncounterRecord


class CommitKind(str, Enum):
    """The two commit-reveal flows. Tracked independently, one at a time per subject."""

    BATTLE = "battle"
    CAPTURE = "capture"

    @property
    def created_event(self) -> str:
        return "BattleCommitmentCreatedEvent" if self is CommitKind.BATTLE else "CaptureCommitmentCreatedEvent"

    @property
    def outcome_event(self) -> str:
        return "BattleEvent" if self is CommitKind.BATTLE else "CaptureAttemptEvent"

    @property
    def object_type(self) -> str:
        return "BattleCommitment" if self is CommitKind.BATTLE else "CaptureCommitment"


class CommitmentRecord(BaseModel):
    """An in-flight commit-reveal round as stored on the ledger."""

    commitment_id: str = Field(description="Address of the shared commitment object")
    kind: CommitKind
    subject_id: int = Field(ge=0)
    player: str
    commitment_hash: str = Field(default="", description="Hex digest; empty if not exposed")
    encounter: EncounterRecord | None = Field(
        default=None, description="Opponent snapshot taken at commit time",
    )
    frozen_level: int | None = Field(
        default=None, description="Subject level at commit time; drives the deadline",
    )
    subject_element: int | None = None
    committed_at: int = Field(ge=0, description="Commit time (ms)")
    revealed: bool = False


# Keys the created events have used for the new commitment's address.
COMMITMENT_ID_FIELDS = ("commitment_id", "id", "commitmentId")


def secret_key(kind: CommitKind, subject_id: int) -> str:
    """Store key for a subject's secret, e.g. ``battle_secret_42``."""
    return f"{kind.value}_secret_{subject_id}"


class SecretEntry(BaseModel):
    """What the client must remember between commit and reveal."""

    secret: str
    commitment_id: str = ""
    opponent_level: int | None = Field(default=None, ge=0, le=255)
    opponent_element: int | None = Field(default=None, ge=0, le=255)
    frozen_level: int | None = Field(default=None, ge=0, le=255)
    committed_at: int | None = Field(default=None, ge=0)

    def dumps(self) -> str:
        return self.model_dump_json()

    @classmethod
    def loads(cls, value: str) -> SecretEntry:
        """Parse a stored value; a bare string is a secret-only entry."""
        try:
            data = json.loads(value)
        except json.JSONDecodeError:
            return cls(secret=value)
        if not isinstance(data, dict):
            return cls(secret=value)
        try:
            return cls.model_validate(data)
        except ValidationError:
            return cls(secret=value)
