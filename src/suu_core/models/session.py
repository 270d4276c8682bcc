"""Per-subject commit-reveal session state.

Phases:
  IDLE → COMMITTED → REVEALED → IDLE
                   → CANCELLED → IDLE
  ORPHANED: the ledger holds an unrevealed commitment this client cannot
  reveal (no usable secret).  Only cancel or an independent resolution
  leaves it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from suu_core.models.commitment import CommitKind


class Phase(str, Enum):
    IDLE = "idle"
    COMMITTED = "committed"
    REVEALED = "revealed"
    CANCELLED = "cancelled"
    ORPHANED = "orphaned"


@dataclass
class SubjectSession:
    """Commit-reveal state of one subject (asset)."""

    subject_id: int
    phase: Phase = Phase.IDLE
    kind: CommitKind | None = None
    commitment_id: str = ""
    opponent_level: int = 0
    opponent_element: int = 0
    frozen_level: int = 0
    committed_at: int = 0
    deadline: int = 0

    @property
    def is_active(self) -> bool:
        """An outstanding ledger commitment blocks new commits."""
        return self.phase in (Phase.COMMITTED, Phase.ORPHANED)

    def can_reveal(self, now_ms: int) -> bool:
        return self.phase == Phase.COMMITTED and now_ms >= self.deadline

    def remaining_ms(self, now_ms: int) -> int:
        if self.phase != Phase.COMMITTED:
            return 0
        return max(0, self.deadline - now_ms)

    def reset(self) -> None:
        self.phase = Phase.IDLE
        self.kind = None
        self.commitment_id = ""
        self.opponent_level = 0
        self.opponent_element = 0
        self.frozen_level = 0
        self.committed_at = 0
        self.deadline = 0
