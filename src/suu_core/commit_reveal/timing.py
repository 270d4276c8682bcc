"""Level-dependent waiting periods.

Both the reveal delay and the encounter re-roll cooldown double with each
level above 1:

    delay(level) = base * 2 ** (level - 1)     (base for level <= 1)

The level used is the one frozen at commit time, never the live level.
"""

from __future__ import annotations

from dataclasses import dataclass

from suu_core.models.commitment import CommitKind

BASE_REVEAL_DELAY_MS = 30_000
BASE_ENCOUNTER_COOLDOWN_MS = 60_000


def doubling_delay(base_ms: int, level: int) -> int:
    if level <= 1:
        return base_ms
    return base_ms * 2 ** (level - 1)


@dataclass(frozen=True)
class RevealTiming:
    """Base delays (ms) for each flow; the contract can tune these."""

    battle_base_ms: int = BASE_REVEAL_DELAY_MS
    capture_base_ms: int = BASE_REVEAL_DELAY_MS
    encounter_cooldown_base_ms: int = BASE_ENCOUNTER_COOLDOWN_MS

    def __post_init__(self) -> None:
        for name in ("battle_base_ms", "capture_base_ms", "encounter_cooldown_base_ms"):
            if getattr(self, name) < 0:
                msg = f"{name} must be non-negative"
                raise ValueError(msg)

    def base_for(self, kind: CommitKind) -> int:
        return self.battle_base_ms if kind is CommitKind.BATTLE else self.capture_base_ms

    def reveal_delay(self, kind: CommitKind, level: int) -> int:
        """Milliseconds between commit and the earliest legal reveal."""
        return doubling_delay(self.base_for(kind), level)

    def encounter_cooldown(self, level: int) -> int:
        return doubling_delay(self.encounter_cooldown_base_ms, level)

    def deadline(self, kind: CommitKind, level: int, committed_at: int) -> int:
        return committed_at + self.reveal_delay(kind, level)
