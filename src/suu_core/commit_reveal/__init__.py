"""Battle and capture commit-reveal rounds: timing, state machine, reconciliation."""

from suu_core.commit_reveal.machine import CommitRevealMachine, RevealOutcome
from suu_core.commit_reveal.reconciliation import (
    ReconciliationGap,
    ReconciliationService,
    RestoredState,
    UnresolvedSearch,
)
from suu_core.commit_reveal.timing import (
    BASE_ENCOUNTER_COOLDOWN_MS,
    BASE_REVEAL_DELAY_MS,
    RevealTiming,
    doubling_delay,
)

__all__ = [
    "BASE_ENCOUNTER_COOLDOWN_MS",
    "BASE_REVEAL_DELAY_MS",
    "CommitRevealMachine",
    "ReconciliationGap",
    "ReconciliationService",
    "RestoredState",
    "RevealOutcome",
    "RevealTiming",
    "UnresolvedSearch",
    "doubling_delay",
]
