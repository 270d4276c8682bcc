"""Error taxonomy for the suu ledger client.

DecodeError         malformed or truncated binary payload
SubmissionError     transaction rejected at build or execution time
ConfirmationTimeout event not observed after bounded retries (result unknown)
LedgerError         transport failure talking to the ledger (retryable)
ProtocolError       illegal commit-reveal transition
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from suu_core.commit_reveal.reconciliation import ReconciliationGap


class SuuError(Exception):
    """Base class for every error raised by suu_core."""


class DecodeError(SuuError, ValueError):
    """Raised when a binary payload cannot be decoded."""


class SubmissionError(SuuError):
    """Raised when the network (or the builder) rejects a transaction.

    ``raw_message`` keeps the network's own wording so it can be shown
    to the user unchanged.
    """

    def __init__(self, message: str, raw_message: str | None = None) -> None:
        super().__init__(message)
        self.raw_message = raw_message if raw_message is not None else message


class TransactionBuildError(SubmissionError, ValueError):
    """Raised before building when an input is out of range."""


class ConfirmationTimeout(SuuError):
    """The transaction's event was not observed within the retry bound.

    This never means the transaction failed: it is owned by the network
    and may still land.  Callers should offer a manual refresh.
    """

    def __init__(self, digest: str, event_suffix: str) -> None:
        super().__init__(
            f"Event {event_suffix} for transaction {digest} not observed; result unknown"
        )
        self.digest = digest
        self.event_suffix = event_suffix


class LedgerError(SuuError):
    """Raised by ledger transports when a request fails."""


class ProtocolError(SuuError):
    """Raised on an illegal commit-reveal transition."""


class CommitmentConflictError(ProtocolError):
    """A commit was attempted while the subject already has one outstanding."""


class NoActiveCommitmentError(ProtocolError):
    """Reveal or cancel was attempted without a committed session."""


class RevealTooEarlyError(ProtocolError):
    """Reveal was attempted before the deadline."""

    def __init__(self, subject_id: int, deadline_ms: int, now_ms: int) -> None:
        super().__init__(
            f"Subject {subject_id} cannot reveal for another {deadline_ms - now_ms} ms"
        )
        self.subject_id = subject_id
        self.deadline_ms = deadline_ms
        self.now_ms = now_ms


class MissingSecretError(ProtocolError):
    """The persisted secret for a committed session is gone."""


class ReconciliationGapError(ProtocolError):
    """An unrevealed commitment exists on the ledger without a usable secret.

    Revealing is impossible without the secret; the commitment has to be
    cancelled or settled out of band before the subject can commit again.
    """

    def __init__(self, gap: ReconciliationGap) -> None:
        super().__init__(
            f"Subject {gap.commitment.subject_id} has an orphaned {gap.commitment.kind.value} "
            f"commitment {gap.commitment.commitment_id}: {gap.reason}"
        )
        self.gap = gap


class StoreNotFoundError(SuuError):
    """Raised when a requested secret store backend is not installed."""
