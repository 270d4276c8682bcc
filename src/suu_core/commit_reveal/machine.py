"""Commit-reveal protocol driver for battles and captures.

Each subject (asset) owns an independent ``SubjectSession``; there is no
global "current" subject, so sessions for different assets can run
concurrently while operations on a single subject are serialised.

Flow for one round:
1. commit: generate a secret, publish keccak(subject ‖ level ‖ element ‖ secret)
2. wait until the commitment's created event is observed, then persist the
   secret and record the deadline
3. reveal (not before the deadline): publish the secret and the original
   opponent parameters; the contract recomputes the hash and settles
4. or cancel: abandon the commitment (also the way out of ORPHANED)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from suu_core.commit_reveal.timing import RevealTiming
from suu_core.crypto.hashing import compute_commitment, generate_secret
from suu_core.errors import (
    CommitmentConflictError,
    ConfirmationTimeout,
    MissingSecretError,
    NoActiveCommitmentError,
    ProtocolError,
    ReconciliationGapError,
    RevealTooEarlyError,
)
from suu_core.models.asset import AssetRecord
from suu_core.models.commitment import COMMITMENT_ID_FIELDS, CommitKind, SecretEntry, secret_key
from suu_core.models.events import BattleOutcome, CaptureOutcome
from suu_core.models.session import Phase, SubjectSession
from suu_core.network.boundaries import (
    Clock,
    LedgerClient,
    SubmissionReceipt,
    SystemClock,
    TransactionSigner,
)
from suu_core.network.confirmation import (
    ConfirmationResult,
    ConfirmationStatus,
    EventRetryFetcher,
)
from suu_core.protocol.transactions import Transaction, TransactionBuilder
from suu_core.storage.base import SecretStore

if TYPE_CHECKING:
    from suu_core.commit_reveal.reconciliation import ReconciliationGap, RestoredState

logger = logging.getLogger(__name__)


@dataclass
class RevealOutcome:
    """Result of a submitted reveal.

    ``status`` is UNKNOWN when the outcome event was not observed in time;
    the reveal itself was accepted and the secret is already gone.
    """

    subject_id: int
    kind: CommitKind
    confirmation: ConfirmationResult
    outcome: BattleOutcome | CaptureOutcome | None = None

    @property
    def digest(self) -> str:
        return self.confirmation.digest

    @property
    def status(self) -> ConfirmationStatus:
        return self.confirmation.status


class CommitRevealMachine:
    """Drives battle and capture rounds for any number of subjects."""

    def __init__(
        self,
        builder: TransactionBuilder,
        signer: TransactionSigner,
        ledger: LedgerClient,
        store: SecretStore,
        clock: Clock | None = None,
        timing: RevealTiming | None = None,
        fetcher: EventRetryFetcher | None = None,
    ) -> None:
        self._builder = builder
        self._signer = signer
        self._ledger = ledger
        self._store = store
        self._clock = clock or SystemClock()
        self.timing = timing or RevealTiming()
        self._fetcher = fetcher or EventRetryFetcher(ledger)
        self._sessions: dict[int, SubjectSession] = {}
        self._gaps: dict[int, ReconciliationGap] = {}
        self._in_flight: set[int] = set()

    # -- sessions -------------------------------------------------------

    def session(self, subject_id: int) -> SubjectSession:
        """The session for ``subject_id``, created IDLE on first access."""
        session = self._sessions.get(subject_id)
        if session is None:
            session = SubjectSession(subject_id)
            self._sessions[subject_id] = session
        return session

    @property
    def sessions(self) -> dict[int, SubjectSession]:
        return dict(self._sessions)

    def gap(self, subject_id: int) -> ReconciliationGap | None:
        return self._gaps.get(subject_id)

    def seconds_remaining(self, subject_id: int) -> int:
        """Whole seconds until ``subject_id`` may reveal (0 once it can)."""
        session = self._sessions.get(subject_id)
        if session is None:
            return 0
        return math.ceil(session.remaining_ms(self._clock.now_ms()) / 1000)

    def install_restored(self, state: RestoredState) -> SubjectSession:
        """Enter COMMITTED from a reconciled ledger commitment."""
        session = self.session(state.subject_id)
        session.phase = Phase.COMMITTED
        session.kind = state.kind
        session.commitment_id = state.commitment.commitment_id
        session.opponent_level = state.opponent_level
        session.opponent_element = state.opponent_element
        session.frozen_level = state.frozen_level
        session.committed_at = state.committed_at
        session.deadline = state.deadline
        self._gaps.pop(state.subject_id, None)
        return session

    def install_gap(self, gap: ReconciliationGap) -> SubjectSession:
        """Enter ORPHANED: the ledger commitment cannot be revealed from here."""
        commitment = gap.commitment
        session = self.session(commitment.subject_id)
        session.reset()
        session.phase = Phase.ORPHANED
        session.kind = commitment.kind
        session.commitment_id = commitment.commitment_id
        session.frozen_level = commitment.frozen_level or 0
        session.committed_at = commitment.committed_at
        self._gaps[commitment.subject_id] = gap
        logger.warning(
            "Subject %d has an orphaned %s commitment %s: %s",
            commitment.subject_id, commitment.kind.value, commitment.commitment_id, gap.reason,
        )
        return session

    def clear(self, subject_id: int) -> SubjectSession:
        """Return ``subject_id`` to IDLE once the ledger shows nothing outstanding."""
        session = self.session(subject_id)
        session.reset()
        self._gaps.pop(subject_id, None)
        return session

    def _begin(self, subject_id: int) -> None:
        if subject_id in self._in_flight:
            msg = f"Subject {subject_id} already has an operation in progress"
            raise CommitmentConflictError(msg)
        self._in_flight.add(subject_id)

    def _end(self, subject_id: int) -> None:
        self._in_flight.discard(subject_id)

    def _require_committed(self, session: SubjectSession) -> CommitKind:
        if session.phase == Phase.ORPHANED:
            raise ReconciliationGapError(self._gaps[session.subject_id])
        if session.phase != Phase.COMMITTED or session.kind is None:
            msg = f"Subject {session.subject_id} has no committed round"
            raise NoActiveCommitmentError(msg)
        return session.kind

    # -- commit ---------------------------------------------------------

    def _commit_transaction(self, kind: CommitKind, subject_id: int, digest: bytes) -> Transaction:
        if kind is CommitKind.BATTLE:
            return self._builder.battle_commit(subject_id, digest)
        return self._builder.capture_commit(subject_id, digest)

    async def _created_commitment(self, kind: CommitKind, digest: str) -> str:
        """Address of the commitment object ``digest`` created, or ""."""
        for created in await self._ledger.get_created_objects(digest) or []:
            if created.matches(kind.object_type):
                logger.info(
                    "Found %s %s in object changes of %s", kind.object_type, created.object_id, digest,
                )
                return created.object_id
        return ""

    async def commit(
        self,
        kind: CommitKind,
        subject_id: int,
        opponent_level: int,
        opponent_element: int,
        subject_level: int,
    ) -> SubjectSession:
        """Publish a commitment for ``subject_id`` and enter COMMITTED.

        The secret is written to the store only after the created event is
        observed; a submission error or ``ConfirmationTimeout`` leaves the
        store and the session untouched.

        Raises:
            CommitmentConflictError: A round is already committed or in flight.
            ReconciliationGapError: The subject has an orphaned commitment.
            ConfirmationTimeout: The created event was not observed in time.
            ProtocolError: The transaction names no commitment object.
        """
        session = self.session(subject_id)
        if session.phase == Phase.ORPHANED:
            raise ReconciliationGapError(self._gaps[subject_id])
        if session.phase == Phase.COMMITTED:
            msg = f"Subject {subject_id} already has commitment {session.commitment_id}"
            raise CommitmentConflictError(msg)
        if not 0 <= subject_level <= 0xFF:
            msg = f"subject_level {subject_level} does not fit in a u8"
            raise ValueError(msg)

        self._begin(subject_id)
        try:
            secret = generate_secret()
            digest = compute_commitment(subject_id, opponent_level, opponent_element, secret)
            receipt = await self._signer.submit(self._commit_transaction(kind, subject_id, digest))
            logger.info("Submitted %s commit for subject %d: %s", kind.value, subject_id, receipt.digest)

            result = await self._fetcher.fetch(receipt.digest, kind.created_event)
            if not result.confirmed or result.event is None:
                raise ConfirmationTimeout(receipt.digest, kind.created_event)

            commitment_id = result.event.get_str(*COMMITMENT_ID_FIELDS)
            if not commitment_id:
                commitment_id = await self._created_commitment(kind, receipt.digest)
            if not commitment_id:
                msg = (
                    f"{kind.created_event} in {receipt.digest} names no commitment"
                    f" and no {kind.object_type} was created"
                )
                raise ProtocolError(msg)
            committed_at = (
                result.event.get_int("timestamp")
                or result.event.timestamp_ms
                or self._clock.now_ms()
            )

            entry = SecretEntry(
                secret=secret,
                commitment_id=commitment_id,
                opponent_level=opponent_level,
                opponent_element=opponent_element,
                frozen_level=subject_level,
                committed_at=committed_at,
            )
            self._store.set(secret_key(kind, subject_id), entry.dumps())

            session.reset()
            session.phase = Phase.COMMITTED
            session.kind = kind
            session.commitment_id = commitment_id
            session.opponent_level = opponent_level
            session.opponent_element = opponent_element
            session.frozen_level = subject_level
            session.committed_at = committed_at
            session.deadline = self.timing.deadline(kind, subject_level, committed_at)
        finally:
            self._end(subject_id)

        logger.info(
            "Subject %d committed %s as %s; reveal possible at %d",
            subject_id, kind.value, commitment_id, session.deadline,
        )
        return session

    async def commit_for_asset(self, kind: CommitKind, asset: AssetRecord) -> SubjectSession:
        """Commit against the asset's current encounter, as read from the ledger."""
        if asset.has_active_commitment:
            msg = f"Asset {asset.asset_id} already has an active commitment on the ledger"
            raise CommitmentConflictError(msg)
        encounter = asset.current_encounter
        if encounter is None:
            msg = f"Asset {asset.asset_id} has no opponent to engage"
            raise ProtocolError(msg)
        if kind is CommitKind.CAPTURE and encounter.is_rare:
            msg = f"Rare opponent {encounter.name!r} cannot be captured"
            raise ProtocolError(msg)
        return await self.commit(
            kind, asset.asset_id, encounter.level, encounter.element, asset.level,
        )

    # -- reveal ---------------------------------------------------------

    def _load_secret(self, kind: CommitKind, subject_id: int) -> SecretEntry:
        raw = self._store.get(secret_key(kind, subject_id))
        if raw is None:
            msg = f"No stored secret for {kind.value} on subject {subject_id}"
            raise MissingSecretError(msg)
        return SecretEntry.loads(raw)

    async def reveal(self, subject_id: int) -> RevealOutcome:
        """Reveal the committed round and report its outcome.

        Raises:
            NoActiveCommitmentError: Nothing is committed for the subject.
            ReconciliationGapError: The subject's commitment is orphaned.
            RevealTooEarlyError: The deadline has not passed.
            MissingSecretError: The persisted secret is gone.
        """
        session = self.session(subject_id)
        kind = self._require_committed(session)
        now = self._clock.now_ms()
        if now < session.deadline:
            raise RevealTooEarlyError(subject_id, session.deadline, now)

        self._begin(subject_id)
        try:
            entry = self._load_secret(kind, subject_id)
            build = (
                self._builder.battle_reveal if kind is CommitKind.BATTLE
                else self._builder.capture_reveal
            )
            transaction = build(
                session.commitment_id or entry.commitment_id,
                subject_id,
                session.opponent_level,
                session.opponent_element,
                entry.secret,
            )
            receipt = await self._signer.submit(transaction)
            self._store.delete(secret_key(kind, subject_id))
            session.phase = Phase.REVEALED
            logger.info("Revealed %s for subject %d: %s", kind.value, subject_id, receipt.digest)

            confirmation = await self._fetcher.fetch(receipt.digest, kind.outcome_event)
        finally:
            self._end(subject_id)

        return RevealOutcome(
            subject_id=subject_id,
            kind=kind,
            confirmation=confirmation,
            outcome=_outcome_view(kind, confirmation),
        )

    # -- cancel ---------------------------------------------------------

    async def cancel(self, subject_id: int) -> SubmissionReceipt:
        """Abandon the subject's commitment (committed or orphaned)."""
        session = self.session(subject_id)
        if session.phase not in (Phase.COMMITTED, Phase.ORPHANED) or session.kind is None:
            msg = f"Subject {subject_id} has no commitment to cancel"
            raise NoActiveCommitmentError(msg)
        kind = session.kind

        self._begin(subject_id)
        try:
            if kind is CommitKind.BATTLE:
                transaction = self._builder.cancel_battle(session.commitment_id, subject_id)
            else:
                transaction = self._builder.cancel_capture(session.commitment_id, subject_id)
            receipt = await self._signer.submit(transaction)
            self._store.delete(secret_key(kind, subject_id))
            session.phase = Phase.CANCELLED
            self._gaps.pop(subject_id, None)
        finally:
            self._end(subject_id)

        logger.info("Cancelled %s for subject %d: %s", kind.value, subject_id, receipt.digest)
        return receipt


def _outcome_view(
    kind: CommitKind,
    confirmation: ConfirmationResult,
) -> BattleOutcome | CaptureOutcome | None:
    if confirmation.event is None:
        return None
    view = BattleOutcome if kind is CommitKind.BATTLE else CaptureOutcome
    try:
        return view.model_validate(confirmation.event.fields)
    except ValidationError as exc:
        logger.warning("Unreadable %s: %s", kind.outcome_event, exc)
        return None
