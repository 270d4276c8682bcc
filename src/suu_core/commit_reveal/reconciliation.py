"""Rebuild commit-reveal sessions from the ledger after a reload.

The ledger is the source of truth for *whether* a round is outstanding;
the local secret store is the only source of the secret.  Reconciliation
joins the two:

  unrevealed commitment + matching secret   -> RestoredState (COMMITTED)
  unrevealed commitment, no usable secret   -> ReconciliationGap (ORPHANED)
  no unrevealed commitment                  -> None (IDLE)
  event window exhausted before a match     -> UnresolvedSearch (unchanged)

Deadlines are recomputed from the commit-time timestamp and level, so a
restored countdown matches the one the contract enforces.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, AsyncIterator

from pydantic import BaseModel, Field

from suu_core.codec.records import commitment_from_object
from suu_core.commit_reveal.timing import RevealTiming
from suu_core.config import ContractConfig
from suu_core.crypto.hashing import verify_commitment
from suu_core.models.commitment import (
    COMMITMENT_ID_FIELDS,
    CommitKind,
    CommitmentRecord,
    SecretEntry,
    secret_key,
)
from suu_core.models.events import LedgerEvent
from suu_core.models.session import SubjectSession
from suu_core.network.boundaries import LedgerClient
from suu_core.network.reader import EventScan, LedgerReader
from suu_core.storage.base import SecretStore

if TYPE_CHECKING:
    from suu_core.commit_reveal.machine import CommitRevealMachine

logger = logging.getLogger(__name__)


class RestoredState(BaseModel):
    """A ledger commitment this client can still reveal."""

    commitment: CommitmentRecord
    opponent_level: int = Field(ge=0, le=255)
    opponent_element: int = Field(ge=0, le=255)
    frozen_level: int = Field(ge=0, le=255)
    committed_at: int = Field(ge=0)
    deadline: int = Field(ge=0)

    @property
    def subject_id(self) -> int:
        return self.commitment.subject_id

    @property
    def kind(self) -> CommitKind:
        return self.commitment.kind


class ReconciliationGap(BaseModel):
    """A ledger commitment with no usable local secret."""

    commitment: CommitmentRecord
    reason: str


class UnresolvedSearch(BaseModel):
    """The event window ran out before the subject's commitment was found.

    Older commitments may still be outstanding; nothing can be concluded.
    """

    subject_id: int
    kind: CommitKind | None = None
    pages_scanned: int = 0


class ReconciliationService:
    """Finds outstanding commitments and pairs them with stored secrets."""

    def __init__(
        self,
        ledger: LedgerClient,
        store: SecretStore,
        timing: RevealTiming | None = None,
        contract: ContractConfig | None = None,
        page_size: int = 50,
        max_pages: int = 4,
    ) -> None:
        self._ledger = ledger
        self._store = store
        self.timing = timing or RevealTiming()
        self._reader = LedgerReader(ledger, contract or ContractConfig.for_network("testnet"))
        self.page_size = page_size
        self.max_pages = max_pages

    def _scan(self, kind: CommitKind) -> EventScan:
        return self._reader.iter_events(
            kind.created_event, limit=self.page_size, max_pages=self.max_pages,
        )

    async def _commitments(
        self,
        scan: EventScan,
        player: str,
        kind: CommitKind,
        subject_id: int | None = None,
    ) -> AsyncIterator[CommitmentRecord]:
        """Unrevealed commitments of ``player``, most recent first."""
        player = player.lower()
        async for event in scan:
            if event.get_str("player").lower() != player:
                continue
            event_subject = event.get_int("nft_id", default=-1)
            if subject_id is not None and event_subject != subject_id:
                continue
            record = await self._load(kind, event, player, event_subject)
            if record is not None and not record.revealed:
                yield record

    async def _load(
        self,
        kind: CommitKind,
        event: LedgerEvent,
        player: str,
        subject_id: int,
    ) -> CommitmentRecord | None:
        commitment_id = event.get_str(*COMMITMENT_ID_FIELDS)
        if not commitment_id:
            return None
        fields = await self._ledger.get_object(commitment_id)
        if fields is None:
            logger.debug("Commitment %s no longer exists", commitment_id)
            return None
        committed_at = event.get_int("timestamp") or event.timestamp_ms
        return commitment_from_object(
            kind,
            commitment_id,
            fields,
            player=player,
            subject_id=subject_id if subject_id >= 0 else None,
            committed_at=committed_at,
        )

    async def _search(
        self,
        player: str,
        subject_id: int,
        kind: CommitKind | None,
    ) -> tuple[CommitmentRecord | None, bool]:
        """Most recent match, and whether every scanned window was complete."""
        complete = True
        kinds = [kind] if kind is not None else list(CommitKind)
        for k in kinds:
            scan = self._scan(k)
            async for record in self._commitments(scan, player, k, subject_id):
                return record, True
            complete = complete and not scan.truncated
        return None, complete

    async def find_commitment(
        self,
        player: str,
        subject_id: int,
        kind: CommitKind | None = None,
    ) -> CommitmentRecord | None:
        """Most recent unrevealed commitment for the subject, if any.

        None also covers a search cut short by the event window; use
        ``reconcile`` where that difference matters.
        """
        record, _ = await self._search(player, subject_id, kind)
        return record

    async def pending_commitments(self, player: str, kind: CommitKind) -> list[CommitmentRecord]:
        """Every unrevealed ``kind`` commitment of ``player``, one per subject."""
        seen: set[int] = set()
        pending: list[CommitmentRecord] = []
        scan = self._scan(kind)
        async for record in self._commitments(scan, player, kind):
            if record.subject_id not in seen:
                seen.add(record.subject_id)
                pending.append(record)
        if scan.truncated:
            logger.warning(
                "Pending %s commitments of %s may be incomplete: stopped after %d event pages",
                kind.value, player, self.max_pages,
            )
        return pending

    def pair_with_secret(self, record: CommitmentRecord) -> RestoredState | ReconciliationGap:
        """Join a ledger commitment with the locally stored secret."""
        raw = self._store.get(secret_key(record.kind, record.subject_id))
        if raw is None:
            return ReconciliationGap(commitment=record, reason="no local secret")
        entry = SecretEntry.loads(raw)
        if entry.commitment_id and entry.commitment_id.lower() != record.commitment_id.lower():
            return ReconciliationGap(
                commitment=record,
                reason=f"local secret belongs to commitment {entry.commitment_id}",
            )

        encounter = record.encounter
        opponent_level = (
            entry.opponent_level if entry.opponent_level is not None
            else encounter.level if encounter is not None else None
        )
        opponent_element = (
            entry.opponent_element if entry.opponent_element is not None
            else encounter.element if encounter is not None else None
        )
        if opponent_level is None or opponent_element is None:
            return ReconciliationGap(commitment=record, reason="opponent parameters unknown")

        frozen_level = record.frozen_level if record.frozen_level is not None else entry.frozen_level
        if frozen_level is None:
            return ReconciliationGap(commitment=record, reason="commit-time level unknown")

        if record.commitment_hash and not verify_commitment(
            record.commitment_hash, record.subject_id, opponent_level, opponent_element, entry.secret,
        ):
            return ReconciliationGap(commitment=record, reason="local secret does not match commitment")

        return RestoredState(
            commitment=record,
            opponent_level=opponent_level,
            opponent_element=opponent_element,
            frozen_level=frozen_level,
            committed_at=record.committed_at,
            deadline=self.timing.deadline(record.kind, frozen_level, record.committed_at),
        )

    async def reconcile(
        self,
        player: str,
        subject_id: int,
        kind: CommitKind | None = None,
    ) -> RestoredState | ReconciliationGap | UnresolvedSearch | None:
        record, complete = await self._search(player, subject_id, kind)
        if record is None:
            if complete:
                return None
            return UnresolvedSearch(subject_id=subject_id, kind=kind, pages_scanned=self.max_pages)
        return self.pair_with_secret(record)

    async def restore(
        self,
        machine: CommitRevealMachine,
        player: str,
        subject_id: int,
        kind: CommitKind | None = None,
    ) -> SubjectSession:
        """Reconcile ``subject_id`` and install the result into ``machine``.

        An unresolved search leaves the session as it is, so an orphaned or
        committed subject stays that way.
        """
        result = await self.reconcile(player, subject_id, kind)
        if result is None:
            return machine.clear(subject_id)
        if isinstance(result, UnresolvedSearch):
            session = machine.session(subject_id)
            logger.warning(
                "No commitment for subject %d in the last %d event pages; keeping it %s",
                subject_id, result.pages_scanned, session.phase.value,
            )
            return session
        if isinstance(result, ReconciliationGap):
            return machine.install_gap(result)
        logger.info(
            "Restored %s commitment %s for subject %d (deadline %d)",
            result.kind.value, result.commitment.commitment_id, subject_id, result.deadline,
        )
        return machine.install_restored(result)
