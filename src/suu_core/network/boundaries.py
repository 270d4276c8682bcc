"""Interfaces of the collaborators the core talks to.

The core never signs, serialises or transports transactions itself; it is
handed objects that satisfy these protocols (a wallet adapter, an RPC
client, a clock).  All network-facing methods are coroutines.
"""

from __future__ import annotations

import time
from typing import Any, Protocol, Sequence

from pydantic import BaseModel

from suu_core.models.events import EventPage, LedgerEvent
from suu_core.protocol.transactions import ObjectArg, PureArg, Transaction

NATIVE_COIN = "0x2::sui::SUI"


class SubmissionReceipt(BaseModel):
    """What the signer returns once the network accepted a transaction."""

    digest: str


class CreatedObject(BaseModel):
    """An object a transaction created, from its object changes."""

    object_id: str
    object_type: str = ""

    def matches(self, suffix: str) -> bool:
        return self.object_type == suffix or self.object_type.endswith(f"::{suffix}")


class TransactionSigner(Protocol):
    async def submit(self, transaction: Transaction) -> SubmissionReceipt:
        """Sign and submit; raise ``SubmissionError`` if the network rejects it.

        Success does not imply the transaction's events are indexed yet.
        """


class LedgerClient(Protocol):
    async def query(self, target: str, arguments: Sequence[ObjectArg | PureArg]) -> list[bytes]:
        """Run a read-only call and return the raw BCS return values."""

    async def query_events(
        self,
        event_type: str,
        limit: int = 100,
        descending: bool = True,
        cursor: Any = None,
    ) -> EventPage:
        """Page through the event log for ``event_type``."""

    async def get_transaction_events(self, digest: str) -> list[LedgerEvent] | None:
        """Events emitted by a transaction, or None while it is not indexed."""

    async def get_created_objects(self, digest: str) -> list[CreatedObject] | None:
        """Objects created by a transaction, or None while it is not indexed."""

    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        """Parsed fields of an on-chain object, or None if it no longer exists."""

    async def get_balance(self, owner: str, coin_type: str = NATIVE_COIN) -> int:
        """Total balance of ``coin_type`` held by ``owner``, in its smallest unit."""


class Clock(Protocol):
    def now_ms(self) -> int:
        """Current time in milliseconds since the epoch."""


class SystemClock:
    def now_ms(self) -> int:
        return int(time.time() * 1000)
