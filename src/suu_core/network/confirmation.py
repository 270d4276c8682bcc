"""Bounded polling for a transaction's emitted events.

The event index lags block finality by a few seconds, so a freshly
submitted transaction often has no visible events yet.  The fetcher polls
with a growing delay and reports one of three outcomes:

  CONFIRMED  the expected event was observed
  NOT_YET    a single poll saw nothing (intermediate, or the fetch was cut short)
  UNKNOWN    every attempt was used up; the transaction may still land

UNKNOWN is never a failure: the transaction belongs to the network.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

from suu_core.errors import LedgerError
from suu_core.models.events import LedgerEvent
from suu_core.network.boundaries import LedgerClient

logger = logging.getLogger(__name__)


class ConfirmationStatus(str, Enum):
    CONFIRMED = "confirmed"
    NOT_YET = "not_yet"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BackoffPolicy:
    """Attempt count and linearly growing delays (seconds) before each poll."""

    attempts: int = 6
    initial_delay: float = 1.0
    increment: float = 0.5

    def __post_init__(self) -> None:
        if self.attempts < 1:
            msg = "attempts must be at least 1"
            raise ValueError(msg)
        if self.initial_delay < 0 or self.increment < 0:
            msg = "delays must be non-negative"
            raise ValueError(msg)

    @property
    def delays(self) -> list[float]:
        return [self.initial_delay + i * self.increment for i in range(self.attempts)]

    @property
    def total_wait(self) -> float:
        return sum(self.delays)


@dataclass
class ConfirmationResult:
    status: ConfirmationStatus
    digest: str
    event: LedgerEvent | None = None
    events: list[LedgerEvent] = field(default_factory=list)
    attempts: int = 0

    @property
    def confirmed(self) -> bool:
        return self.status == ConfirmationStatus.CONFIRMED


class EventRetryFetcher:
    """Polls the ledger for a transaction's event with bounded backoff."""

    def __init__(
        self,
        ledger: LedgerClient,
        policy: BackoffPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._ledger = ledger
        self.policy = policy or BackoffPolicy()
        self._sleep = sleep

    async def poll_once(self, digest: str, event_suffix: str) -> ConfirmationResult:
        """A single lookup; transport errors count as NOT_YET."""
        try:
            events = await self._ledger.get_transaction_events(digest)
        except LedgerError as exc:
            logger.debug("Event lookup for %s failed: %s", digest, exc)
            events = None
        if events:
            for event in events:
                if event.matches(event_suffix):
                    return ConfirmationResult(
                        ConfirmationStatus.CONFIRMED, digest, event=event, events=list(events),
                    )
        return ConfirmationResult(ConfirmationStatus.NOT_YET, digest, events=list(events or []))

    async def fetch(self, digest: str, event_suffix: str) -> ConfirmationResult:
        """Poll until ``event_suffix`` shows up or the policy is exhausted."""
        last = ConfirmationResult(ConfirmationStatus.NOT_YET, digest)
        for attempt, delay in enumerate(self.policy.delays, start=1):
            await self._sleep(delay)
            last = await self.poll_once(digest, event_suffix)
            last.attempts = attempt
            if last.confirmed:
                logger.debug("%s for %s seen after %d attempt(s)", event_suffix, digest, attempt)
                return last
            logger.debug(
                "%s for %s not indexed yet (%d/%d)",
                event_suffix, digest, attempt, self.policy.attempts,
            )
        logger.warning(
            "%s for %s not observed after %d attempts; result unknown",
            event_suffix, digest, self.policy.attempts,
        )
        return ConfirmationResult(
            ConfirmationStatus.UNKNOWN, digest, events=last.events, attempts=last.attempts,
        )

    def spawn(self, digest: str, event_suffix: str) -> asyncio.Task[ConfirmationResult]:
        """Run ``fetch`` as a cancellable task (must be called inside a running loop)."""
        return asyncio.get_running_loop().create_task(
            self.fetch(digest, event_suffix), name=f"confirm-{digest}",
        )
