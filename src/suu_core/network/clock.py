"""Clock aligned with ledger time.

The contract checks reveal deadlines against its own Clock object, so a
local clock that runs ahead would offer reveals the ledger rejects.
``ChainClock`` keeps the local clock's resolution and adds the offset
measured at the last ``sync()``.
"""

from __future__ import annotations

import logging

from suu_core.network.boundaries import Clock, SystemClock
from suu_core.network.reader import LedgerReader

logger = logging.getLogger(__name__)


class ChainClock:
    def __init__(self, reader: LedgerReader, local: Clock | None = None) -> None:
        self._reader = reader
        self._local = local or SystemClock()
        self.offset_ms = 0
        self.synced = False

    async def sync(self) -> int:
        """Measure the ledger offset; the round trip midpoint stands for "now"."""
        before = self._local.now_ms()
        chain_ms = await self._reader.get_chain_time()
        after = self._local.now_ms()
        self.offset_ms = chain_ms - (before + after) // 2
        self.synced = True
        logger.debug("Ledger clock offset %d ms", self.offset_ms)
        return self.offset_ms

    def now_ms(self) -> int:
        return self._local.now_ms() + self.offset_ms
