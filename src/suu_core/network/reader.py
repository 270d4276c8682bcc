"""Read-only views of suu contract state.

Every method issues read-only calls through the ``LedgerClient`` query
boundary and decodes the BCS results with ``suu_core.codec``.  Decode
errors propagate: a record that cannot be decoded is never returned.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, TypeVar

from pydantic import BaseModel

from suu_core.codec.records import (
    decode_asset,
    decode_contract_balances,
    decode_contract_info,
    decode_game_config,
    decode_listing,
    decode_optional_encounter,
    decode_u64,
)
from suu_core.config import ContractConfig
from suu_core.models.asset import (
    AssetRecord,
    ContractBalances,
    ContractInfo,
    EncounterRecord,
    GameConfig,
    ListingRecord,
)
from suu_core.models.events import (
    LedgerEvent,
    ListingCancelledEvent,
    ListingCreatedEvent,
    ListingPurchasedEvent,
    MintedEvent,
)
from suu_core.errors import LedgerError
from suu_core.network.boundaries import NATIVE_COIN, LedgerClient
from suu_core.protocol.transactions import ObjectArg, PureArg

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=BaseModel)

MAX_PAGE_SIZE = 200
CLOCK_OBJECT_ID = "0x6"


class EventScan:
    """Paged walk over one event type, newest first.

    ``truncated`` is set once the walk stops at ``max_pages`` while the
    ledger still reports older pages, so callers can tell "not found" from
    "not looked at".
    """

    def __init__(self, ledger: LedgerClient, event_type: str, limit: int, max_pages: int) -> None:
        self._ledger = ledger
        self.event_type = event_type
        self.limit = limit
        self.max_pages = max_pages
        self.truncated = False

    def __aiter__(self) -> AsyncIterator[LedgerEvent]:
        return self._walk()

    async def _walk(self) -> AsyncIterator[LedgerEvent]:
        cursor: Any = None
        for _ in range(self.max_pages):
            page = await self._ledger.query_events(
                self.event_type, limit=self.limit, descending=True, cursor=cursor,
            )
            for item in page.events:
                yield item
            if not page.has_next_page:
                return
            cursor = page.next_cursor
        self.truncated = True
        logger.debug("Stopped scanning %s after %d pages", self.event_type, self.max_pages)


class LedgerReader:
    """Typed read access to the suu contract."""

    def __init__(self, ledger: LedgerClient, contract: ContractConfig) -> None:
        self._ledger = ledger
        self.contract = contract

    async def _query(self, function: str, *args: PureArg) -> list[bytes]:
        arguments: list[ObjectArg | PureArg] = [ObjectArg(object_id=self.contract.object_id), *args]
        return await self._ledger.query(self.contract.target(function), arguments)

    async def _query_u64(self, function: str, *args: PureArg) -> int:
        values = await self._query(function, *args)
        if not values:
            return 0
        return decode_u64(values[0])

    # -- assets ---------------------------------------------------------

    async def get_asset(self, asset_id: int) -> AssetRecord | None:
        values = await self._query("get_nft", PureArg(type="u64", value=asset_id))
        if not values:
            logger.debug("get_nft returned nothing for asset %d", asset_id)
            return None
        return decode_asset(values[0], asset_id)

    async def get_current_encounter(self, asset_id: int) -> EncounterRecord | None:
        values = await self._query("get_nft_current_enemy", PureArg(type="u64", value=asset_id))
        if not values:
            return None
        return decode_optional_encounter(values[0])

    async def get_next_encounter_time(self, asset_id: int) -> int:
        """Earliest time (ms) the opponent can be re-randomised; 0 if unknown."""
        return await self._query_u64(
            "get_next_enemy_random_time", PureArg(type="u64", value=asset_id),
        )

    async def get_active_asset(self, owner: str) -> int | None:
        asset_id = await self._query_u64("get_active_nft", PureArg(type="address", value=owner))
        return asset_id or None

    async def get_owner_asset_ids(self, owner: str) -> list[int]:
        owner_arg = PureArg(type="address", value=owner)
        count = await self._query_u64("get_owner_nft_count", owner_arg)
        return [
            await self._query_u64("get_owner_nft_id_at", owner_arg, PureArg(type="u64", value=i))
            for i in range(count)
        ]

    async def get_user_assets(self, owner: str) -> list[AssetRecord]:
        """Every asset ``owner`` holds, newest id first (includes bought ones)."""
        ids = await self.get_owner_asset_ids(owner)
        assets = await asyncio.gather(*(self.get_asset(i) for i in ids))
        owned = [a for a in assets if a is not None and a.owned_by(owner)]
        owned.sort(key=lambda a: a.asset_id, reverse=True)
        return owned

    # -- market ---------------------------------------------------------

    async def get_listing(self, asset_id: int) -> ListingRecord | None:
        values = await self._query("get_listing_info", PureArg(type="u64", value=asset_id))
        if len(values) < 3:
            return None
        return decode_listing(values, asset_id)

    async def _market_id_at(self, index: int) -> int:
        return await self._query_u64("get_market_list_id_at", PureArg(type="u64", value=index))

    async def get_market_listed_ids(self) -> list[int]:
        count = await self._query_u64("get_market_list_len")
        return [await self._market_id_at(i) for i in range(count)]

    async def get_market_listed_ids_page(self, limit: int = 20, page: int = 0) -> list[int]:
        """One page of listed ids, newest listing first; ``page`` starts at 0."""
        count = await self._query_u64("get_market_list_len")
        if count == 0:
            return []
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        end = max(0, count - page * limit)
        start = max(0, end - limit)
        return [await self._market_id_at(i) for i in range(end - 1, start - 1, -1)]

    # -- contract -------------------------------------------------------

    async def get_contract_info(self) -> ContractInfo:
        return decode_contract_info(await self._query("get_contract_info"))

    async def get_contract_balances(self) -> ContractBalances:
        return decode_contract_balances(await self._query("get_contract_balances"))

    async def get_game_config(self) -> GameConfig:
        return decode_game_config(await self._query("get_game_config_values"))

    # -- chain ----------------------------------------------------------

    async def get_chain_time(self) -> int:
        """Ledger time (ms) from the shared Clock object."""
        fields = await self._ledger.get_object(CLOCK_OBJECT_ID)
        if isinstance(fields, dict):
            fields = fields.get("fields", fields)
        value = fields.get("timestamp_ms") if isinstance(fields, dict) else None
        if value is None or value == "":
            msg = f"Clock object {CLOCK_OBJECT_ID} has no timestamp_ms"
            raise LedgerError(msg)
        return int(value)

    async def get_user_balance(self, owner: str, coin_type: str = NATIVE_COIN) -> int:
        return await self._ledger.get_balance(owner, coin_type)

    # -- event history --------------------------------------------------

    def iter_events(
        self,
        event: str,
        limit: int = 100,
        max_pages: int = 1,
    ) -> EventScan:
        """Most-recent-first events of ``event``, at most ``max_pages`` pages."""
        return EventScan(self._ledger, self.contract.event_type(event), limit, max_pages)

    async def _views(self, event: str, view: type[V], limit: int) -> list[V]:
        return [view.model_validate(e.fields) async for e in self.iter_events(event, limit=limit)]

    async def minted_events(self, owner: str | None = None, limit: int = 1000) -> list[MintedEvent]:
        events = await self._views("NFTMintedEvent", MintedEvent, limit)
        if owner is not None:
            events = [e for e in events if e.owner.lower() == owner.lower()]
        return events

    async def listing_created_events(self, limit: int = 200) -> list[ListingCreatedEvent]:
        return await self._views("ListingCreatedEvent", ListingCreatedEvent, limit)

    async def listing_cancelled_events(self, limit: int = 200) -> list[ListingCancelledEvent]:
        return await self._views("ListingCancelledEvent", ListingCancelledEvent, limit)

    async def purchased_events(self, limit: int = 200) -> list[ListingPurchasedEvent]:
        return await self._views("ListingPurchasedEvent", ListingPurchasedEvent, limit)
