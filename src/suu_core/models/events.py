"""Events read from the ledger's public event log."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class LedgerEvent(BaseModel):
    """A single emitted event with its parsed JSON fields."""

    event_type: str = Field(description="Fully-qualified type, e.g. 0x..::suu::BattleEvent")
    fields: dict[str, Any] = Field(default_factory=dict)
    timestamp_ms: int | None = None
    digest: str = Field(default="", description="Transaction that emitted the event")

    def matches(self, suffix: str) -> bool:
        """Match on ``::<suffix>`` so a package upgrade does not break lookups."""
        return self.event_type == suffix or self.event_type.endswith(f"::{suffix}")

    def get_int(self, *names: str, default: int = 0) -> int:
        """First present field among ``names`` as an int (u64 arrive as strings)."""
        for name in names:
            value = self.fields.get(name)
            if value is not None and value != "":
                return int(value)
        return default

    def get_str(self, *names: str, default: str = "") -> str:
        for name in names:
            value = self.fields.get(name)
            if value is not None and value != "":
                return str(value)
        return default


class EventPage(BaseModel):
    events: list[LedgerEvent] = Field(default_factory=list)
    next_cursor: Any = None
    has_next_page: bool = False


class _EventView(BaseModel):
    """Base for typed views built from ``LedgerEvent.fields``."""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_numeric_strings(cls, value: Any) -> Any:
        if isinstance(value, str) and value.isdigit():
            return int(value)
        return value


class MintedEvent(_EventView):
    asset_id: int = Field(validation_alias="nft_id")
    owner: str
    element: int
    category: int = Field(default=0, validation_alias="monster_type")
    level: int
    timestamp: int


class BattleOutcome(_EventView):
    asset_id: int = Field(validation_alias="nft_id")
    player: str = ""
    is_rare: bool = Field(default=False, validation_alias="is_golden_monster")
    enemy_level: int = 0
    enemy_element: int = 0
    player_level: int = 0
    player_element: int = 0
    is_win: bool = False
    experience_gained: int = 0
    level_increased: bool = False
    reward_amount: int = 0
    timestamp: int = 0


class CaptureOutcome(_EventView):
    asset_id: int = Field(default=0, validation_alias="nft_id")
    is_success: bool = False
    capture_probability: int = 0


class ListingCreatedEvent(_EventView):
    asset_id: int = Field(validation_alias="nft_id")
    seller: str
    price: int
    timestamp: int


class ListingCancelledEvent(_EventView):
    asset_id: int = Field(validation_alias="nft_id")
    seller: str
    timestamp: int


class ListingPurchasedEvent(_EventView):
    asset_id: int = Field(validation_alias="nft_id")
    seller: str
    buyer: str
    price: int
    fee: int
    seller_amount: int
    timestamp: int
