"""Ledger-side records of the suu contract: assets, encounters, listings.

The client's copies are read-only snapshots: they are refreshed from the
ledger after every state-changing transaction confirms.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Asset elements
ELEMENT_METAL = 0
ELEMENT_WOOD = 1
ELEMENT_WATER = 2
ELEMENT_FIRE = 3
ELEMENT_EARTH = 4

# Monster categories
CATEGORY_BEAM = 0
CATEGORY_MARBLE = 1
CATEGORY_PIXEL = 2
CATEGORY_SUNSET = 3
CATEGORY_BAUHAUS = 4
CATEGORY_RING = 5


class EncounterRecord(BaseModel):
    """An opponent bound to one asset until it is fought or replaced."""

    name: str
    level: int = Field(ge=0, le=255)
    element: int = Field(ge=0, le=255)
    category: int = Field(default=0, ge=0, le=255)
    is_rare: bool = Field(default=False, description="Golden monster encounter")
    generated_at: int = Field(default=0, ge=0, description="Generation time (ms)")


class AssetRecord(BaseModel):
    """A player-owned game asset (the contract's HealthNFT)."""

    asset_id: int = Field(ge=0, description="Id used to query the contract")
    uid: str
    owner: str
    name: str
    element: int = Field(ge=0, le=255)
    category: int = Field(ge=0, le=255)
    level: int = Field(ge=0, le=255)
    experience: int = Field(ge=0)
    minted_at: int = Field(ge=0)
    defeated_rare: bool = False
    current_encounter: EncounterRecord | None = None
    last_encounter_generated_at: int = Field(default=0, ge=0)
    is_listed: bool = False
    has_active_commitment: bool = Field(
        default=False,
        description="True iff one unrevealed commitment exists for this asset",
    )

    def owned_by(self, address: str) -> bool:
        return self.owner.lower() == address.lower()


class ListingRecord(BaseModel):
    """A market listing, keyed by asset id."""

    asset_id: int = Field(ge=0)
    seller: str
    price: int = Field(ge=0, description="Price in the smallest ledger unit")
    listed_at: int = Field(ge=0)


class ContractInfo(BaseModel):
    banker: str
    balance: int = Field(ge=0)
    total_minted: int = Field(ge=0)


class ContractBalances(BaseModel):
    """Contract balance split into the locked and withdrawable parts."""

    locked: int = Field(ge=0)
    withdrawable: int = Field(ge=0)

    @property
    def total(self) -> int:
        return self.locked + self.withdrawable


class GameConfig(BaseModel):
    """Tunable game parameters; probabilities are in basis points (0-10000)."""

    min_rare_reward: int = Field(ge=0)
    max_rare_reward: int = Field(ge=0)
    rare_base_probability: int = Field(ge=0, le=10_000)
    rare_max_probability: int = Field(ge=0, le=10_000)
