"""Unsigned transaction descriptions for every suu contract action.

A ``Transaction`` here is what the signing collaborator receives: an
optional gas budget, coin splits taken off the gas coin, and one Move call.
Builders are pure; object references and fixed amounts are constants, so
callers can only choose the parameters the game actually exposes.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from suu_core.config import CLOCK_OBJECT_ID, RANDOM_OBJECT_ID, ContractConfig
from suu_core.crypto.hashing import DIGEST_LENGTH, U64_MAX
from suu_core.errors import TransactionBuildError

GAS_BUDGET = 50_000_000           # 0.05 SUI
PURCHASE_PRICE = 1_000_000_000    # 1 SUI
CAPTURE_FEE = 500_000_000         # 0.5 SUI
MAX_BASIS_POINTS = 10_000

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


class ObjectArg(BaseModel):
    kind: Literal["object"] = "object"
    object_id: str


class PureArg(BaseModel):
    kind: Literal["pure"] = "pure"
    type: Literal["u8", "u64", "bool", "address", "vector<u8>"]
    value: Any


class SplitResult(BaseModel):
    """Reference to the coin produced by ``Transaction.splits[index]``."""

    kind: Literal["split"] = "split"
    index: int = 0


Argument = Annotated[Union[ObjectArg, PureArg, SplitResult], Field(discriminator="kind")]


class CoinSplit(BaseModel):
    amount: int = Field(gt=0, description="Amount split off the gas coin")


class MoveCall(BaseModel):
    target: str = Field(description="package::module::function")
    arguments: list[Argument] = Field(default_factory=list)

    @property
    def function(self) -> str:
        return self.target.rsplit("::", 1)[-1]


class Transaction(BaseModel):
    """An unsigned transaction ready for the signer."""

    call: MoveCall
    splits: list[CoinSplit] = Field(default_factory=list)
    gas_budget: int | None = None


# ------------------------------------------------------------------
# Input validation
# ------------------------------------------------------------------

def _amount(value: int, name: str = "amount") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TransactionBuildError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise TransactionBuildError(f"{name} must be positive, got {value}")
    if value > U64_MAX:
        raise TransactionBuildError(f"{name} {value} does not fit in a u64")
    return value


def _u64(value: int, name: str) -> PureArg:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U64_MAX:
        raise TransactionBuildError(f"{name} {value!r} is not a valid u64")
    return PureArg(type="u64", value=value)


def _u8(value: int, name: str) -> PureArg:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise TransactionBuildError(f"{name} {value!r} is not a valid u8")
    return PureArg(type="u8", value=value)


def _address(value: str, name: str) -> PureArg:
    if not isinstance(value, str) or not _ADDRESS_RE.match(value):
        raise TransactionBuildError(f"{name} {value!r} is not a valid address")
    return PureArg(type="address", value=value.lower())


def _bytes(value: bytes) -> PureArg:
    return PureArg(type="vector<u8>", value=list(value))


def _digest(value: bytes) -> PureArg:
    if len(value) != DIGEST_LENGTH:
        raise TransactionBuildError(
            f"commitment hash must be {DIGEST_LENGTH} bytes, got {len(value)}"
        )
    return _bytes(value)


class TransactionBuilder:
    """Builds every transaction the client can submit to the suu contract."""

    def __init__(self, contract: ContractConfig) -> None:
        self.contract = contract

    def _call(
        self,
        function: str,
        *args: Any,
        splits: list[int] | None = None,
        gas_budget: int | None = None,
    ) -> Transaction:
        arguments = [ObjectArg(object_id=self.contract.object_id), *args]
        return Transaction(
            call=MoveCall(target=self.contract.target(function), arguments=arguments),
            splits=[CoinSplit(amount=a) for a in splits or []],
            gas_budget=gas_budget,
        )

    @staticmethod
    def _clock() -> ObjectArg:
        return ObjectArg(object_id=CLOCK_OBJECT_ID)

    @staticmethod
    def _random() -> ObjectArg:
        return ObjectArg(object_id=RANDOM_OBJECT_ID)

    # -- assets ---------------------------------------------------------

    def purchase(self) -> Transaction:
        """Mint a new asset for the fixed purchase price."""
        return self._call(
            "buy_nft", SplitResult(), self._random(), self._clock(),
            splits=[PURCHASE_PRICE], gas_budget=GAS_BUDGET,
        )

    def set_active(self, asset_id: int) -> Transaction:
        return self._call("set_active_nft", _u64(asset_id, "asset_id"))

    def randomize_opponent(self, asset_id: int) -> Transaction:
        return self._call(
            "random_enemy", _u64(asset_id, "asset_id"), self._random(), self._clock(),
        )

    # -- battle ---------------------------------------------------------

    def battle_commit(self, asset_id: int, commitment_hash: bytes) -> Transaction:
        return self._call(
            "battle_commit", _u64(asset_id, "asset_id"), _digest(commitment_hash), self._clock(),
        )

    def battle_reveal(
        self,
        commitment_id: str,
        asset_id: int,
        opponent_level: int,
        opponent_element: int,
        secret: str,
    ) -> Transaction:
        return self._call(
            "battle_reveal_by_address",
            _address(commitment_id, "commitment_id"),
            _u64(asset_id, "asset_id"),
            _u8(opponent_level, "opponent_level"),
            _u8(opponent_element, "opponent_element"),
            _bytes(secret.encode("utf-8")),
            self._random(),
            self._clock(),
        )

    def cancel_battle(self, commitment_id: str, asset_id: int) -> Transaction:
        return self._call(
            "cancel_battle_commitment_by_address",
            _address(commitment_id, "commitment_id"),
            _u64(asset_id, "asset_id"),
            self._clock(),
        )

    # -- capture --------------------------------------------------------

    def capture_commit(self, asset_id: int, commitment_hash: bytes) -> Transaction:
        """Commit to a capture attempt; pays the fixed capture fee."""
        return self._call(
            "capture_commit",
            _u64(asset_id, "asset_id"),
            _digest(commitment_hash),
            SplitResult(),
            self._clock(),
            splits=[CAPTURE_FEE],
            gas_budget=GAS_BUDGET,
        )

    def capture_reveal(
        self,
        commitment_id: str,
        asset_id: int,
        opponent_level: int,
        opponent_element: int,
        secret: str,
    ) -> Transaction:
        return self._call(
            "capture_reveal_by_address",
            _address(commitment_id, "commitment_id"),
            _u64(asset_id, "asset_id"),
            _u8(opponent_level, "opponent_level"),
            _u8(opponent_element, "opponent_element"),
            _bytes(secret.encode("utf-8")),
            self._random(),
            self._clock(),
            gas_budget=GAS_BUDGET,
        )

    def cancel_capture(self, commitment_id: str, asset_id: int) -> Transaction:
        return self._call(
            "cancel_capture_commitment_by_address",
            _address(commitment_id, "commitment_id"),
            _u64(asset_id, "asset_id"),
            self._clock(),
            gas_budget=GAS_BUDGET,
        )

    # -- market ---------------------------------------------------------

    def list_asset(self, asset_id: int, price: int) -> Transaction:
        return self._call(
            "list_nft", _u64(asset_id, "asset_id"), _u64(_amount(price, "price"), "price"),
            self._clock(),
        )

    def delist_asset(self, asset_id: int) -> Transaction:
        return self._call("cancel_listing", _u64(asset_id, "asset_id"), self._clock())

    def buy_listed(self, asset_id: int, price: int) -> Transaction:
        """Buy a listed asset, paying exactly the listed ``price``."""
        return self._call(
            "buy_listed_nft", _u64(asset_id, "asset_id"), SplitResult(), self._clock(),
            splits=[_amount(price, "price")], gas_budget=GAS_BUDGET,
        )

    # -- banker ---------------------------------------------------------

    def deposit(self, amount: int) -> Transaction:
        return self._call(
            "deposit", SplitResult(), self._clock(),
            splits=[_amount(amount)], gas_budget=GAS_BUDGET,
        )

    def withdraw(self, amount: int) -> Transaction:
        return self._call("withdraw", _u64(_amount(amount), "amount"), self._clock())

    # -- administration -------------------------------------------------

    def update_asset_level(self, asset_id: int, level: int) -> Transaction:
        return self._call(
            "update_nft_level", _u64(asset_id, "asset_id"), _u8(level, "level"), self._clock(),
        )

    def update_asset_element(self, asset_id: int, element: int) -> Transaction:
        return self._call(
            "update_nft_element", _u64(asset_id, "asset_id"), _u8(element, "element"),
            self._clock(),
        )

    def update_encounter_cooldown(self, cooldown_ms: int) -> Transaction:
        return self._call(
            "update_enemy_rerandom_cooldown", _u64(_amount(cooldown_ms, "cooldown_ms"), "cooldown_ms"),
            self._clock(),
        )

    def update_reveal_delay(self, delay_ms: int) -> Transaction:
        return self._call(
            "update_battle_reveal_delay", _u64(_amount(delay_ms, "delay_ms"), "delay_ms"),
            self._clock(),
        )

    def update_rare_probability(self, base: int, maximum: int) -> Transaction:
        """Set the golden encounter probability range, in basis points."""
        if not 0 <= base <= maximum <= MAX_BASIS_POINTS:
            raise TransactionBuildError(
                f"Need 0 <= base ({base}) <= max ({maximum}) <= {MAX_BASIS_POINTS}"
            )
        return self._call(
            "update_golden_monster_probability", _u64(base, "base"), _u64(maximum, "max"),
            self._clock(),
        )
