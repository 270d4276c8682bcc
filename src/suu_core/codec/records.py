"""Typed decoders for the payloads returned by read-only contract calls."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from suu_core.codec.reader import BinaryReader
from suu_core.codec.schema import (
    ASSET_SCHEMA,
    BALANCES_RETURNS,
    CONTRACT_INFO_RETURNS,
    ENCOUNTER_SCHEMA,
    GAME_CONFIG_RETURNS,
    LISTING_RETURNS,
    decode_fields,
    decode_record,
    decode_return_values,
)
from suu_core.errors import DecodeError
from suu_core.models.asset import (
    AssetRecord,
    ContractBalances,
    ContractInfo,
    EncounterRecord,
    GameConfig,
    ListingRecord,
)
from suu_core.models.commitment import CommitKind, CommitmentRecord

RawBytes = bytes | bytearray | list[int]


def _build(model: type, values: Mapping[str, Any]) -> Any:
    try:
        return model.model_validate(values)
    except ValidationError as exc:
        raise DecodeError(f"{model.__name__}: {exc}") from exc


def decode_encounter(data: RawBytes) -> EncounterRecord:
    return _build(EncounterRecord, decode_record(data, ENCOUNTER_SCHEMA))


def decode_optional_encounter(data: RawBytes) -> EncounterRecord | None:
    """Decode the ``Option<EnemyInfo>`` returned by get_nft_current_enemy."""
    reader = BinaryReader(data)
    values = reader.read_option(lambda r: decode_fields(r, ENCOUNTER_SCHEMA))
    reader.expect_end()
    if values is None:
        return None
    return _build(EncounterRecord, values)


def decode_asset(data: RawBytes, asset_id: int) -> AssetRecord:
    values = decode_record(data, ASSET_SCHEMA)
    values["asset_id"] = asset_id
    return _build(AssetRecord, values)


def decode_u64(data: RawBytes) -> int:
    reader = BinaryReader(data)
    value = reader.read_u64()
    reader.expect_end()
    return value


def decode_listing(values: Sequence[RawBytes], asset_id: int) -> ListingRecord:
    decoded = decode_return_values(values, LISTING_RETURNS)
    decoded["asset_id"] = asset_id
    return _build(ListingRecord, decoded)


def decode_contract_info(values: Sequence[RawBytes]) -> ContractInfo:
    return _build(ContractInfo, decode_return_values(values, CONTRACT_INFO_RETURNS))


def decode_contract_balances(values: Sequence[RawBytes]) -> ContractBalances:
    return _build(ContractBalances, decode_return_values(values, BALANCES_RETURNS))


def decode_game_config(values: Sequence[RawBytes]) -> GameConfig:
    return _build(GameConfig, decode_return_values(values, GAME_CONFIG_RETURNS))


# ------------------------------------------------------------------
# Commitment objects arrive as parsed JSON, not BCS.
# ------------------------------------------------------------------

def _unwrap(value: Any) -> Any:
    """Move structs may be wrapped as ``{"fields": {...}}``."""
    if isinstance(value, Mapping) and isinstance(value.get("fields"), Mapping):
        return value["fields"]
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return bytes(value).decode("utf-8")
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Cannot decode text field {value!r}") from exc


def _hex(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.removeprefix("0x").lower()
    try:
        return bytes(value).hex()
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Cannot decode hash field {value!r}") from exc


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def commitment_from_object(
    kind: CommitKind,
    object_id: str,
    fields: Mapping[str, Any],
    *,
    player: str = "",
    subject_id: int | None = None,
    committed_at: int | None = None,
) -> CommitmentRecord:
    """Normalise a commitment object's fields into a ``CommitmentRecord``.

    The keyword arguments are fallbacks taken from the creation event for
    fields the object does not carry.
    """
    fields = _unwrap(fields)
    encounter_values = None
    raw_encounter = _unwrap(fields.get("enemy_info"))
    try:
        if isinstance(raw_encounter, Mapping):
            encounter_values = {
                "name": _text(raw_encounter.get("name")),
                "level": int(raw_encounter.get("level") or 0),
                "element": int(raw_encounter.get("element") or 0),
                "category": int(raw_encounter.get("monster_type") or 0),
                "is_rare": bool(raw_encounter.get("is_golden_monster", False)),
                "generated_at": int(raw_encounter.get("generated_at") or 0),
            }
        subject = _optional_int(fields.get("nft_id"))
        committed = _optional_int(fields.get("committed_at"))
        frozen_level = _optional_int(fields.get("player_level"))
        subject_element = _optional_int(fields.get("player_element"))
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Malformed commitment object {object_id}: {exc}") from exc

    encounter = _build(EncounterRecord, encounter_values) if encounter_values is not None else None

    if subject is None:
        subject = subject_id
    if committed is None:
        committed = committed_at
    if subject is None or committed is None:
        raise DecodeError(f"Commitment object {object_id} lacks nft_id or committed_at")

    return _build(CommitmentRecord, {
        "commitment_id": object_id,
        "kind": kind,
        "subject_id": subject,
        "player": str(fields.get("player") or player),
        "commitment_hash": _hex(fields.get("commitment_hash")),
        "encounter": encounter,
        "frozen_level": frozen_level,
        "subject_element": subject_element,
        "committed_at": committed,
        "revealed": bool(fields.get("is_revealed", False)),
    })
