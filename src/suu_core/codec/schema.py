"""Record layouts of the suu contract as an explicit schema table.

The contract's structs are decoded positionally, so field order and width
here must match the deployed Move definitions exactly.  A contract-side
layout change is one edit to the tables below (and a version bump).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from suu_core.codec.reader import BinaryReader
from suu_core.errors import DecodeError


class FieldKind(str, Enum):
    UID = "uid"
    ADDRESS = "address"
    TEXT = "text"
    U8 = "u8"
    U64 = "u64"
    BOOL = "bool"
    OPTION = "option"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind
    schema: RecordSchema | None = None  # element layout for OPTION


@dataclass(frozen=True)
class RecordSchema:
    name: str
    version: int
    fields: tuple[FieldSpec, ...]

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


def read_field(reader: BinaryReader, spec: FieldSpec) -> Any:
    """Read a single value of ``spec.kind`` from the reader."""
    kind = spec.kind
    if kind is FieldKind.UID or kind is FieldKind.ADDRESS:
        return reader.read_address()
    if kind is FieldKind.TEXT:
        return reader.read_text()
    if kind is FieldKind.U8:
        return reader.read_u8()
    if kind is FieldKind.U64:
        return reader.read_u64()
    if kind is FieldKind.BOOL:
        return reader.read_bool()
    if kind is FieldKind.OPTION:
        if spec.schema is None:
            raise DecodeError(f"Option field '{spec.name}' has no element schema")
        nested = spec.schema
        return reader.read_option(lambda r: decode_fields(r, nested))
    raise DecodeError(f"Unsupported field kind {kind!r}")


def decode_fields(reader: BinaryReader, schema: RecordSchema) -> dict[str, Any]:
    """Walk ``schema`` in order and return the decoded values by name."""
    values: dict[str, Any] = {}
    for spec in schema.fields:
        try:
            values[spec.name] = read_field(reader, spec)
        except DecodeError as exc:
            raise DecodeError(f"{schema.name}.{spec.name}: {exc}") from exc
    return values


def decode_record(data: bytes | bytearray | list[int], schema: RecordSchema) -> dict[str, Any]:
    """Decode a complete payload; trailing bytes mean the layout is wrong."""
    reader = BinaryReader(data)
    values = decode_fields(reader, schema)
    try:
        reader.expect_end()
    except DecodeError as exc:
        raise DecodeError(f"{schema.name} v{schema.version}: {exc}") from exc
    return values


def decode_return_values(
    values: Sequence[bytes | bytearray | list[int]],
    fields: Sequence[FieldSpec],
) -> dict[str, Any]:
    """Decode a multi-value return, one field per returned value."""
    if len(values) < len(fields):
        raise DecodeError(f"Expected {len(fields)} return values, got {len(values)}")
    decoded: dict[str, Any] = {}
    for raw, spec in zip(values, fields):
        reader = BinaryReader(raw)
        decoded[spec.name] = read_field(reader, spec)
        reader.expect_end()
    return decoded


ENCOUNTER_SCHEMA = RecordSchema(
    name="EnemyInfo",
    version=1,
    fields=(
        FieldSpec("name", FieldKind.TEXT),
        FieldSpec("level", FieldKind.U8),
        FieldSpec("element", FieldKind.U8),
        FieldSpec("category", FieldKind.U8),
        FieldSpec("is_rare", FieldKind.BOOL),
        FieldSpec("generated_at", FieldKind.U64),
    ),
)

ASSET_SCHEMA = RecordSchema(
    name="HealthNFT",
    version=1,
    fields=(
        FieldSpec("uid", FieldKind.UID),
        FieldSpec("owner", FieldKind.ADDRESS),
        FieldSpec("name", FieldKind.TEXT),
        FieldSpec("element", FieldKind.U8),
        FieldSpec("category", FieldKind.U8),
        FieldSpec("level", FieldKind.U8),
        FieldSpec("experience", FieldKind.U64),
        FieldSpec("minted_at", FieldKind.U64),
        FieldSpec("defeated_rare", FieldKind.BOOL),
        FieldSpec("current_encounter", FieldKind.OPTION, ENCOUNTER_SCHEMA),
        FieldSpec("last_encounter_generated_at", FieldKind.U64),
        FieldSpec("is_listed", FieldKind.BOOL),
        FieldSpec("has_active_commitment", FieldKind.BOOL),
    ),
)

# get_listing_info -> (address, u64, u64)
LISTING_RETURNS = (
    FieldSpec("seller", FieldKind.ADDRESS),
    FieldSpec("price", FieldKind.U64),
    FieldSpec("listed_at", FieldKind.U64),
)

# get_contract_info -> (address, u64, u64)
CONTRACT_INFO_RETURNS = (
    FieldSpec("banker", FieldKind.ADDRESS),
    FieldSpec("balance", FieldKind.U64),
    FieldSpec("total_minted", FieldKind.U64),
)

# get_contract_balances -> (u64, u64)
BALANCES_RETURNS = (
    FieldSpec("locked", FieldKind.U64),
    FieldSpec("withdrawable", FieldKind.U64),
)

# get_game_config_values -> (u64, u64, u64, u64)
GAME_CONFIG_RETURNS = (
    FieldSpec("min_rare_reward", FieldKind.U64),
    FieldSpec("max_rare_reward", FieldKind.U64),
    FieldSpec("rare_base_probability", FieldKind.U64),
    FieldSpec("rare_max_probability", FieldKind.U64),
)

