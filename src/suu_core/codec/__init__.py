"""BCS decoding for suu contract query results."""

from suu_core.codec.reader import BinaryReader
from suu_core.codec.records import (
    commitment_from_object,
    decode_asset,
    decode_contract_balances,
    decode_contract_info,
    decode_encounter,
    decode_game_config,
    decode_listing,
    decode_optional_encounter,
    decode_u64,
)
from suu_core.codec.schema import (
    ASSET_SCHEMA,
    ENCOUNTER_SCHEMA,
    FieldKind,
    FieldSpec,
    RecordSchema,
    decode_record,
)

__all__ = [
    "ASSET_SCHEMA",
    "BinaryReader",
    "ENCOUNTER_SCHEMA",
    "FieldKind",
    "FieldSpec",
    "RecordSchema",
    "commitment_from_object",
    "decode_asset",
    "decode_contract_balances",
    "decode_contract_info",
    "decode_encounter",
    "decode_game_config",
    "decode_listing",
    "decode_optional_encounter",
    "decode_record",
    "decode_u64",
]
