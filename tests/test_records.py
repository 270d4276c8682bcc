"""Tests for record decoding (assets, encounters, listings, commitments)."""

import itertools

import pytest

from suu_core.codec import (
    ASSET_SCHEMA,
    commitment_from_object,
    decode_asset,
    decode_contract_balances,
    decode_contract_info,
    decode_encounter,
    decode_game_config,
    decode_listing,
    decode_optional_encounter,
    decode_record,
    decode_u64,
)
from suu_core.errors import DecodeError
from suu_core.models import AssetRecord, CommitKind, EncounterRecord

import bcs_fixtures as bcs


class TestEncounter:
    def test_decode(self):
        record = decode_encounter(bcs.encounter(name="Sparky", level=4, element=2, is_rare=True))
        assert record.name == "Sparky"
        assert record.level == 4
        assert record.element == 2
        assert record.category == 1
        assert record.is_rare
        assert record.generated_at == 1_700_000_000_000

    def test_optional_absent(self):
        assert decode_optional_encounter(b"\x00") is None

    def test_optional_present(self):
        record = decode_optional_encounter(bcs.option(bcs.encounter(level=7)))
        assert record is not None
        assert record.level == 7

    def test_trailing_bytes_rejected(self):
        with pytest.raises(DecodeError):
            decode_encounter(bcs.encounter() + b"\x00")


class TestAsset:
    def test_decode_full_record(self):
        asset = decode_asset(bcs.asset(), asset_id=42)
        assert asset.asset_id == 42
        assert asset.uid == bcs.UID
        assert asset.owner == bcs.OWNER
        assert asset.name == "Ember"
        assert asset.level == 3
        assert asset.experience == 250
        assert asset.current_encounter is not None
        assert asset.current_encounter.name == "Sparky"
        assert not asset.is_listed
        assert not asset.has_active_commitment

    def test_decode_without_encounter(self):
        asset = decode_asset(bcs.asset(current_encounter=None, has_active_commitment=True), 1)
        assert asset.current_encounter is None
        assert asset.has_active_commitment

    def test_owned_by_is_case_insensitive(self):
        asset = decode_asset(bcs.asset(), 1)
        assert asset.owned_by(bcs.OWNER.upper().replace("0X", "0x"))

    def test_truncated_payload(self):
        data = bcs.asset()
        for cut in (0, 10, 40, len(data) - 1):
            with pytest.raises(DecodeError):
                decode_asset(data[:cut], 1)

    def test_error_names_the_field(self):
        data = bcs.asset()
        with pytest.raises(DecodeError, match="HealthNFT"):
            decode_asset(data[:70], 1)

    def test_invalid_bool_in_record(self):
        data = bytearray(bcs.asset())
        data[-1] = 7
        with pytest.raises(DecodeError):
            decode_asset(bytes(data), 1)

    def test_schema_field_order(self):
        assert ASSET_SCHEMA.field_names[:3] == ["uid", "owner", "name"]
        assert ASSET_SCHEMA.field_names[-1] == "has_active_commitment"
        assert decode_record(bcs.asset(), ASSET_SCHEMA)["level"] == 3


U64_MAX = (1 << 64) - 1


def make_asset(**overrides):
    values = {
        "asset_id": 42,
        "uid": bcs.UID,
        "owner": bcs.OWNER,
        "name": "Ember",
        "element": 3,
        "category": 2,
        "level": 3,
        "experience": 250,
        "minted_at": 1_699_000_000_000,
        "current_encounter": EncounterRecord(name="Sparky", level=2, element=3, generated_at=1),
        "last_encounter_generated_at": 1_700_000_000_000,
    }
    values.update(overrides)
    return AssetRecord(**values)


ROUND_TRIP_CORPUS = [
    *[
        make_asset(defeated_rare=rare, is_listed=listed, has_active_commitment=active)
        for rare, listed, active in itertools.product([False, True], repeat=3)
    ],
    make_asset(current_encounter=None),
    make_asset(current_encounter=None, has_active_commitment=True, is_listed=True),
    make_asset(name=""),
    make_asset(name="x" * 127),
    make_asset(name="x" * 128),
    make_asset(name="é" * 200),
    make_asset(name="y" * 20_000),
    make_asset(
        asset_id=U64_MAX,
        uid="0x" + "ff" * 32,
        owner="0x" + "00" * 32,
        element=255,
        category=255,
        level=255,
        experience=U64_MAX,
        minted_at=U64_MAX,
        last_encounter_generated_at=U64_MAX,
        current_encounter=EncounterRecord(
            name="m" * 300, level=255, element=255, category=255, is_rare=True, generated_at=U64_MAX,
        ),
    ),
    make_asset(asset_id=0, element=0, category=0, level=0, experience=0, minted_at=0,
               last_encounter_generated_at=0),
]


class TestAssetRoundTrip:
    @pytest.mark.parametrize("record", ROUND_TRIP_CORPUS)
    def test_decode_restores_record(self, record):
        assert decode_asset(bcs.encode_asset(record), record.asset_id) == record

    def test_long_name_uses_multibyte_length(self):
        data = bcs.encode_asset(make_asset(name="x" * 128))
        assert data[64:66] == b"\x80\x01"


class TestReturnValues:
    def test_u64(self):
        assert decode_u64(bcs.u64(12)) == 12

    def test_u64_wrong_width(self):
        with pytest.raises(DecodeError):
            decode_u64(b"\x01\x00\x00")
        with pytest.raises(DecodeError):
            decode_u64(bcs.u64(1) + b"\x00")

    def test_listing(self):
        seller = "0x" + "cd" * 32
        listing = decode_listing(
            [bcs.address(seller), bcs.u64(2_000_000_000), bcs.u64(1_700_000_000_500)], asset_id=9,
        )
        assert listing.asset_id == 9
        assert listing.seller == seller
        assert listing.price == 2_000_000_000
        assert listing.listed_at == 1_700_000_000_500

    def test_listing_missing_value(self):
        with pytest.raises(DecodeError):
            decode_listing([bcs.address(bcs.OWNER), bcs.u64(1)], asset_id=9)

    def test_contract_info(self):
        info = decode_contract_info([bcs.address(bcs.OWNER), bcs.u64(5), bcs.u64(17)])
        assert info.banker == bcs.OWNER
        assert info.balance == 5
        assert info.total_minted == 17

    def test_balances(self):
        balances = decode_contract_balances([bcs.u64(3), bcs.u64(4)])
        assert balances.locked == 3
        assert balances.withdrawable == 4
        assert balances.total == 7

    def test_game_config(self):
        config = decode_game_config([bcs.u64(1), bcs.u64(10), bcs.u64(100), bcs.u64(1000)])
        assert config.min_rare_reward == 1
        assert config.max_rare_reward == 10
        assert config.rare_base_probability == 100
        assert config.rare_max_probability == 1000

    def test_game_config_carries_only_returned_values(self):
        config = decode_game_config([bcs.u64(1), bcs.u64(10), bcs.u64(100), bcs.u64(1000)])
        assert set(config.model_dump()) == {
            "min_rare_reward", "max_rare_reward", "rare_base_probability", "rare_max_probability",
        }

    def test_game_config_out_of_range(self):
        with pytest.raises(DecodeError):
            decode_game_config([bcs.u64(1), bcs.u64(10), bcs.u64(20_000), bcs.u64(1000)])


class TestCommitmentObject:
    def test_battle_object(self):
        fields = {
            "player": bcs.OWNER,
            "nft_id": "42",
            "commitment_hash": list(range(32)),
            "enemy_info": {"fields": {
                "name": list(b"Sparky"),
                "level": 3,
                "element": 1,
                "monster_type": 2,
                "is_golden_monster": False,
                "generated_at": "1700000000000",
            }},
            "player_level": 3,
            "player_element": 4,
            "committed_at": "1700000001000",
            "is_revealed": False,
        }
        record = commitment_from_object(CommitKind.BATTLE, "0xc1", {"fields": fields})
        assert record.subject_id == 42
        assert record.player == bcs.OWNER
        assert record.commitment_hash == bytes(range(32)).hex()
        assert record.encounter is not None
        assert record.encounter.name == "Sparky"
        assert record.encounter.category == 2
        assert record.frozen_level == 3
        assert record.subject_element == 4
        assert record.committed_at == 1_700_000_001_000
        assert not record.revealed

    def test_capture_object_uses_fallbacks(self):
        record = commitment_from_object(
            CommitKind.CAPTURE, "0xc2", {"nft_id": "7", "committed_at": "55", "is_revealed": True},
            player=bcs.OWNER,
        )
        assert record.kind is CommitKind.CAPTURE
        assert record.player == bcs.OWNER
        assert record.encounter is None
        assert record.frozen_level is None
        assert record.commitment_hash == ""
        assert record.revealed

    def test_missing_timestamp(self):
        with pytest.raises(DecodeError):
            commitment_from_object(CommitKind.CAPTURE, "0xc3", {"nft_id": "7"})

    def test_event_timestamp_fallback(self):
        record = commitment_from_object(
            CommitKind.CAPTURE, "0xc3", {"nft_id": "7"}, committed_at=1234,
        )
        assert record.committed_at == 1234

    def test_malformed_number(self):
        with pytest.raises(DecodeError):
            commitment_from_object(
                CommitKind.BATTLE, "0xc4", {"nft_id": "seven", "committed_at": "1"},
            )

    @pytest.mark.parametrize("field", ["level", "element", "monster_type", "generated_at"])
    def test_malformed_encounter_number(self, field):
        enemy = {"name": "Sparky", "level": 3, "element": 1, "monster_type": 0, "generated_at": "1"}
        enemy[field] = "high"
        with pytest.raises(DecodeError, match="0xc5"):
            commitment_from_object(
                CommitKind.BATTLE, "0xc5",
                {"nft_id": "7", "committed_at": "1", "enemy_info": {"fields": enemy}},
            )
