"""Tests for the BCS binary reader."""

import pytest

from suu_core.codec.reader import BinaryReader
from suu_core.errors import DecodeError

from bcs_fixtures import address, text, u64, uleb128


class TestFixedWidth:
    def test_u8_and_u64_little_endian(self):
        reader = BinaryReader(b"\x07" + (258).to_bytes(8, "little"))
        assert reader.read_u8() == 7
        assert reader.read_u64() == 258
        assert reader.remaining == 0

    def test_accepts_list_of_ints(self):
        reader = BinaryReader([1, 0, 0, 0, 0, 0, 0, 0])
        assert reader.read_u64() == 1

    def test_truncated_u64_raises(self):
        reader = BinaryReader(b"\x01\x02\x03")
        with pytest.raises(DecodeError):
            reader.read_u64()

    def test_failed_read_does_not_advance(self):
        reader = BinaryReader(b"\x01\x02")
        with pytest.raises(DecodeError):
            reader.read_u64()
        assert reader.position == 0
        assert reader.read_u8() == 1

    def test_empty_buffer(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"").read_u8()


class TestVarUint:
    @pytest.mark.parametrize("value", [0, 1, 127, 128, 300, 16384, (1 << 64) - 1])
    def test_decodes_leb128(self, value):
        assert BinaryReader(uleb128(value)).read_var_uint() == value

    def test_multi_byte_example(self):
        # 300 = 0b1_0010_1100 -> 0xAC 0x02
        assert BinaryReader(b"\xac\x02").read_var_uint() == 300

    def test_unterminated_raises(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\x80\x80").read_var_uint()

    def test_too_long_raises(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\xff" * 11).read_var_uint()

    def test_overflow_raises(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\xff" * 9 + b"\x02").read_var_uint()


class TestVariableLength:
    def test_text(self):
        reader = BinaryReader(text("Mossling") + b"\x05")
        assert reader.read_text() == "Mossling"
        assert reader.read_u8() == 5

    def test_text_utf8(self):
        assert BinaryReader(text("Drache ü")).read_text() == "Drache ü"

    def test_text_length_past_end(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\x05abc").read_text()

    def test_invalid_utf8(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\x02\xff\xfe").read_text()

    def test_byte_vector(self):
        assert BinaryReader(b"\x03\x01\x02\x03").read_byte_vector() == b"\x01\x02\x03"

    def test_address(self):
        addr = "0x" + "12" * 32
        assert BinaryReader(address(addr)).read_address() == addr

    def test_short_address(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\x00" * 31).read_address()


class TestTags:
    def test_bool(self):
        reader = BinaryReader(b"\x00\x01")
        assert reader.read_bool() is False
        assert reader.read_bool() is True

    def test_invalid_bool(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\x02").read_bool()

    def test_option_none(self):
        assert BinaryReader(b"\x00").read_option(lambda r: r.read_u64()) is None

    def test_option_some(self):
        reader = BinaryReader(b"\x01" + u64(99))
        assert reader.read_option(lambda r: r.read_u64()) == 99

    def test_invalid_option_tag(self):
        with pytest.raises(DecodeError):
            BinaryReader(b"\x02" + u64(1)).read_option(lambda r: r.read_u64())

    def test_expect_end(self):
        reader = BinaryReader(b"\x01\x02")
        reader.read_u8()
        with pytest.raises(DecodeError):
            reader.expect_end()
        reader.read_u8()
        reader.expect_end()
