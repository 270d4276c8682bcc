"""Forward-only cursor over the ledger's BCS encoding.

BCS is not self-describing: a reader has to know the layout in advance
and walk it field by field.  Integers are little-endian, lengths are
unsigned LEB128, booleans are a single 0x00/0x01 byte and ``Option<T>``
is a presence tag followed by ``T``.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from suu_core.errors import DecodeError

T = TypeVar("T")

ADDRESS_LENGTH = 32
# A u64 needs at most ceil(64 / 7) = 10 LEB128 bytes.
MAX_VAR_UINT_BYTES = 10


class BinaryReader:
    """Reads BCS values from a byte buffer, advancing a cursor.

    Every read raises ``DecodeError`` instead of returning a short result
    when the buffer runs out.
    """

    def __init__(self, data: bytes | bytearray | list[int]) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _take(self, n: int) -> bytes:
        if n < 0:
            raise DecodeError(f"Negative read length {n}")
        end = self._pos + n
        if end > len(self._data):
            raise DecodeError(
                f"Need {n} bytes at offset {self._pos}, only {self.remaining} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_fixed_uint(self, n: int) -> int:
        """Read an ``n``-byte little-endian unsigned integer."""
        return int.from_bytes(self._take(n), "little")

    def read_u8(self) -> int:
        return self.read_fixed_uint(1)

    def read_u64(self) -> int:
        return self.read_fixed_uint(8)

    def read_var_uint(self) -> int:
        """Read an unsigned LEB128 integer (at most 64 bits)."""
        result = 0
        for i in range(MAX_VAR_UINT_BYTES):
            byte = self.read_u8()
            result |= (byte & 0x7F) << (7 * i)
            if not byte & 0x80:
                if result >= 1 << 64:
                    raise DecodeError("LEB128 value exceeds 64 bits")
                return result
        raise DecodeError(f"LEB128 value longer than {MAX_VAR_UINT_BYTES} bytes")

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_byte_vector(self) -> bytes:
        """Read a ``vector<u8>``: LEB128 length followed by the bytes."""
        return self._take(self.read_var_uint())

    def read_text(self) -> str:
        raw = self.read_byte_vector()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Invalid UTF-8 text: {exc}") from exc

    def read_bool(self) -> bool:
        byte = self.read_u8()
        if byte > 1:
            raise DecodeError(f"Invalid bool byte 0x{byte:02x} at offset {self._pos - 1}")
        return byte == 1

    def read_address(self) -> str:
        return "0x" + self._take(ADDRESS_LENGTH).hex()

    def read_option(self, decode: Callable[[BinaryReader], T]) -> T | None:
        """Read ``Option<T>``: tag 0 is absent, tag 1 is followed by ``T``."""
        tag = self.read_u8()
        if tag == 0:
            return None
        if tag != 1:
            raise DecodeError(f"Invalid option tag {tag} at offset {self._pos - 1}")
        return decode(self)

    def expect_end(self) -> None:
        if self.remaining:
            raise DecodeError(f"{self.remaining} trailing bytes after offset {self._pos}")
