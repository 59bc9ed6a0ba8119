"""Byte encoding and hashing helpers for the Stacks wire formats.

Stacks consensus serialization is big-endian throughout.
"""

import struct

from Crypto.Hash import RIPEMD160, SHA256, SHA512

from ..errors import ClarityDecodeError


def sha256(data: bytes) -> bytes:
    """Compute SHA-256 of data."""
    return SHA256.new(data).digest()


def sha512_256(data: bytes) -> bytes:
    """Compute SHA-512/256 of data (Stacks txid and sighash function)."""
    return SHA512.new(data, truncate="256").digest()


def hash160(data: bytes) -> bytes:
    """Compute RIPEMD160(SHA256(data))."""
    return RIPEMD160.new(sha256(data)).digest()


def encode_u8(value: int) -> bytes:
    """Encode an unsigned 8-bit integer."""
    return struct.pack(">B", value)


def encode_u32(value: int) -> bytes:
    """Encode an unsigned 32-bit integer (big-endian)."""
    return struct.pack(">I", value)


def encode_u64(value: int) -> bytes:
    """Encode an unsigned 64-bit integer (big-endian)."""
    return struct.pack(">Q", value)


def encode_lp_string(value: str, prefix_bytes: int = 1) -> bytes:
    """Encode a length-prefixed ASCII string (contract, function and asset names)."""
    raw = value.encode("ascii")
    if prefix_bytes == 1:
        if len(raw) > 0xFF:
            raise ValueError(f"String too long for u8 length prefix: {value!r}")
        return encode_u8(len(raw)) + raw
    return encode_u32(len(raw)) + raw


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string, tolerating a 0x prefix."""
    if value.startswith("0x") or value.startswith("0X"):
        value = value[2:]
    return bytes.fromhex(value)


class ByteReader:
    """Sequential reader over a byte buffer."""

    def __init__(self, data: bytes):
        self._data = data
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise ClarityDecodeError(
                f"unexpected end of data: wanted {size} bytes at offset "
                f"{self._offset}, {self.remaining} left"
            )
        chunk = self._data[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_u32(self) -> int:
        return struct.unpack(">I", self.read(4))[0]

    def read_u64(self) -> int:
        return struct.unpack(">Q", self.read(8))[0]

    def read_lp_string(self, prefix_bytes: int = 1) -> str:
        length = self.read_u8() if prefix_bytes == 1 else self.read_u32()
        return self.read(length).decode("ascii")
