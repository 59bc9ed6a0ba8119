"""c32check encoding of Stacks addresses.

A Stacks address is ``"S" + c32[version] + c32(hash160 || checksum)``, where
the checksum is the first four bytes of SHA256(SHA256(version || hash160)).
The c32 alphabet is Crockford base32 with leading zero *bytes* preserved as
leading ``0`` digits.
"""

from typing import Tuple

from ..errors import InvalidAddressError
from .utils import sha256

C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

# Single-sig (P2PKH) address versions
ADDRESS_VERSION_MAINNET_SINGLE_SIG = 22  # SP
ADDRESS_VERSION_MAINNET_MULTI_SIG = 20  # SM
ADDRESS_VERSION_TESTNET_SINGLE_SIG = 26  # ST
ADDRESS_VERSION_TESTNET_MULTI_SIG = 21  # SN

_C32_INDEX = {ch: i for i, ch in enumerate(C32_ALPHABET)}


def _normalize(text: str) -> str:
    return text.upper().replace("O", "0").replace("L", "1").replace("I", "1")


def c32_encode(data: bytes) -> str:
    """Encode bytes as a c32 string."""
    number = int.from_bytes(data, "big")
    digits = []
    while number > 0:
        number, remainder = divmod(number, 32)
        digits.append(C32_ALPHABET[remainder])
    leading_zeros = len(data) - len(data.lstrip(b"\x00"))
    return "0" * leading_zeros + "".join(reversed(digits))


def c32_decode(text: str) -> bytes:
    """Decode a c32 string into bytes."""
    text = _normalize(text)
    number = 0
    for ch in text:
        if ch not in _C32_INDEX:
            raise ValueError(f"Invalid c32 character: {ch!r}")
        number = number * 32 + _C32_INDEX[ch]
    leading_zeros = len(text) - len(text.lstrip("0"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\x00" * leading_zeros + body


def c32_checksum(data: bytes) -> bytes:
    """First four bytes of double SHA-256."""
    return sha256(sha256(data))[:4]


def c32check_encode(version: int, data: bytes) -> str:
    """Encode data with a version character and a checksum."""
    if not 0 <= version < 32:
        raise ValueError(f"Invalid c32check version: {version}")
    checksum = c32_checksum(bytes([version]) + data)
    return C32_ALPHABET[version] + c32_encode(data + checksum)


def c32check_decode(text: str) -> Tuple[int, bytes]:
    """Decode a c32check string into (version, data)."""
    text = _normalize(text)
    if len(text) < 2:
        raise ValueError("c32check string too short")
    version = _C32_INDEX.get(text[0])
    if version is None:
        raise ValueError(f"Invalid c32check version character: {text[0]!r}")
    decoded = c32_decode(text[1:])
    if len(decoded) < 4:
        raise ValueError("c32check payload too short")
    data, checksum = decoded[:-4], decoded[-4:]
    if c32_checksum(bytes([version]) + data) != checksum:
        raise ValueError("c32check checksum mismatch")
    return version, data


def c32_address(version: int, hash160_bytes: bytes) -> str:
    """Build a Stacks address from an address version and a HASH160."""
    if len(hash160_bytes) != 20:
        raise ValueError(f"hash160 must be 20 bytes, got {len(hash160_bytes)}")
    return "S" + c32check_encode(version, hash160_bytes)


def c32_address_decode(address: str) -> Tuple[int, bytes]:
    """Split a Stacks address into (version, hash160).

    Raises:
        InvalidAddressError: If the address is malformed
    """
    if not address or address[0] != "S":
        raise InvalidAddressError(address, "must start with 'S'")
    try:
        version, data = c32check_decode(address[1:])
    except ValueError as e:
        raise InvalidAddressError(address, str(e))
    if len(data) != 20:
        raise InvalidAddressError(address, f"hash160 is {len(data)} bytes")
    return version, data


def is_valid_address(address: str) -> bool:
    """Check that a string is a well-formed Stacks address."""
    try:
        c32_address_decode(address)
    except InvalidAddressError:
        return False
    return True
