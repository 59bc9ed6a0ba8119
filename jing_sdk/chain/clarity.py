"""Clarity value construction, consensus serialization and JSON projection."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping, Optional, Sequence, Union

from ..errors import ClarityDecodeError
from .c32 import c32_address, c32_address_decode
from .utils import ByteReader, encode_lp_string, encode_u32, encode_u8, hex_to_bytes

MAX_U128 = 2**128 - 1
MIN_I128 = -(2**127)
MAX_I128 = 2**127 - 1


class ClarityType(IntEnum):
    """Type prefix byte of a serialized Clarity value."""

    INT = 0x00
    UINT = 0x01
    BUFFER = 0x02
    BOOL_TRUE = 0x03
    BOOL_FALSE = 0x04
    PRINCIPAL_STANDARD = 0x05
    PRINCIPAL_CONTRACT = 0x06
    RESPONSE_OK = 0x07
    RESPONSE_ERR = 0x08
    OPTIONAL_NONE = 0x09
    OPTIONAL_SOME = 0x0A
    LIST = 0x0B
    TUPLE = 0x0C
    STRING_ASCII = 0x0D
    STRING_UTF8 = 0x0E


@dataclass(frozen=True)
class ClarityValue:
    """A Clarity value.

    ``value`` depends on ``type``: ``int`` for INT/UINT, ``bytes`` for BUFFER,
    ``None`` for booleans and none, the address string for principals
    (``"SP...name"`` for contract principals), a ``ClarityValue`` for
    ok/err/some, a tuple of values for LIST, a dict for TUPLE and ``str`` for
    strings.
    """

    type: ClarityType
    value: Any = None

    def __repr__(self) -> str:
        return f"ClarityValue({self.type.name}, {self.value!r})"


# =============================================================================
# Constructors
# =============================================================================


def int_cv(value: int) -> ClarityValue:
    value = int(value)
    if not MIN_I128 <= value <= MAX_I128:
        raise ValueError(f"int out of i128 range: {value}")
    return ClarityValue(ClarityType.INT, value)


def uint_cv(value: int) -> ClarityValue:
    value = int(value)
    if not 0 <= value <= MAX_U128:
        raise ValueError(f"uint out of u128 range: {value}")
    return ClarityValue(ClarityType.UINT, value)


def buffer_cv(value: bytes) -> ClarityValue:
    return ClarityValue(ClarityType.BUFFER, bytes(value))


def bool_cv(value: bool) -> ClarityValue:
    return ClarityValue(ClarityType.BOOL_TRUE if value else ClarityType.BOOL_FALSE)


def true_cv() -> ClarityValue:
    return bool_cv(True)


def false_cv() -> ClarityValue:
    return bool_cv(False)


def standard_principal_cv(address: str) -> ClarityValue:
    c32_address_decode(address)
    return ClarityValue(ClarityType.PRINCIPAL_STANDARD, address)


def contract_principal_cv(address: str, contract_name: str) -> ClarityValue:
    c32_address_decode(address)
    if not contract_name:
        raise ValueError("contract name cannot be empty")
    return ClarityValue(ClarityType.PRINCIPAL_CONTRACT, f"{address}.{contract_name}")


def principal_cv(principal: str) -> ClarityValue:
    """Build a standard or contract principal from ``addr`` or ``addr.name``."""
    if "." in principal:
        address, contract_name = principal.split(".", 1)
        return contract_principal_cv(address, contract_name)
    return standard_principal_cv(principal)


def none_cv() -> ClarityValue:
    return ClarityValue(ClarityType.OPTIONAL_NONE)


def some_cv(value: ClarityValue) -> ClarityValue:
    return ClarityValue(ClarityType.OPTIONAL_SOME, value)


def optional_cv(value: Optional[ClarityValue]) -> ClarityValue:
    return none_cv() if value is None else some_cv(value)


def ok_cv(value: ClarityValue) -> ClarityValue:
    return ClarityValue(ClarityType.RESPONSE_OK, value)


def err_cv(value: ClarityValue) -> ClarityValue:
    return ClarityValue(ClarityType.RESPONSE_ERR, value)


def list_cv(values: Sequence[ClarityValue]) -> ClarityValue:
    return ClarityValue(ClarityType.LIST, tuple(values))


def tuple_cv(data: Mapping[str, ClarityValue]) -> ClarityValue:
    return ClarityValue(ClarityType.TUPLE, dict(data))


def string_ascii_cv(value: str) -> ClarityValue:
    value.encode("ascii")
    return ClarityValue(ClarityType.STRING_ASCII, value)


def string_utf8_cv(value: str) -> ClarityValue:
    return ClarityValue(ClarityType.STRING_UTF8, value)


# =============================================================================
# Serialization
# =============================================================================


def _serialize_address(address: str) -> bytes:
    version, hash_bytes = c32_address_decode(address)
    return encode_u8(version) + hash_bytes


def serialize_cv(cv: ClarityValue) -> bytes:
    """Serialize a Clarity value to consensus bytes."""
    prefix = encode_u8(cv.type)
    t = cv.type

    if t == ClarityType.INT:
        return prefix + cv.value.to_bytes(16, "big", signed=True)
    if t == ClarityType.UINT:
        return prefix + cv.value.to_bytes(16, "big", signed=False)
    if t == ClarityType.BUFFER:
        return prefix + encode_u32(len(cv.value)) + cv.value
    if t in (ClarityType.BOOL_TRUE, ClarityType.BOOL_FALSE, ClarityType.OPTIONAL_NONE):
        return prefix
    if t == ClarityType.PRINCIPAL_STANDARD:
        return prefix + _serialize_address(cv.value)
    if t == ClarityType.PRINCIPAL_CONTRACT:
        address, contract_name = cv.value.split(".", 1)
        return prefix + _serialize_address(address) + encode_lp_string(contract_name)
    if t in (ClarityType.RESPONSE_OK, ClarityType.RESPONSE_ERR, ClarityType.OPTIONAL_SOME):
        return prefix + serialize_cv(cv.value)
    if t == ClarityType.LIST:
        return prefix + encode_u32(len(cv.value)) + b"".join(serialize_cv(v) for v in cv.value)
    if t == ClarityType.TUPLE:
        out = prefix + encode_u32(len(cv.value))
        for key in sorted(cv.value):
            out += encode_lp_string(key) + serialize_cv(cv.value[key])
        return out
    if t == ClarityType.STRING_ASCII:
        raw = cv.value.encode("ascii")
        return prefix + encode_u32(len(raw)) + raw
    if t == ClarityType.STRING_UTF8:
        raw = cv.value.encode("utf-8")
        return prefix + encode_u32(len(raw)) + raw

    raise ValueError(f"Unknown Clarity type: {t}")


def _read_address(reader: ByteReader) -> str:
    version = reader.read_u8()
    hash_bytes = reader.read(20)
    return c32_address(version, hash_bytes)


def _read_cv(reader: ByteReader) -> ClarityValue:
    type_byte = reader.read_u8()
    try:
        t = ClarityType(type_byte)
    except ValueError:
        raise ClarityDecodeError(f"unknown type prefix 0x{type_byte:02x}")

    if t == ClarityType.INT:
        return ClarityValue(t, int.from_bytes(reader.read(16), "big", signed=True))
    if t == ClarityType.UINT:
        return ClarityValue(t, int.from_bytes(reader.read(16), "big", signed=False))
    if t == ClarityType.BUFFER:
        return ClarityValue(t, reader.read(reader.read_u32()))
    if t in (ClarityType.BOOL_TRUE, ClarityType.BOOL_FALSE, ClarityType.OPTIONAL_NONE):
        return ClarityValue(t)
    if t == ClarityType.PRINCIPAL_STANDARD:
        return ClarityValue(t, _read_address(reader))
    if t == ClarityType.PRINCIPAL_CONTRACT:
        address = _read_address(reader)
        return ClarityValue(t, f"{address}.{reader.read_lp_string()}")
    if t in (ClarityType.RESPONSE_OK, ClarityType.RESPONSE_ERR, ClarityType.OPTIONAL_SOME):
        return ClarityValue(t, _read_cv(reader))
    if t == ClarityType.LIST:
        count = reader.read_u32()
        return ClarityValue(t, tuple(_read_cv(reader) for _ in range(count)))
    if t == ClarityType.TUPLE:
        count = reader.read_u32()
        data = {}
        for _ in range(count):
            key = reader.read_lp_string()
            data[key] = _read_cv(reader)
        return ClarityValue(t, data)
    if t == ClarityType.STRING_ASCII:
        return ClarityValue(t, reader.read(reader.read_u32()).decode("ascii"))
    # STRING_UTF8
    return ClarityValue(t, reader.read(reader.read_u32()).decode("utf-8"))


def deserialize_cv(data: Union[bytes, str]) -> ClarityValue:
    """Deserialize a Clarity value from bytes or a hex string.

    Raises:
        ClarityDecodeError: If the data is malformed or has trailing bytes
    """
    if isinstance(data, str):
        try:
            data = hex_to_bytes(data)
        except ValueError as e:
            raise ClarityDecodeError(f"invalid hex: {e}")
    reader = ByteReader(data)
    try:
        cv = _read_cv(reader)
    except (UnicodeDecodeError, ValueError) as e:
        raise ClarityDecodeError(str(e))
    if reader.remaining:
        raise ClarityDecodeError(f"{reader.remaining} trailing bytes")
    return cv


# =============================================================================
# JSON projection
# =============================================================================


def get_cv_type_string(cv: ClarityValue) -> str:
    """Clarity type signature of a value, e.g. ``(response uint UnknownType)``."""
    t = cv.type
    if t == ClarityType.INT:
        return "int"
    if t == ClarityType.UINT:
        return "uint"
    if t == ClarityType.BUFFER:
        return f"(buff {len(cv.value)})"
    if t in (ClarityType.BOOL_TRUE, ClarityType.BOOL_FALSE):
        return "bool"
    if t in (ClarityType.PRINCIPAL_STANDARD, ClarityType.PRINCIPAL_CONTRACT):
        return "principal"
    if t == ClarityType.RESPONSE_OK:
        return f"(response {get_cv_type_string(cv.value)} UnknownType)"
    if t == ClarityType.RESPONSE_ERR:
        return f"(response UnknownType {get_cv_type_string(cv.value)})"
    if t == ClarityType.OPTIONAL_NONE:
        return "(optional none)"
    if t == ClarityType.OPTIONAL_SOME:
        return f"(optional {get_cv_type_string(cv.value)})"
    if t == ClarityType.LIST:
        inner = get_cv_type_string(cv.value[0]) if cv.value else "UnknownType"
        return f"(list {len(cv.value)} {inner})"
    if t == ClarityType.TUPLE:
        fields = " ".join(f"({k} {get_cv_type_string(v)})" for k, v in cv.value.items())
        return f"(tuple {fields})"
    if t == ClarityType.STRING_ASCII:
        return f"(string-ascii {len(cv.value)})"
    return f"(string-utf8 {len(cv.value.encode('utf-8'))})"


def cv_to_json(cv: ClarityValue) -> dict:
    """Project a Clarity value to the ``{type, value[, success]}`` JSON shape.

    Integers are rendered as decimal strings. Responses carry a ``success``
    flag; every other value omits it.
    """
    t = cv.type
    type_string = get_cv_type_string(cv)

    if t in (ClarityType.RESPONSE_OK, ClarityType.RESPONSE_ERR):
        return {
            "type": type_string,
            "value": cv_to_json(cv.value),
            "success": t == ClarityType.RESPONSE_OK,
        }
    if t in (ClarityType.INT, ClarityType.UINT):
        value: Any = str(cv.value)
    elif t == ClarityType.BUFFER:
        value = "0x" + cv.value.hex()
    elif t == ClarityType.BOOL_TRUE:
        value = True
    elif t == ClarityType.BOOL_FALSE:
        value = False
    elif t == ClarityType.OPTIONAL_NONE:
        value = None
    elif t == ClarityType.OPTIONAL_SOME:
        value = cv_to_json(cv.value)
    elif t == ClarityType.LIST:
        value = [cv_to_json(v) for v in cv.value]
    elif t == ClarityType.TUPLE:
        value = {k: cv_to_json(v) for k, v in cv.value.items()}
    else:
        value = cv.value
    return {"type": type_string, "value": value}
