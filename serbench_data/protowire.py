"""Protocol Buffers wire-format primitives: varints, field keys and scalars."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from enum import IntEnum

_U32_MASK = (1 << 32) - 1
_U64_MASK = (1 << 64) - 1
_MAX_FIELD_NUMBER = (1 << 29) - 1
_MAX_VARINT_BYTES = 10


class WireType(IntEnum):
    """Wire types used in a field key."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5


class DecodeError(ValueError):
    """Raised when bytes are not a valid protobuf encoding."""


def encode_varint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as a base-128 varint."""
    if not 0 <= value <= _U64_MASK:
        raise ValueError(f"varint value out of range: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a varint at ``offset``; return the value and the offset after it."""
    result = 0
    for shift in range(0, 7 * _MAX_VARINT_BYTES, 7):
        if offset >= len(data):
            raise DecodeError("truncated varint")
        byte = data[offset]
        offset += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if result > _U64_MASK:
                raise DecodeError("varint overflows 64 bits")
            return result, offset
    raise DecodeError("varint longer than 10 bytes")


def iter_fields(data: bytes) -> Iterator[tuple[int, WireType, int | bytes]]:
    """Yield ``(field number, wire type, value)`` for every field in a message.

    Varint values are ints; every other wire type yields the raw bytes.
    """
    data = bytes(data)
    offset = 0
    while offset < len(data):
        key, offset = decode_varint(data, offset)
        number = key >> 3
        if number == 0 or number > _MAX_FIELD_NUMBER:
            raise DecodeError(f"invalid field number {number}")
        try:
            wire_type = WireType(key & 0x7)
        except ValueError:
            raise DecodeError(f"unsupported wire type {key & 0x7}") from None

        if wire_type is WireType.VARINT:
            value, offset = decode_varint(data, offset)
            yield number, wire_type, value
            continue

        if wire_type is WireType.FIXED32:
            size = 4
        elif wire_type is WireType.FIXED64:
            size = 8
        else:
            size, offset = decode_varint(data, offset)
        end = offset + size
        if end > len(data):
            raise DecodeError(f"field {number} runs past the end of the buffer")
        yield number, wire_type, data[offset:end]
        offset = end


def _expect_int(value: int | bytes) -> int:
    if isinstance(value, bytes) or not isinstance(value, int):
        raise DecodeError("expected a varint value")
    return value


def _expect_bytes(value: int | bytes, size: int | None = None) -> bytes:
    if not isinstance(value, bytes):
        raise DecodeError("expected a bytes value")
    if size is not None and len(value) != size:
        raise DecodeError(f"expected {size} bytes, got {len(value)}")
    return value


def as_int32(value: int | bytes) -> int:
    """Interpret a varint as a signed 32-bit integer (truncating)."""
    low = _expect_int(value) & _U32_MASK
    return low - (1 << 32) if low >= 1 << 31 else low


def as_int64(value: int | bytes) -> int:
    """Interpret a varint as a signed 64-bit integer."""
    raw = _expect_int(value) & _U64_MASK
    return raw - (1 << 64) if raw >= 1 << 63 else raw


def as_uint32(value: int | bytes) -> int:
    """Interpret a varint as an unsigned 32-bit integer (truncating)."""
    return _expect_int(value) & _U32_MASK


def as_float32(value: int | bytes) -> float:
    """Interpret four little-endian bytes as an IEEE single."""
    return struct.unpack("<f", _expect_bytes(value, 4))[0]


def as_float64(value: int | bytes) -> float:
    """Interpret eight little-endian bytes as an IEEE double."""
    return struct.unpack("<d", _expect_bytes(value, 8))[0]


def as_string(value: int | bytes) -> str:
    """Interpret length-delimited bytes as UTF-8 text."""
    try:
        return _expect_bytes(value).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"invalid UTF-8 in string field: {exc}") from None


def _check_range(value: int, low: int, high: int, kind: str) -> None:
    if not low <= value <= high:
        raise ValueError(f"{kind} value out of range: {value}")


class Encoder:
    """Accumulates encoded fields of one message.

    Scalar fields equal to their default are skipped unless ``keep_default``
    is true, which is how optional fields that are present are written.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def _key(self, field: int, wire_type: WireType) -> None:
        if not 1 <= field <= _MAX_FIELD_NUMBER:
            raise ValueError(f"invalid field number {field}")
        self._buffer += encode_varint((field << 3) | wire_type)

    def _length_delimited(self, field: int, payload: bytes) -> None:
        self._key(field, WireType.LENGTH_DELIMITED)
        self._buffer += encode_varint(len(payload))
        self._buffer += payload

    def int32(self, field: int, value: int, keep_default: bool = False) -> Encoder:
        _check_range(value, -(1 << 31), (1 << 31) - 1, "int32")
        if value or keep_default:
            self._key(field, WireType.VARINT)
            self._buffer += encode_varint(value & _U64_MASK)
        return self

    def int64(self, field: int, value: int, keep_default: bool = False) -> Encoder:
        _check_range(value, -(1 << 63), (1 << 63) - 1, "int64")
        if value or keep_default:
            self._key(field, WireType.VARINT)
            self._buffer += encode_varint(value & _U64_MASK)
        return self

    def uint32(self, field: int, value: int, keep_default: bool = False) -> Encoder:
        _check_range(value, 0, _U32_MASK, "uint32")
        if value or keep_default:
            self._key(field, WireType.VARINT)
            self._buffer += encode_varint(value)
        return self

    def boolean(self, field: int, value: bool, keep_default: bool = False) -> Encoder:
        if value or keep_default:
            self._key(field, WireType.VARINT)
            self._buffer += encode_varint(int(bool(value)))
        return self

    def float32(self, field: int, value: float, keep_default: bool = False) -> Encoder:
        if value != 0.0 or keep_default:
            self._key(field, WireType.FIXED32)
            self._buffer += struct.pack("<f", value)
        return self

    def float64(self, field: int, value: float, keep_default: bool = False) -> Encoder:
        if value != 0.0 or keep_default:
            self._key(field, WireType.FIXED64)
            self._buffer += struct.pack("<d", value)
        return self

    def string(self, field: int, value: str, keep_default: bool = False) -> Encoder:
        encoded = value.encode("utf-8")
        if encoded or keep_default:
            self._length_delimited(field, encoded)
        return self

    def message(self, field: int, payload: bytes) -> Encoder:
        """Write an embedded message; it is always present, even when empty."""
        self._length_delimited(field, bytes(payload))
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)