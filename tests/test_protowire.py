import pytest

from serbench_data.protowire import (
    DecodeError,
    Encoder,
    WireType,
    as_float32,
    as_float64,
    as_int32,
    as_int64,
    as_string,
    as_uint32,
    decode_varint,
    encode_varint,
    iter_fields,
)


def test_encode_varint_documented_example():
    assert encode_varint(300) == b"\xac\x02"


@pytest.mark.parametrize("value", [0, 1, 127, 128, 16383, 16384, 2**32, 2**64 - 1])
def test_varint_round_trip(value):
    encoded = encode_varint(value)
    assert decode_varint(encoded, 0) == (value, len(encoded))


def test_decode_varint_at_offset():
    data = b"\xff" + encode_varint(4242)
    assert decode_varint(data, 1) == (4242, len(data))


def test_encode_varint_rejects_negative():
    with pytest.raises(ValueError):
        encode_varint(-1)


def test_decode_varint_truncated():
    with pytest.raises(DecodeError):
        decode_varint(b"\x80", 0)


def test_decode_varint_too_long():
    with pytest.raises(DecodeError):
        decode_varint(b"\x80" * 11 + b"\x01", 0)


def test_int32_documented_example():
    assert Encoder().int32(1, 150, False).to_bytes() == b"\x08\x96\x01"


def test_string_documented_example():
    expected = b"\x12\x07testing"
    assert Encoder().string(2, "testing", False).to_bytes() == expected


def test_defaults_are_skipped():
    encoder = Encoder()
    encoder.int32(1, 0, False).int64(2, 0, False).uint32(3, 0, False)
    encoder.boolean(4, False, False).float32(5, 0.0, False)
    encoder.float64(6, 0.0, False).string(7, "", False)
    assert encoder.to_bytes() == b""


def test_keep_default_writes_fields():
    encoder = Encoder()
    encoder.boolean(1, False, True).string(2, "", True).float32(3, 0.0, True)
    fields = list(iter_fields(encoder.to_bytes()))
    assert [(number, wire) for number, wire, _ in fields] == [
        (1, WireType.VARINT),
        (2, WireType.LENGTH_DELIMITED),
        (3, WireType.FIXED32),
    ]
    assert as_uint32(fields[0][2]) == 0
    assert as_string(fields[1][2]) == ""
    assert as_float32(fields[2][2]) == 0.0


@pytest.mark.parametrize("value", [-1, -(2**31), 2**31 - 1, 7])
def test_int32_round_trip(value):
    ((number, wire, raw),) = iter_fields(Encoder().int32(4, value, False).to_bytes())
    assert (number, wire) == (4, WireType.VARINT)
    assert as_int32(raw) == value


@pytest.mark.parametrize("value", [-1, -(2**63), 2**63 - 1, 123456789012])
def test_int64_round_trip(value):
    ((_, _, raw),) = iter_fields(Encoder().int64(9, value, False).to_bytes())
    assert as_int64(raw) == value


def test_uint32_and_float_round_trip():
    encoder = Encoder().uint32(1, 2**32 - 1).float32(2, 1.5).float64(3, -2.25)
    fields = {number: raw for number, _, raw in iter_fields(encoder.to_bytes())}
    assert as_uint32(fields[1]) == 2**32 - 1
    assert as_float32(fields[2]) == 1.5
    assert as_float64(fields[3]) == -2.25


def test_as_int32_truncates():
    assert as_int32(2**32 + 5) == 5


def test_message_is_always_written():
    data = Encoder().message(3, b"").to_bytes()
    assert list(iter_fields(data)) == [(3, WireType.LENGTH_DELIMITED, b"")]


def test_int32_out_of_range():
    with pytest.raises(ValueError):
        Encoder().int32(1, 2**31, False)


def test_uint32_rejects_negative():
    with pytest.raises(ValueError):
        Encoder().uint32(1, -1, False)


def test_invalid_field_number_on_encode():
    with pytest.raises(ValueError):
        Encoder().int32(0, 1, False)


def test_field_number_zero_rejected():
    with pytest.raises(DecodeError):
        list(iter_fields(b"\x00\x00"))


def test_group_wire_type_rejected():
    with pytest.raises(DecodeError):
        list(iter_fields(b"\x0b"))


def test_truncated_length_delimited():
    data = Encoder().string(1, "hello", False).to_bytes()[:-1]
    with pytest.raises(DecodeError):
        list(iter_fields(data))


def test_invalid_utf8():
    with pytest.raises(DecodeError):
        as_string(b"\xff\xfe")


def test_as_float32_rejects_varint():
    with pytest.raises(DecodeError):
        as_float32(5)


def test_as_int32_rejects_bytes():
    with pytest.raises(DecodeError):
        as_int32(b"\x01")