import base64
import enum
import math
import string
import time

import pytest

from tradeproto.fbe_types import (
    DecimalValue,
    Flags,
    Uuid,
    base64_decode,
    base64_encode,
    epoch,
    unhex,
    utc,
)

SAMPLE_UUID = "123e4567-e89b-12d3-a456-426655440000"
NIL_UUID = "00000000-0000-0000-0000-000000000000"


class Color(enum.IntFlag):
    RED = 1
    GREEN = 2
    BLUE = 4


@pytest.mark.parametrize("data", [b"", b"a", b"ab", b"abc", b"abcd", bytes(range(256))])
def test_base64_encode_matches_standard(data):
    assert base64_encode(data) == base64.b64encode(data).decode("ascii")


@pytest.mark.parametrize("data", [b"", b"x", b"xy", b"xyz", b"\x00\xff\x10", bytes(range(200))])
def test_base64_round_trip(data):
    assert base64_decode(base64_encode(data)) == data


def test_base64_encode_length_is_multiple_of_four():
    for n in range(20):
        assert len(base64_encode(bytes(n))) % 4 == 0


def test_base64_decode_stops_at_invalid_character():
    encoded = base64_encode(b"abc")
    assert base64_decode(encoded + "!garbage") == b"abc"


def test_unhex_digits():
    for ch in string.hexdigits:
        assert unhex(ch) == int(ch, 16)


@pytest.mark.parametrize("ch", ["g", "G", "z", " ", "-"])
def test_unhex_invalid(ch):
    assert unhex(ch) == 255


def test_epoch_is_zero():
    assert epoch() == 0


def test_utc_is_current_time():
    before = time.time_ns()
    now = utc()
    after = time.time_ns()
    assert before <= now <= after
    assert now > epoch()


def test_decimal_arithmetic():
    a = DecimalValue(1.5)
    b = DecimalValue(0.5)
    assert a + b == 2.0
    assert a - b == 1.0
    assert a * b == 0.75
    assert a / b == 3.0
    assert -a == -1.5
    assert +a == a


def test_decimal_mixed_with_numbers():
    d = DecimalValue(3)
    assert d + 1 == 4
    assert 1 + d == 4
    assert 10 - d == 7
    assert 2 * d == 6
    assert 6 / d == 2
    assert isinstance(1 + d, DecimalValue)


def test_decimal_comparisons():
    assert DecimalValue(1) < DecimalValue(2)
    assert DecimalValue(2) >= 2
    assert 1 <= DecimalValue(1)
    assert DecimalValue(3) > 2.5
    assert DecimalValue(1) != DecimalValue(2)


def test_decimal_conversions():
    d = DecimalValue(2.75)
    assert float(d) == 2.75
    assert int(d) == 2
    assert bool(DecimalValue()) is False
    assert bool(d) is True


def test_decimal_string():
    assert DecimalValue(1.5).string() == "1.500000"
    assert str(DecimalValue(1.5)) == DecimalValue(1.5).string()


def test_decimal_division_by_zero_follows_ieee():
    assert math.isinf(float(DecimalValue(1) / 0))
    assert float(DecimalValue(-1) / 0) < 0
    assert math.isnan(float(DecimalValue(0) / 0))


def test_decimal_hash_matches_equality():
    assert hash(DecimalValue(2.0)) == hash(DecimalValue(2))
    assert {DecimalValue(1.0), DecimalValue(1)} == {DecimalValue(1)}


def test_flags_operations():
    f = Flags(Color.RED) | Color.BLUE
    assert f.isset(Color.RED)
    assert f.isset(Color.BLUE)
    assert not f.isset(Color.GREEN)
    assert f.value == Color.RED | Color.BLUE
    assert (f & Color.RED) == Flags(Color.RED)
    assert (f ^ Color.RED) == Flags(Color.BLUE)


def test_flags_empty():
    f = Flags()
    assert not f
    assert f.isset() is False
    assert Flags(Color.GREEN).isset() is True


def test_flags_invert_and_bitset():
    f = Flags(5, width=8)
    assert f.bitset() == "00000101"
    assert (~Flags(0, width=8)).underlying == 255
    assert ~~f == f
    assert len(Flags(1).bitset()) == 32


def test_flags_invalid_width():
    with pytest.raises(ValueError):
        Flags(1, width=0)


def test_uuid_parse_and_string():
    u = Uuid(SAMPLE_UUID)
    assert u.string() == SAMPLE_UUID
    assert str(u) == SAMPLE_UUID
    assert Uuid("{" + SAMPLE_UUID.upper() + "}") == u
    assert Uuid(SAMPLE_UUID.replace("-", "")) == u


def test_uuid_invalid_string():
    with pytest.raises(ValueError, match="Invalid UUID string"):
        Uuid("zz3e4567-e89b-12d3-a456-426655440000")


def test_uuid_short_string_padded_with_zeros():
    u = Uuid("12")
    assert u.data[0] == 0x12
    assert u.data[1:] == bytes(15)


def test_uuid_nil():
    assert Uuid.nil().string() == NIL_UUID
    assert not Uuid.nil()
    assert Uuid(SAMPLE_UUID)


def test_uuid_bytes_round_trip():
    u = Uuid.random()
    assert Uuid(u.data) == u
    assert Uuid(u.string()) == u
    with pytest.raises(ValueError):
        Uuid(b"short")


def test_uuid_generated_versions():
    assert Uuid.sequential().string()[14] == "1"
    assert Uuid.random().string()[14] == "4"
    assert Uuid.random() != Uuid.random()


def test_uuid_ordering_and_hash():
    low = Uuid.nil()
    high = Uuid(SAMPLE_UUID)
    assert low < high
    assert high > low
    assert sorted([high, low]) == [low, high]
    assert len({Uuid(SAMPLE_UUID), Uuid(SAMPLE_UUID)}) == 1