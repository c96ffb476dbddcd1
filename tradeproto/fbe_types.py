"""Value types used by the binary encoding models: decimal, flags, UUID, base64, timestamps."""

from __future__ import annotations

import enum
import functools
import math
import numbers
import time
import uuid as _uuid
from typing import Any

_BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_INDEX = {ch: i for i, ch in enumerate(_BASE64_ALPHABET)}
_HEX_DIGITS = "0123456789abcdef"


def base64_encode(data: bytes) -> str:
    """Encode bytes as a padded Base64 string."""
    result: list[str] = []
    val = 0
    valb = -6
    for byte in bytes(data):
        val = ((val << 8) + byte) & 0xFFFFFFFF
        valb += 8
        while valb >= 0:
            result.append(_BASE64_ALPHABET[(val >> valb) & 0x3F])
            valb -= 6
    if valb > -6:
        result.append(_BASE64_ALPHABET[((val << 8) >> (valb + 8)) & 0x3F])
    while len(result) % 4:
        result.append("=")
    return "".join(result)


def base64_decode(text: str) -> bytes:
    """Decode a Base64 string, stopping at the first character outside the alphabet."""
    result = bytearray()
    val = 0
    valb = -8
    for ch in text:
        index = _BASE64_INDEX.get(ch)
        if index is None:
            break
        val = ((val << 6) + index) & 0xFFFFFFFF
        valb += 6
        if valb >= 0:
            result.append((val >> valb) & 0xFF)
            valb -= 8
    return bytes(result)


def unhex(ch: str) -> int:
    """Return the value of one hexadecimal digit, or 255 if it is not one."""
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "a" <= ch <= "f":
        return 10 + ord(ch) - ord("a")
    if "A" <= ch <= "F":
        return 10 + ord(ch) - ord("A")
    return 255


def epoch() -> int:
    """Return the Epoch timestamp in nanoseconds (always zero)."""
    return 0


def utc() -> int:
    """Return the current UTC timestamp in nanoseconds since the Epoch."""
    return time.time_ns()


def _ieee_divide(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


class DecimalValue:
    """Decimal number held as a double, with arithmetic and comparisons."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = 0.0) -> None:
        if isinstance(value, DecimalValue):
            self._value = value._value
        else:
            self._value = float(value)

    @staticmethod
    def _coerce(other: Any) -> float | None:
        if isinstance(other, DecimalValue):
            return other._value
        if isinstance(other, numbers.Real):
            return float(other)
        return None

    def string(self) -> str:
        """Return the value in fixed notation with six decimals."""
        return f"{self._value:f}"

    def __str__(self) -> str:
        return self.string()

    def __repr__(self) -> str:
        return f"DecimalValue({self._value!r})"

    def __float__(self) -> float:
        return self._value

    def __int__(self) -> int:
        return int(self._value)

    def __bool__(self) -> bool:
        return self._value != 0.0

    def __hash__(self) -> int:
        return hash(self._value)

    def __pos__(self) -> DecimalValue:
        return DecimalValue(self._value)

    def __neg__(self) -> DecimalValue:
        return DecimalValue(-self._value)

    def __abs__(self) -> DecimalValue:
        return DecimalValue(abs(self._value))

    def __add__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(self._value + o)

    def __radd__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(o + self._value)

    def __sub__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(self._value - o)

    def __rsub__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(o - self._value)

    def __mul__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(self._value * o)

    def __rmul__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(o * self._value)

    def __truediv__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(_ieee_divide(self._value, o))

    def __rtruediv__(self, other: Any) -> DecimalValue:
        o = self._coerce(other)
        return NotImplemented if o is None else DecimalValue(_ieee_divide(o, self._value))

    def __eq__(self, other: object) -> bool:
        o = self._coerce(other)
        return NotImplemented if o is None else self._value == o

    def __ne__(self, other: object) -> bool:
        o = self._coerce(other)
        return NotImplemented if o is None else self._value != o

    def __lt__(self, other: Any) -> bool:
        o = self._coerce(other)
        return NotImplemented if o is None else self._value < o

    def __le__(self, other: Any) -> bool:
        o = self._coerce(other)
        return NotImplemented if o is None else self._value <= o

    def __gt__(self, other: Any) -> bool:
        o = self._coerce(other)
        return NotImplemented if o is None else self._value > o

    def __ge__(self, other: Any) -> bool:
        o = self._coerce(other)
        return NotImplemented if o is None else self._value >= o


class Flags:
    """Set of enum flags stored in an unsigned integer of a fixed bit width."""

    __slots__ = ("_value", "_enum_type", "_width")

    def __init__(self, value: Any = 0, *, enum_type: type[enum.Enum] | None = None, width: int = 32) -> None:
        if width <= 0:
            raise ValueError("Invalid flags width!")
        if enum_type is None and isinstance(value, enum.Enum):
            enum_type = type(value)
        self._enum_type = enum_type
        self._width = width
        self._value = self._raw(value) & self._mask

    @property
    def _mask(self) -> int:
        return (1 << self._width) - 1

    @staticmethod
    def _raw(value: Any) -> int:
        if isinstance(value, Flags):
            return value._value
        if isinstance(value, enum.Enum):
            return int(value.value)
        return int(value)

    def _coerce(self, other: Any) -> int | None:
        if isinstance(other, (Flags, enum.Enum, int)):
            return self._raw(other) & self._mask
        return None

    def _make(self, raw: int) -> Flags:
        return Flags(raw, enum_type=self._enum_type, width=self._width)

    @property
    def width(self) -> int:
        """Number of bits in the underlying value."""
        return self._width

    @property
    def underlying(self) -> int:
        """The raw unsigned value."""
        return self._value

    @property
    def value(self) -> Any:
        """The value as the enum type, or as an integer if that is not possible."""
        if self._enum_type is None:
            return self._value
        try:
            return self._enum_type(self._value)
        except ValueError:
            return self._value

    def isset(self, value: Any = None) -> bool:
        """Without an argument, whether any flag is set; otherwise whether the given flag is set."""
        if value is None:
            return self._value != 0
        return (self._value & self._raw(value)) != 0

    def bitset(self) -> str:
        """Return the bits as a string of '0' and '1', most significant first."""
        return format(self._value, f"0{self._width}b")

    def __bool__(self) -> bool:
        return self.isset()

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __invert__(self) -> Flags:
        return self._make(~self._value & self._mask)

    def __and__(self, other: Any) -> Flags:
        o = self._coerce(other)
        return NotImplemented if o is None else self._make(self._value & o)

    __rand__ = __and__

    def __or__(self, other: Any) -> Flags:
        o = self._coerce(other)
        return NotImplemented if o is None else self._make(self._value | o)

    __ror__ = __or__

    def __xor__(self, other: Any) -> Flags:
        o = self._coerce(other)
        return NotImplemented if o is None else self._make(self._value ^ o)

    __rxor__ = __xor__

    def __eq__(self, other: object) -> bool:
        o = self._coerce(other)
        return NotImplemented if o is None else self._value == o

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Flags({self._value}, width={self._width})"


@functools.total_ordering
class Uuid:
    """128-bit universally unique identifier."""

    __slots__ = ("_data",)

    def __init__(self, value: str | bytes | bytearray | Uuid | None = None) -> None:
        if value is None:
            self._data = bytes(16)
        elif isinstance(value, Uuid):
            self._data = value._data
        elif isinstance(value, str):
            self._data = self._parse(value)
        else:
            data = bytes(value)
            if len(data) != 16:
                raise ValueError("UUID data must be exactly 16 bytes")
            self._data = data

    @staticmethod
    def _parse(text: str) -> bytes:
        result = bytearray()
        pending: str | None = None
        for ch in text:
            if ch in "-{}":
                continue
            if pending is None:
                pending = ch
                continue
            high, low = unhex(pending), unhex(ch)
            pending = None
            if high > 15 or low > 15:
                raise ValueError("Invalid UUID string: " + text)
            result.append(high * 16 + low)
            if len(result) >= 16:
                break
        result.extend(bytes(16 - len(result)))
        return bytes(result)

    @property
    def data(self) -> bytes:
        """The 16 raw bytes."""
        return self._data

    def string(self) -> str:
        """Return the UUID as "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx" in lower case."""
        digits = "".join(_HEX_DIGITS[b >> 4] + _HEX_DIGITS[b & 0x0F] for b in self._data)
        return "-".join((digits[0:8], digits[8:12], digits[12:16], digits[16:20], digits[20:32]))

    @classmethod
    def nil(cls) -> Uuid:
        """Return the nil UUID with all bits zero."""
        return cls()

    @classmethod
    def sequential(cls) -> Uuid:
        """Generate a time-based (version 1) UUID."""
        return cls(_uuid.uuid1().bytes)

    @classmethod
    def random(cls) -> Uuid:
        """Generate a random (version 4) UUID."""
        return cls(_uuid.uuid4().bytes)

    def __bool__(self) -> bool:
        return self._data != bytes(16)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uuid):
            return NotImplemented
        return self._data == other._data

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Uuid):
            return NotImplemented
        return self._data < other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __str__(self) -> str:
        return self.string()

    def __repr__(self) -> str:
        return f"Uuid('{self.string()}')"