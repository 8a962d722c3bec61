"""Typed values and their order-preserving binary encodings."""

from __future__ import annotations

import enum
import math
import struct
from dataclasses import dataclass
from typing import Any, Optional, Union


class ValueType(enum.IntEnum):
    """Types of the values stored in the database."""

    BYTES = 1
    STRING = 2
    BOOL = 3
    UINT = 4
    UINT8 = 5
    UINT16 = 6
    UINT32 = 7
    UINT64 = 8
    INT = 9
    INT8 = 10
    INT16 = 11
    INT32 = 12
    INT64 = 13
    FLOAT32 = 14
    FLOAT64 = 15

    def __str__(self) -> str:
        return self.name.title()


TypeLike = Union[ValueType, int]

# width in bytes and signedness of every integer type
_INTEGERS = {
    ValueType.UINT: (8, False),
    ValueType.UINT8: (1, False),
    ValueType.UINT16: (2, False),
    ValueType.UINT32: (4, False),
    ValueType.UINT64: (8, False),
    ValueType.INT: (8, True),
    ValueType.INT8: (1, True),
    ValueType.INT16: (2, True),
    ValueType.INT32: (4, True),
    ValueType.INT64: (8, True),
}

_FLOAT_WIDTHS = {ValueType.FLOAT32: 4, ValueType.FLOAT64: 8}

_TYPE_NAMES = {
    "[]byte": ValueType.BYTES,
    "string": ValueType.STRING,
    "bool": ValueType.BOOL,
    "uint": ValueType.UINT,
    "uint8": ValueType.UINT8,
    "uint16": ValueType.UINT16,
    "uint32": ValueType.UINT32,
    "uint64": ValueType.UINT64,
    "int": ValueType.INT,
    "int8": ValueType.INT8,
    "int16": ValueType.INT16,
    "int32": ValueType.INT32,
    "int64": ValueType.INT64,
    "float32": ValueType.FLOAT32,
    "float64": ValueType.FLOAT64,
}


def type_from_name(name: str) -> Optional[ValueType]:
    """Return the value type named like 'int64' or '[]byte', or None if unknown."""
    return _TYPE_NAMES.get(name)


def is_integer(type: TypeLike) -> bool:
    """Tell whether the type is a signed or unsigned integer of any size."""
    return ValueType.UINT <= type <= ValueType.INT64


def is_float(type: TypeLike) -> bool:
    """Tell whether the type is FLOAT32 or FLOAT64."""
    return type in (ValueType.FLOAT32, ValueType.FLOAT64)


def is_number(type: TypeLike) -> bool:
    """Tell whether the type is an integer or a float."""
    return is_integer(type) or is_float(type)


def _to_float32(x: float) -> float:
    try:
        return struct.unpack(">f", struct.pack(">f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _wrap(x: int, bits: int, signed: bool) -> int:
    x &= (1 << bits) - 1
    if signed and x >= 1 << (bits - 1):
        x -= 1 << bits
    return x


def _encode_float(x: float, width: int) -> bytes:
    if width == 4:
        x = _to_float32(x)
        bits = int.from_bytes(struct.pack(">f", x), "big")
    else:
        bits = int.from_bytes(struct.pack(">d", x), "big")
    sign = 1 << (width * 8 - 1)
    mask = (1 << (width * 8)) - 1
    bits ^= sign if x >= 0 else mask
    return bits.to_bytes(width, "big")


def _decode_float(data: bytes, width: int, type: ValueType) -> float:
    if len(data) < width:
        raise ValueError(f"cannot decode buffer to {type}")
    bits = int.from_bytes(data[:width], "big")
    sign = 1 << (width * 8 - 1)
    mask = (1 << (width * 8)) - 1
    bits ^= sign if bits & sign else mask
    fmt = ">f" if width == 4 else ">d"
    return struct.unpack(fmt, bits.to_bytes(width, "big"))[0]


def encode_value(type: TypeLike, x: Any) -> bytes:
    """Encode x as the given type so that encodings sort like the values."""
    t = ValueType(type)
    if t is ValueType.BYTES:
        if not isinstance(x, (bytes, bytearray, memoryview)):
            raise TypeError(f"expected bytes for {t}, got {x.__class__.__name__}")
        return bytes(x)
    if t is ValueType.STRING:
        if not isinstance(x, str):
            raise TypeError(f"expected str for {t}, got {x.__class__.__name__}")
        return x.encode("utf-8")
    if t is ValueType.BOOL:
        if not isinstance(x, bool):
            raise TypeError(f"expected bool for {t}, got {x.__class__.__name__}")
        return b"\x01" if x else b"\x00"
    if t in _INTEGERS:
        if isinstance(x, bool) or not isinstance(x, int):
            raise TypeError(f"expected int for {t}, got {x.__class__.__name__}")
        width, signed = _INTEGERS[t]
        bits = width * 8
        low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
        if not low <= x <= high:
            raise ValueError(f"{x} is out of range for {t}")
        if signed:
            x += 1 << (bits - 1)
        return x.to_bytes(width, "big")
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise TypeError(f"expected float for {t}, got {x.__class__.__name__}")
    return _encode_float(float(x), _FLOAT_WIDTHS[t])


def decode_value(type: TypeLike, data: bytes) -> Any:
    """Decode data encoded as the given type into a Python value."""
    t = ValueType(type)
    data = bytes(data)
    if t is ValueType.BYTES:
        return data
    if t is ValueType.STRING:
        return data.decode("utf-8", "replace")
    if t is ValueType.BOOL:
        if len(data) != 1:
            raise ValueError("cannot decode buffer to bool")
        return data[0] == 1
    if t in _INTEGERS:
        width, signed = _INTEGERS[t]
        if len(data) < width:
            raise ValueError(f"cannot decode buffer to {t}")
        x = int.from_bytes(data[:width], "big")
        if signed:
            x -= 1 << (width * 8 - 1)
        return x
    return _decode_float(data, _FLOAT_WIDTHS[t], t)


def _zero_of(t: ValueType) -> Any:
    if t is ValueType.BYTES:
        return b""
    if t is ValueType.STRING:
        return ""
    if t is ValueType.BOOL:
        return False
    if is_float(t):
        return 0.0
    return 0


_ZERO_DATA = {t: encode_value(t, _zero_of(t)) for t in ValueType}


def zero_value(type: TypeLike) -> "Value":
    """Return the zero value of the given type."""
    t = ValueType(type)
    return Value(t, _ZERO_DATA[t])


def is_zero_value(type: TypeLike, data: bytes) -> bool:
    """Tell whether data is the encoded zero value of the type."""
    try:
        t = ValueType(type)
    except ValueError:
        return False
    return bytes(data) == _ZERO_DATA[t]


def _format_float(x: float, single: bool) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "+Inf" if x > 0 else "-Inf"
    if x == 0:
        return "-0" if math.copysign(1.0, x) < 0 else "0"

    sign = "-" if x < 0 else ""
    ax = abs(x)
    text = f"{ax:.16e}"
    for precision in range(17):
        text = f"{ax:.{precision}e}"
        back = float(text)
        if single:
            back = _to_float32(back)
        if back == ax:
            break
    mantissa, exponent = text.split("e")
    digits = mantissa.replace(".", "").rstrip("0") or "0"
    exp = int(exponent)
    nd = len(digits)

    if exp < -4 or exp >= 6:
        body = digits[0] + ("." + digits[1:] if nd > 1 else "")
        return f"{sign}{body}e{'+' if exp >= 0 else '-'}{abs(exp):02d}"

    dp = exp + 1
    if dp <= 0:
        body = "0." + "0" * (-dp) + digits
    elif dp >= nd:
        body = digits + "0" * (dp - nd)
    else:
        body = digits[:dp] + "." + digits[dp:]
    return sign + body


@dataclass(frozen=True)
class Value:
    """Encoded data alongside its type."""

    type: ValueType
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ValueType(self.type))
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_python(cls, x: Any) -> "Value":
        """Create a value whose type is inferred from x."""
        if isinstance(x, bool):
            t = ValueType.BOOL
        elif isinstance(x, int):
            t = ValueType.INT
        elif isinstance(x, float):
            t = ValueType.FLOAT64
        elif isinstance(x, str):
            t = ValueType.STRING
        elif isinstance(x, (bytes, bytearray, memoryview)):
            t = ValueType.BYTES
        else:
            raise TypeError(f"unsupported type {x.__class__.__name__}")
        return cls.typed(t, x)

    @classmethod
    def typed(cls, type: TypeLike, x: Any) -> "Value":
        """Create a value of the given type from x."""
        t = ValueType(type)
        return cls(t, encode_value(t, x))

    def decode(self) -> Any:
        """Decode the data into a Python value according to the type."""
        return decode_value(self.type, self.data)

    def decode_to_bytes(self) -> bytes:
        """Return the raw encoded data."""
        return self.data

    def decode_to_string(self) -> str:
        """Return the value as a string; only STRING and BYTES values qualify."""
        if self.type in (ValueType.STRING, ValueType.BYTES):
            return self.data.decode("utf-8", "replace")
        raise TypeError(f"can't convert {self.type} to string")

    def decode_to_bool(self) -> bool:
        """Return the truthiness of the value."""
        if self.type is ValueType.BOOL:
            return decode_value(self.type, self.data)
        return not is_zero_value(self.type, self.data)

    def _as_int64(self) -> int:
        x = self.decode()
        if isinstance(x, float):
            if not math.isfinite(x):
                raise ValueError("cannot convert a non-finite float to an integer")
            x = int(x)
        return _wrap(x, 64, True)

    def convert(self, target: TypeLike) -> Union[int, float]:
        """Convert a numeric value to another numeric type, wrapping integers."""
        t = ValueType(target)
        if not is_number(t):
            raise ValueError(f"target type {t} is not numeric")
        if self.type is t:
            return self.decode()
        if t is ValueType.FLOAT64:
            if self.type is ValueType.FLOAT32:
                return self.decode()
            if is_integer(self.type):
                return float(self._as_int64())
        elif t is ValueType.FLOAT32:
            if self.type is ValueType.FLOAT64:
                return _to_float32(self.decode())
            if is_integer(self.type):
                return _to_float32(float(self._as_int64()))
        elif is_number(self.type):
            width, signed = _INTEGERS[t]
            return _wrap(self._as_int64(), width * 8, signed)
        raise TypeError(f"can't convert {self.type} to {t}")

    def __str__(self) -> str:
        try:
            x = self.decode()
        except ValueError:
            x = zero_value(self.type).decode()
        if isinstance(x, bytes):
            return "[" + " ".join(str(b) for b in x) + "]"
        if isinstance(x, bool):
            return "true" if x else "false"
        if isinstance(x, float):
            return _format_float(x, self.type is ValueType.FLOAT32)
        return str(x)