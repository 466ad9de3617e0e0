"""Positional arguments: the raw argument list and typed argument parsers."""

from __future__ import annotations

import enum
import math
import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, ClassVar, Iterable, Iterator, Optional, Sequence

from .tracing import tracef

RFC3339 = "%Y-%m-%dT%H:%M:%S%z"
DATETIME = "%Y-%m-%d %H:%M:%S"
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_FLOAT32_MAX = 3.4028234663852886e38
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass
class IntegerConfig:
    """Settings for integer values; base 0 detects 0x, 0o, 0b and 0 prefixes."""

    base: int = 0


@dataclass
class StringConfig:
    """Settings for string values."""

    trim_space: bool = False


@dataclass
class TimestampConfig:
    """Settings for timestamps: strptime layouts tried in order, and a zone for naive results."""

    timezone: Optional[tzinfo] = None
    layouts: list[str] = field(default_factory=list)


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _parse_integer(text: str, base: int, signed: bool, bits: int) -> int:
    func = "strconv.ParseInt" if signed else "strconv.ParseUint"

    def error(reason: str) -> ValueError:
        return ValueError(f"{func}: parsing {_quote(text)}: {reason}")

    if base != 0 and not 2 <= base <= 36:
        raise error(f"invalid base {base}")

    s = text
    negative = False
    if signed and s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]

    auto = base == 0
    prefixed = False
    if auto:
        base = 10
        if s[:1] == "0":
            prefix = s[:2].lower()
            if prefix == "0x":
                base, s, prefixed = 16, s[2:], True
            elif prefix == "0b":
                base, s, prefixed = 2, s[2:], True
            elif prefix == "0o":
                base, s, prefixed = 8, s[2:], True
            elif len(s) > 1:
                base, s, prefixed = 8, s[1:], True

    if "_" in s:
        if not auto or s.endswith("_") or "__" in s or (s.startswith("_") and not prefixed):
            raise error("invalid syntax")
        s = s.replace("_", "")

    allowed = _DIGITS[:base]
    if not s or any(c not in allowed for c in s.lower()):
        raise error("invalid syntax")

    value = int(s, base)
    if negative:
        value = -value

    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        raise error("value out of range")
    return value


def _parse_float(text: str, bits: int) -> float:
    def error(reason: str) -> ValueError:
        return ValueError(f"strconv.ParseFloat: parsing {_quote(text)}: {reason}")

    if not text or text != text.strip() or "_" in text:
        raise error("invalid syntax")
    try:
        value = float(text)
    except ValueError:
        raise error("invalid syntax") from None

    if math.isinf(value) and "inf" not in text.lower():
        raise error("value out of range")
    if bits == 32:
        if math.isfinite(value) and abs(value) > _FLOAT32_MAX:
            raise error("value out of range")
        value = struct.unpack("<f", struct.pack("<f", value))[0]
    return value


def _parse_timestamp(text: str, config: TimestampConfig) -> datetime:
    if not config.layouts:
        raise ValueError("got nil/empty layouts slice")
    for layout in config.layouts:
        try:
            parsed = datetime.strptime(text, layout)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=config.timezone or timezone.utc)
        return parsed
    raise ValueError(f"unable to parse {_quote(text)} as any of the layouts {config.layouts}")


def _parse_string_map(text: str, config: StringConfig) -> dict[str, str]:
    result: dict[str, str] = {}
    for item in text.split(","):
        key, separator, value = item.partition("=")
        if not separator:
            raise ValueError(f"item {_quote(item)} is missing separator {_quote('=')}")
        result[key] = value.strip() if config.trim_space else value
    return result


class ValueKind(enum.Enum):
    """The type of value an argument holds, with its parsing rules."""

    STRING = "string"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    TIMESTAMP = "timestamp"
    STRING_MAP = "string_map"

    def zero(self) -> Any:
        """Return the empty value of this kind."""
        if self in _INTEGER_KINDS:
            return 0
        if self in _FLOAT_KINDS:
            return 0.0
        if self is ValueKind.TIMESTAMP:
            return ZERO_TIME
        if self is ValueKind.STRING_MAP:
            return {}
        return ""

    def default_config(self) -> Any:
        """Return a fresh default configuration for this kind."""
        if self in _INTEGER_KINDS:
            return IntegerConfig()
        if self is ValueKind.TIMESTAMP:
            return TimestampConfig()
        if self in (ValueKind.STRING, ValueKind.STRING_MAP):
            return StringConfig()
        return None

    def parse(self, text: str, config: Any = None) -> Any:
        """Convert text into a value of this kind, raising ValueError on bad input."""
        if config is None:
            config = self.default_config()
        if self in _INTEGER_KINDS:
            signed, bits = _INTEGER_KINDS[self]
            return _parse_integer(text, config.base, signed, bits)
        if self in _FLOAT_KINDS:
            return _parse_float(text, _FLOAT_KINDS[self])
        if self is ValueKind.TIMESTAMP:
            return _parse_timestamp(text, config)
        if self is ValueKind.STRING_MAP:
            return _parse_string_map(text, config)
        return text.strip() if config.trim_space else text


_INTEGER_KINDS = {
    ValueKind.INT: (True, 64),
    ValueKind.INT8: (True, 8),
    ValueKind.INT16: (True, 16),
    ValueKind.INT32: (True, 32),
    ValueKind.INT64: (True, 64),
    ValueKind.UINT: (False, 64),
    ValueKind.UINT8: (False, 8),
    ValueKind.UINT16: (False, 16),
    ValueKind.UINT32: (False, 32),
    ValueKind.UINT64: (False, 64),
}

_FLOAT_KINDS = {ValueKind.FLOAT32: 32, ValueKind.FLOAT64: 64}


class Args:
    """The positional arguments left over after parsing."""

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._values = list(values)

    def get(self, n: int) -> str:
        """Return the nth argument, or an empty string."""
        if 0 <= n < len(self._values):
            return self._values[n]
        return ""

    def first(self) -> str:
        """Return the first argument, or an empty string."""
        return self.get(0)

    def tail(self) -> list[str]:
        """Return every argument after the first."""
        if len(self._values) >= 2:
            return list(self._values[1:])
        return []

    def present(self) -> bool:
        """Return whether there is any argument."""
        return len(self._values) != 0

    def slice(self) -> list[str]:
        """Return a copy of the arguments."""
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Args):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"Args({self._values!r})"


_UNSET = object()


@dataclass(eq=False)
class ArgumentBase:
    """A single positional argument taking at most one value."""

    kind: ClassVar[ValueKind] = ValueKind.STRING

    name: str = ""
    value: Any = None
    destination: Optional[Callable[[Any], None]] = None
    usage_text: str = ""
    config: Any = None
    _parsed: Any = field(default=_UNSET, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.value is None:
            self.value = self.kind.zero()
        if self.config is None:
            self.config = self.kind.default_config()

    def has_name(self, name: str) -> bool:
        return name == self.name

    def usage(self) -> str:
        return self.usage_text or self.name

    def parse(self, args: Sequence[str]) -> list[str]:
        """Consume the first argument, if any, and return the rest."""
        tracef("calling arg %s parse with args %r", self.name, args)
        self._parsed = self.value
        if args:
            self._parsed = self.kind.parse(args[0], self.config)
            tracef("set arg %s one value %r", self.name, self._parsed)
        if self.destination is not None:
            self.destination(self._parsed)
        return list(args[1:])

    def get(self) -> Any:
        if self._parsed is not _UNSET:
            return self._parsed
        return self.value


@dataclass(eq=False)
class ArgumentsBase:
    """A positional argument taking between min and max values; max -1 means unlimited."""

    kind: ClassVar[ValueKind] = ValueKind.STRING

    name: str = ""
    value: Any = None
    destination: Optional[Callable[[list], None]] = None
    usage_text: str = ""
    min: int = 0
    max: int = 0
    config: Any = None
    _values: Optional[list] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.value is None:
            self.value = self.kind.zero()
        if self.config is None:
            self.config = self.kind.default_config()

    def has_name(self, name: str) -> bool:
        return name == self.name

    def usage(self) -> str:
        if self.usage_text:
            return self.usage_text
        if self.min == 0:
            if self.max == 1:
                return f"[{self.name}]"
            return f"[{self.name} ...]"
        return f"{self.name} [{self.name} ...]"

    def parse(self, args: Sequence[str]) -> list[str]:
        """Consume up to max arguments and return the rest."""
        tracef("calling arg %s parse with args %r", self.name, args)
        if self.max == 0:
            print(f"WARNING args {self.name} has max 0, not parsing argument")
            return list(args)
        if self.max != -1 and self.min > self.max:
            print(
                f"WARNING args {self.name} has min[{self.min}] > max[{self.max}], "
                "not parsing argument"
            )
            return list(args)

        self._values = []
        count = 0
        for arg in args:
            parsed = self.kind.parse(arg, self.config)
            tracef("set arg %s one value %r", self.name, parsed)
            self._values.append(parsed)
            count += 1
            if self.max > -1 and count >= self.max:
                break

        if count < self.min:
            raise ValueError(
                f"sufficient count of arg {self.name} not provided, "
                f"given {count} expected {self.min}"
            )

        if self.destination is not None:
            self.destination(list(self._values))
        return list(args[count:])

    def get(self) -> list:
        if self._values is not None:
            return list(self._values)
        return []


class StringArg(ArgumentBase):
    kind = ValueKind.STRING


class IntArg(ArgumentBase):
    kind = ValueKind.INT


class Int8Arg(ArgumentBase):
    kind = ValueKind.INT8


class Int16Arg(ArgumentBase):
    kind = ValueKind.INT16


class Int32Arg(ArgumentBase):
    kind = ValueKind.INT32


class Int64Arg(ArgumentBase):
    kind = ValueKind.INT64


class UintArg(ArgumentBase):
    kind = ValueKind.UINT


class Uint8Arg(ArgumentBase):
    kind = ValueKind.UINT8


class Uint16Arg(ArgumentBase):
    kind = ValueKind.UINT16


class Uint32Arg(ArgumentBase):
    kind = ValueKind.UINT32


class Uint64Arg(ArgumentBase):
    kind = ValueKind.UINT64


class FloatArg(ArgumentBase):
    kind = ValueKind.FLOAT64


class Float32Arg(ArgumentBase):
    kind = ValueKind.FLOAT32


class Float64Arg(ArgumentBase):
    kind = ValueKind.FLOAT64


class TimestampArg(ArgumentBase):
    kind = ValueKind.TIMESTAMP


class StringMapArg(ArgumentBase):
    kind = ValueKind.STRING_MAP


class StringArgs(ArgumentsBase):
    kind = ValueKind.STRING


class IntArgs(ArgumentsBase):
    kind = ValueKind.INT


class Int8Args(ArgumentsBase):
    kind = ValueKind.INT8


class Int16Args(ArgumentsBase):
    kind = ValueKind.INT16


class Int32Args(ArgumentsBase):
    kind = ValueKind.INT32


class Int64Args(ArgumentsBase):
    kind = ValueKind.INT64


class UintArgs(ArgumentsBase):
    kind = ValueKind.UINT


class Uint8Args(ArgumentsBase):
    kind = ValueKind.UINT8


class Uint16Args(ArgumentsBase):
    kind = ValueKind.UINT16


class Uint32Args(ArgumentsBase):
    kind = ValueKind.UINT32


class Uint64Args(ArgumentsBase):
    kind = ValueKind.UINT64


class FloatArgs(ArgumentsBase):
    kind = ValueKind.FLOAT64


class Float32Args(ArgumentsBase):
    kind = ValueKind.FLOAT32


class Float64Args(ArgumentsBase):
    kind = ValueKind.FLOAT64


class TimestampArgs(ArgumentsBase):
    kind = ValueKind.TIMESTAMP


def any_arguments() -> list[ArgumentsBase]:
    """Return an argument list that accepts any number of strings."""
    return [StringArgs(max=-1)]