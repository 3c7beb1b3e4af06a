"""Parsing and humanising of storage sizes and resource quantities."""

from __future__ import annotations

import re
from decimal import ROUND_CEILING, Decimal, InvalidOperation

BINARY_ABBRS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB")

_DECIMAL_MAP = {"k": 1000, "m": 1000**2, "g": 1000**3, "t": 1000**4, "p": 1000**5}
_BINARY_MAP = {"k": 1024, "m": 1024**2, "g": 1024**3, "t": 1024**4, "p": 1024**5}

_SIZE_RE = re.compile(r"^(\d+(\.\d+)*) ?([kKmMgGtTpP])?[iI]?[bB]?$")


def _parse_size(size: str, multipliers: dict[str, int]) -> int:
    match = _SIZE_RE.match(size)
    if match is None:
        raise ValueError(f"invalid size: '{size}'")
    try:
        value = float(match.group(1))
    except ValueError as exc:
        raise ValueError(f"invalid size: '{size}'") from exc
    prefix = match.group(3)
    if prefix:
        value *= multipliers[prefix.lower()]
    return int(value)


def ram_in_bytes(size: str) -> int:
    """Parse a size with binary (1024-based) units into bytes."""
    return _parse_size(size, _BINARY_MAP)


def from_human_size(size: str) -> int:
    """Parse a size with decimal (1000-based) units into bytes."""
    return _parse_size(size, _DECIMAL_MAP)


def custom_size(fmt: str, size: float, base: float, units) -> str:
    """Scale ``size`` by ``base`` until it fits and format it with its unit."""
    units = list(units)
    limit = len(units) - 1
    index = 0
    while size >= base and index < limit:
        size /= base
        index += 1
    return fmt % (size, units[index])


def bytes_size(size: float) -> str:
    """Humanise a byte count with binary units and four significant digits."""
    return custom_size("%.4g%s", size, 1024.0, BINARY_ABBRS)


_BINARY_SUFFIXES = {"Ki": 2**10, "Mi": 2**20, "Gi": 2**30, "Ti": 2**40, "Pi": 2**50, "Ei": 2**60}
_DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}
_EXPONENT_SUFFIX = {-9: "n", -6: "u", -3: "m", 0: "", 3: "k", 6: "M", 9: "G", 12: "T", 15: "P", 18: "E"}
_QUANTITY_RE = re.compile(r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+))([a-zA-Z]*)$")

BINARY_SI = "BinarySI"
DECIMAL_SI = "DecimalSI"


class Quantity:
    """A resource quantity such as ``4Gi`` or ``500M``."""

    def __init__(self, value: Decimal | int = 0, format: str | None = None) -> None:
        self.value = Decimal(value)
        self.format = format

    @classmethod
    def parse(cls, text: str) -> "Quantity":
        match = _QUANTITY_RE.match(text.strip())
        if match is None:
            raise ValueError(f"quantities must match the regular expression: {text!r}")
        number, suffix = match.groups()
        try:
            amount = Decimal(number)
        except InvalidOperation as exc:
            raise ValueError(f"invalid quantity: {text!r}") from exc
        if suffix in _BINARY_SUFFIXES:
            return cls(amount * _BINARY_SUFFIXES[suffix], BINARY_SI)
        if suffix in _DECIMAL_SUFFIXES:
            return cls(amount * _DECIMAL_SUFFIXES[suffix], DECIMAL_SI)
        raise ValueError(f"unable to parse quantity's suffix: {text!r}")

    def add(self, other: "Quantity") -> "Quantity":
        """Add ``other`` in place; a zero quantity adopts the other's format."""
        if self.value == 0:
            self.format = other.format
        self.value += other.value
        return self

    def __str__(self) -> str:
        if self.value == 0:
            return "0"
        if self.format == BINARY_SI and self.value == self.value.to_integral_value():
            number = int(self.value)
            for suffix, base in reversed(_BINARY_SUFFIXES.items()):
                if number % base == 0:
                    return f"{number // base}{suffix}"
            return str(number)
        scaled = int((self.value * Decimal("1e9")).to_integral_value(ROUND_CEILING))
        exponent = -9
        while scaled % 1000 == 0 and exponent < 18:
            scaled //= 1000
            exponent += 3
        return f"{scaled}{_EXPONENT_SUFFIX[exponent]}"

    def __repr__(self) -> str:
        return f"Quantity({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)