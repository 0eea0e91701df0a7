"""Parsing and formatting of the text settings exchanged with a sensor session."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

_C_SPACE = "[ \t\n\v\f\r]*"
_FLOAT_RE = re.compile(
    _C_SPACE
    + r"([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_RE = re.compile(_C_SPACE + r"([+-]?[0-9]+)")
_HEX8_RE = re.compile(r"(?:0[xX])?([0-9a-fA-F]{1,2})")


def c_atof(text: str) -> float:
    """Read a leading decimal number the way C ``atof`` does.

    Leading white space is skipped and anything after the number is ignored;
    text that does not start with a number gives 0.0.
    """
    match = _FLOAT_RE.match(text)
    if match is None:
        return 0.0
    return float(match.group(1))


def c_atoi(text: str) -> int:
    """Read a leading decimal integer the way C ``atoi`` does; 0 when there is none."""
    match = _INT_RE.match(text)
    if match is None:
        return 0
    return int(match.group(1))


def parse_hex8(text: str) -> int:
    """Parse an 8-bit hexadecimal value such as ``3A`` or ``0x3a``."""
    match = _HEX8_RE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"not an 8-bit hexadecimal value: {text!r}")
    return int(match.group(1), 16)


def split_setting(text: str) -> tuple[str, str | None]:
    """Split ``NAME=value`` into its name and value.

    The value is None when the text holds no ``=``; only the first ``=``
    separates, so the value may contain more of them.
    """
    name, sep, value = text.partition("=")
    if not sep:
        return text, None
    return name, value


def format_fixed(value: float, decimals: int) -> str:
    """Format ``value`` with a fixed number of decimals and no padding."""
    if decimals < 0:
        raise ValueError(f"decimals must not be negative, got {decimals!r}")
    return f"{value:.{decimals}f}"


def _check_address(address: int) -> None:
    if not 0 <= address <= 0xFF:
        raise ValueError(f"address must fit in 8 bits, got {address!r}")


def config_line(address: int, key: str, value: object) -> str:
    """One line of a configuration report: ``cs:<SA>:<KEY>=<value>``."""
    _check_address(address)
    return f"cs:{address:02X}:{key}={value}"


def reply_line(address: int, message: str) -> str:
    """The answer to a configuration write: ``+cs:<SA>:<message>``."""
    _check_address(address)
    return f"+cs:{address:02X}:{message}"


def flag_list(flags: int, names: Mapping[int, str] | Iterable[tuple[int, str]]) -> str:
    """Render a flag word as its decimal value followed by the set flag names.

    ``names`` maps each flag mask to its label, in report order. The result
    looks like ``3(A,B)``, or just the number when no named flag is set.
    """
    pairs = names.items() if isinstance(names, Mapping) else names
    value = int(flags)
    labels = [label for mask, label in pairs if int(mask) and value & int(mask) == int(mask)]
    if not labels:
        return str(value)
    return f"{value}({','.join(labels)})"