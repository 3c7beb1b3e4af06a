"""Output helpers: colours, ages, sizes, templates and tables."""

from __future__ import annotations

import asyncio
import enum
import math
import re
import sys
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Callable, Iterable, Sequence

from casctl.units import BINARY_ABBRS, bytes_size, custom_size, from_human_size, ram_in_bytes

MAX_TERMS = 2
_GREEN_STATUSES = "healthy bound online active claimed running attached normal"
_COLOR_FMT = "\x1b[%dm%s\x1b[0m"


class Color(enum.IntEnum):
    """Basic ANSI colours."""

    RED = 31
    GREEN = 32


class TemplateError(ValueError):
    """A template could not be parsed or rendered."""


def color_text(s: str, color: int) -> str:
    """Wrap ``s`` in the ANSI escape for ``color``; colour 0 leaves it plain."""
    if color == 0:
        return s
    return _COLOR_FMT % (int(color), s)


def fatal(msg: str) -> None:
    """Print ``msg`` to stderr and exit with status 1."""
    if msg:
        if not msg.endswith("\n"):
            msg += "\n"
        sys.stderr.write(msg)
    raise SystemExit(1)


def duration(d: timedelta) -> str:
    """Render an age such as ``2d1m`` using at most two terms."""
    micros = d // timedelta(microseconds=1)
    sign = -1 if micros < 0 else 1
    micros = abs(micros)
    day, hour, minute, second = 86400 * 10**6, 3600 * 10**6, 60 * 10**6, 10**6
    parts = (
        (sign * (micros // day), "d"),
        (sign * (micros % day // hour), "h"),
        (sign * (micros % hour // minute), "m"),
        (sign * (micros % minute // second), "s"),
    )
    age = ""
    terms = 0
    for amount, unit in parts:
        if amount != 0 and terms < MAX_TERMS:
            age += f"{amount}{unit}"
            terms += 1
    return age


_FIELD_RE = re.compile(r"\{\{\s*\.([\w.]*)\s*\}\}")
_MISSING = object()


def _lookup(obj: Any, path: str) -> Any:
    if not path:
        return obj
    for part in path.split("."):
        if isinstance(obj, Mapping):
            obj = obj.get(part, _MISSING)
        else:
            obj = getattr(obj, part, _MISSING)
        if obj is _MISSING:
            return _MISSING
    return obj


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if value is None:
        return "<nil>"
    return str(value)


def _escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("'", "&#39;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&#34;")
        .replace("\x00", "\ufffd")
    )


def _render(template: str, obj: Any, *, escape: bool, allow_missing: bool, name: str) -> str:
    if template.count("{{") != len(_FIELD_RE.findall(template)):
        raise TemplateError(f"error creating for {name}")

    def substitute(match: re.Match) -> str:
        value = _lookup(obj, match.group(1))
        if value is _MISSING:
            if allow_missing:
                return "<no value>"
            raise TemplateError(f"error displaying by template for {name}")
        text = _format_value(value)
        return _escape_html(text) if escape else text

    return _FIELD_RE.sub(substitute, template)


def print_by_template(template_name: str, resource_template: str, resource: Any) -> str:
    """Render ``{{.field}}`` placeholders against ``resource``, print and return it."""
    text = _render(resource_template, resource, escape=True, allow_missing=False, name=template_name)
    sys.stdout.write(text)
    return text


def template_printer(template: str, obj: Any) -> str:
    """Render a template against a resource document, printing missing keys as ``<no value>``."""
    try:
        text = _render(template, obj, escape=False, allow_missing=True, name="template")
    except TemplateError:
        return ""
    sys.stdout.write(text)
    return text


def _cells(row: Any) -> Sequence[Any]:
    return getattr(row, "cells", row)


def table_printer(columns: Iterable[Any], rows: Iterable[Any], wide: bool = True) -> str:
    """Print columns and rows as an aligned table with upper-case headings."""
    header = [str(getattr(col, "name", col)).upper() for col in columns]
    lines = [header] + [[_format_value(cell) for cell in _cells(row)] for row in rows or ()]
    widths: dict[int, int] = {}
    for line in lines:
        for index, cell in enumerate(line):
            widths[index] = max(widths.get(index, 0), len(cell))
    out = []
    for line in lines:
        padded = [cell.ljust(widths[i] + 3) for i, cell in enumerate(line[:-1])]
        padded.extend(line[-1:])
        out.append("".join(padded) + "\n")
    text = "".join(out)
    sys.stdout.write(text)
    return text


def convert_to_ibytes(value: str) -> str:
    """Humanise a size in binary units; unparsable input is returned unchanged."""
    if value == "":
        return value
    try:
        size = ram_in_bytes(value) if "i" in value else from_human_size(value)
    except ValueError:
        return value
    return custom_size("%.1f%s", float(size), 1024.0, BINARY_ABBRS)


def _bytes_or_zero(size: str) -> int:
    try:
        return ram_in_bytes(size)
    except ValueError:
        return 0


def get_available_capacity(total: str, used: str) -> str:
    """Return ``total - used`` humanised, whatever units the inputs use."""
    return bytes_size(float(_bytes_or_zero(total) - _bytes_or_zero(used)))


def get_used_percentage(total: str, used: str) -> float:
    """Return ``used`` as a percentage of ``total``."""
    total_bytes = float(_bytes_or_zero(total))
    used_bytes = float(_bytes_or_zero(used))
    if total_bytes == 0:
        if used_bytes == 0:
            return math.nan
        return math.copysign(math.inf, used_bytes)
    return (used_bytes / total_bytes) * 100


def color_string_on_status(string_to_color: str) -> str:
    """Colour a status green when it reads as good, red otherwise."""
    if string_to_color.lower() in _GREEN_STATUSES:
        return color_text(string_to_color, Color.GREEN)
    return color_text(string_to_color, Color.RED)


def check_error(err: BaseException | None) -> None:
    """Report ``err`` on stderr and exit with status 1; do nothing without one."""
    if err is None:
        return
    if not isinstance(err, asyncio.CancelledError):
        sys.stderr.write(f"An error occurred: {err}\n")
    raise SystemExit(1)


def check_err(err: BaseException | None, handle_err: Callable[[str], Any]) -> None:
    """Pass the message of ``err`` to ``handle_err`` when there is an error."""
    if err is None:
        return
    handle_err(str(err))