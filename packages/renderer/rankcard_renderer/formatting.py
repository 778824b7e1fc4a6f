"""Number, color and string formatting helpers used on rank cards."""

from __future__ import annotations

import math
import re
from datetime import datetime


_HEX_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_WORD_RE = re.compile(r"\w+")
_SPACE_RE = re.compile(r"\s")

UNITS = ("K", "M", "B", "T")
ELLIPSIS = "..."


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def _number_text(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def abbreviate(num: int | float | str | None) -> str:
    """Compact ``num`` with K/M/B/T suffixes and one decimal place.

    Rounding that reaches 1000 of a unit carries into the next unit, so
    ``999950`` renders as ``1M`` rather than ``1000K``.
    """
    if isinstance(num, str):
        try:
            num = int(num.strip())
        except ValueError:
            return "0"
    if not num or isinstance(num, bool) or not math.isfinite(num):
        return "0"

    dec_places = 10
    for i in range(len(UNITS) - 1, -1, -1):
        size = 10 ** ((i + 1) * 3)
        if size <= num:
            value = _round_half_up(num * dec_places / size) / dec_places
            if value == 1000 and i < len(UNITS) - 1:
                value = 1
                i += 1
            return f"{_number_text(value)}{UNITS[i]}"
    return _number_text(num)


to_abbrev = abbreviate


def validate_hex(value: object) -> bool:
    if not value or not isinstance(value, str):
        return False
    return bool(_HEX_RE.match(value))


def _expand_hex(value: str) -> str:
    value = value.replace("#", "")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return value


def format_hex(value: object, alt: str = "#000000") -> str:
    if not value or not isinstance(value, str):
        return alt
    value = _expand_hex(value)
    if len(value) != 6:
        return alt
    return f"#{value}"


def invert_color(value: object) -> str:
    if not validate_hex(value):
        return "#FFFFFF"
    digits = _expand_hex(value)  # type: ignore[arg-type]
    channels = [255 - int(digits[i : i + 2], 16) for i in (0, 2, 4)]
    return "#" + "".join(f"{c:02X}" for c in channels)


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    digits = _expand_hex(format_hex(value))
    return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]


def shorten(text: object, limit: int) -> str:
    """Character-count truncation; the result never exceeds ``limit``."""
    if not isinstance(text, str):
        return ""
    if len(text) <= limit:
        return text
    keep = max(limit - len(ELLIPSIS), 0)
    return text[:keep].strip() + ELLIPSIS


def get_acronym(name: object) -> str:
    if not name or not isinstance(name, str):
        return ""
    name = name.replace("'s ", " ")
    name = _WORD_RE.sub(lambda m: m.group(0)[0], name)
    return _SPACE_RE.sub("", name)


def format_time(ms: int | float | None) -> str:
    if not ms:
        return "00:00"
    total = int(ms // 1000)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    chunks = [days, hours, minutes, seconds]
    while len(chunks) > 2 and chunks[0] == 0:
        chunks.pop(0)
    return ":".join(f"{c:02d}" for c in chunks)


def clock_label(when: datetime | float | None = None) -> str:
    if when is None:
        when = datetime.now()
    elif not isinstance(when, datetime):
        when = datetime.fromtimestamp(when)
    return f"Today at {when.hour:02d}:{when.minute:02d}"
