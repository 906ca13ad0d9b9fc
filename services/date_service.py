"""
Date normalization for spreadsheet and form input.

Every date that enters the system (plan dates, customs dates, DET expiry)
is reduced to an ISO ``YYYY-MM-DD`` string. Unparseable input becomes ``""``
and is treated as "unknown" by callers, never as an error.
"""
import math
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union


# Spreadsheet serial 25569 is 1970-01-01
SERIAL_EPOCH_OFFSET = 25569
_EPOCH = date(1970, 1, 1)

_LEADING_INT = re.compile(r"^\s*(\d+)")
_SERIAL_STRING = re.compile(r"^\d{5,}$")

_TEXT_FORMATS = [
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y.%m.%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%Y%m%d",
]

DateInput = Union[str, int, float, date, datetime, None]


def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def _from_serial(serial: float) -> str:
    try:
        days = math.floor(serial - SERIAL_EPOCH_OFFSET)
        return (_EPOCH + timedelta(days=days)).isoformat()
    except (OverflowError, ValueError):
        return ""


def _from_day_month_year(text: str) -> Optional[str]:
    parts = text.split("/")
    if len(parts) != 3:
        return None

    d, m, y = (_leading_int(p) for p in parts)
    if d is None or m is None or y is None:
        return None
    if y < 100:
        y += 2000

    try:
        return date(y, m, d).isoformat()
    except ValueError:
        return None


def _from_text(text: str) -> str:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass

    for fmt in _TEXT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return ""


def normalize_date(value: DateInput) -> str:
    """
    Convert heterogeneous date input to ``YYYY-MM-DD``.

    Accepts spreadsheet serials (number or 5+ digit string), ``D/M/Y`` with
    optional 2-digit year, ISO dates, ``date``/``datetime`` objects and a few
    free-text layouts. Returns ``""`` when nothing matches.
    """
    if value is None or isinstance(value, bool):
        return ""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return ""
        return _from_serial(value)

    text = str(value).strip()
    if not text:
        return ""

    if "/" in text:
        parsed = _from_day_month_year(text)
        if parsed is not None:
            return parsed

    if len(text) == 10 and text[4] == "-" and text[7] == "-":
        return text

    if _SERIAL_STRING.match(text):
        return _from_serial(int(text))

    return _from_text(text)


def display_date(iso_date: Optional[str]) -> str:
    """``YYYY-MM-DD`` -> ``DD/MM/YYYY`` for printed forms and work orders."""
    if not iso_date:
        return "-"
    parts = iso_date.split("-")
    if len(parts) != 3:
        return iso_date
    return f"{parts[2]}/{parts[1]}/{parts[0]}"


def parse_day_month_year(text: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """
    Split a work-order/tally date into ``(year, month, day)``.

    The separator decides the token order: ``/`` means ``D/M/Y``, ``-`` means
    ``Y-M-D``. Returns None when the text does not hold three numeric parts.
    """
    if not text:
        return None
    text = text.strip()
    if "/" in text:
        parts = text.split("/")
        order = (2, 1, 0)
    else:
        parts = text.split("-")
        order = (0, 1, 2)

    if len(parts) != 3:
        return None

    numbers = [_leading_int(p) for p in parts]
    if any(n is None for n in numbers):
        return None
    y, m, d = (numbers[i] for i in order)
    return y, m, d  # type: ignore[return-value]


def iso_from_parts(parts: Tuple[int, int, int]) -> str:
    y, m, d = parts
    return f"{y:04d}-{m:02d}-{d:02d}"
