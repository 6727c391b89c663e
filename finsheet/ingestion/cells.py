"""
Cell Coercion

Lenient conversions from raw cell values to amounts, labels and months.
Spreadsheets routinely hold blanks, placeholders and formatted numbers,
so nothing here raises: an unusable cell becomes 0 (amounts) or None
(labels and months) and the caller decides what that means.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser
from openpyxl.utils.datetime import CALENDAR_WINDOWS_1900, from_excel


# Exclusive bounds of a plausible Excel date serial (1954 .. 2064)
DEFAULT_SERIAL_RANGE = (20000.0, 60000.0)

# Missing date parts of a parsed string fall back to these (day 1 of the month)
_PARSE_DEFAULT = datetime(1900, 1, 1)

_NUMBER_NOISE = re.compile(r"[,\s\u00a0\u200e\u200f₪$€£%]")


def is_blank(value: Any) -> bool:
    """True for None and whitespace-only text."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _as_number(value: Any) -> Optional[float]:
    """Finite float for numeric cells and numeric-looking text, else None."""
    if isinstance(value, bool) or isinstance(value, (datetime, date)):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = _NUMBER_NOISE.sub("", value)
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_amount(value: Any) -> float:
    """Amount of a cell; blank and invalid cells are 0."""
    number = _as_number(value)
    return number if number is not None else 0.0


def coerce_label(value: Any) -> Optional[str]:
    """Trimmed label text, or None when the cell is blank."""
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def serial_to_date(
    serial: float,
    epoch: datetime = CALENDAR_WINDOWS_1900,
    serial_range: Optional[tuple[float, float]] = DEFAULT_SERIAL_RANGE,
) -> Optional[date]:
    """
    Calendar day of an Excel date serial.

    Serials outside serial_range (exclusive) are rejected; pass None
    to accept any serial the epoch can represent.
    """
    if serial_range is not None:
        low, high = serial_range
        if not low < serial < high:
            return None
    try:
        return from_excel(serial, epoch=epoch).date()
    except (ValueError, OverflowError, TypeError):
        return None


def coerce_month(
    value: Any,
    epoch: datetime = CALENDAR_WINDOWS_1900,
    serial_range: Optional[tuple[float, float]] = DEFAULT_SERIAL_RANGE,
) -> Optional[date]:
    """
    Calendar day a cell refers to, or None.

    Tries, in order: a real date cell, a numeric date serial (numbers and
    numeric text), then generic date-string parsing.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    number = _as_number(value)
    if number is not None:
        return serial_to_date(number, epoch, serial_range)

    if not isinstance(value, str):
        return None
    try:
        return date_parser.parse(value.strip(), default=_PARSE_DEFAULT).date()
    except (ValueError, OverflowError):
        return None
