"""
Locale formatting for display and export (German conventions).

All number, currency and date rendering goes through this module so the
viewer, workbook and CSV outputs agree.
"""

from datetime import datetime, timezone
from typing import Optional, Union

Number = Union[int, float]

DECIMAL_SEPARATOR = ","
THOUSANDS_SEPARATOR = "."
CURRENCY_SYMBOL = "€"
DISPLAY_TIMESTAMP_FORMAT = "%d.%m.%Y, %H:%M:%S"
FILENAME_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"


def format_number(value: Number, min_digits: int = 0, max_digits: int = 2) -> str:
    """Format with German separators, e.g. 1234.5 -> '1.234,5'."""
    rendered = f"{abs(value):,.{max_digits}f}"
    integer_part, _, fraction = rendered.partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) < min_digits:
        fraction = fraction.ljust(min_digits, "0")
    integer_part = integer_part.replace(",", THOUSANDS_SEPARATOR)
    sign = "-" if value < 0 and (integer_part.strip("0.") or fraction.strip("0")) else ""
    return f"{sign}{integer_part}{DECIMAL_SEPARATOR + fraction if fraction else ''}"


def format_currency(amount: Optional[Number]) -> str:
    if amount is None:
        return "-"
    return f"{format_number(amount, min_digits=2, max_digits=2)} {CURRENCY_SYMBOL}"


def format_quantity(quantity: Optional[Number], unit: Optional[str] = None) -> str:
    if quantity is None:
        return "-"
    formatted = format_number(quantity)
    return f"{formatted} {unit}" if unit else formatted


def _parse_iso(timestamp: str) -> datetime:
    parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed


def format_timestamp(timestamp: Optional[str]) -> str:
    """Render an ISO-8601 processing timestamp in local time as 'DD.MM.YYYY, HH:MM:SS'."""
    if not timestamp:
        return ""
    try:
        return _parse_iso(timestamp).strftime(DISPLAY_TIMESTAMP_FORMAT)
    except ValueError:
        return timestamp


def format_filename_timestamp(moment: Optional[datetime] = None) -> str:
    """Compact UTC timestamp used in export file names."""
    moment = moment or datetime.now(timezone.utc)
    return moment.strftime(FILENAME_TIMESTAMP_FORMAT)
