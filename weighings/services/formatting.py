from __future__ import annotations

import re
from datetime import datetime, timezone as dt_timezone, tzinfo
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.utils import timezone

ONE_DECIMAL = Decimal("0.1")

NO_DELTA = "–"
POSITIVE_SIGN = "+"
ZERO_SIGN = "±"

_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9\-_.]")


def _to_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # Floats go through str() so 1.05 rounds as written and not as 1.0499...
    return Decimal(str(value))


def round_one_decimal(value: object) -> Decimal:
    """Round to tenths with ties going up: 0.05 -> 0.1 and -0.35 -> -0.3.

    Negative ties move toward zero.
    """
    number = _to_decimal(value)
    rounding = ROUND_HALF_DOWN if number < 0 else ROUND_HALF_UP
    return number.quantize(ONE_DECIMAL, rounding=rounding)


def _format_rounded(value: Decimal) -> str:
    if value.is_zero():
        value = abs(value)
    return f"{value:.1f}"


def format_weight(value: object) -> str:
    return _format_rounded(round_one_decimal(value))


def format_delta(value: object) -> str:
    """Render a delta as ``+1.2``, ``-1.2``, ``±0.0`` or a dash when there is no previous weighing."""
    if value is None:
        return NO_DELTA
    number = _to_decimal(value)
    formatted = _format_rounded(round_one_decimal(number))
    if number > 0:
        return f"{POSITIVE_SIGN}{formatted}"
    if number < 0:
        return formatted
    return f"{ZERO_SIGN}{formatted}"


def delta_tone(value: object) -> str:
    if value is None:
        return "none"
    number = _to_decimal(value)
    if number > 0:
        return "gain"
    if number < 0:
        return "loss"
    return "flat"


def parse_number(value: object) -> Decimal:
    """Parse a weight typed with a comma or a dot as decimal separator.

    Anything that is not a finite number becomes ``Decimal("0")``.
    """
    text = str(value if value is not None else "").strip().replace(",", ".", 1)
    if not text or "_" in text:
        return Decimal("0")
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not number.is_finite():
        return Decimal("0")
    return number


def resolve_display_timezone() -> tzinfo:
    tz_name = getattr(settings, "ANNCOR_DISPLAY_TIMEZONE", "") or getattr(settings, "TIME_ZONE", "UTC")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def _localize(value: datetime) -> datetime:
    tz = resolve_display_timezone()
    if timezone.is_naive(value):
        value = timezone.make_aware(value, dt_timezone.utc)
    return value.astimezone(tz)


def format_local_date(value: Optional[datetime]) -> str:
    """Short day/month/year date in the display timezone (``3/1/2025``)."""
    if value is None:
        return ""
    local = _localize(value)
    return f"{local.day}/{local.month}/{local.year}"


def format_local_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    local = _localize(value)
    return f"{format_local_date(local)}, {local:%H:%M:%S}"


def sanitize_filename(name: object) -> str:
    return _FILENAME_UNSAFE.sub("_", str(name))
