"""Parsing helpers for receipt fields.

Every parser returns ``None`` when the value cannot be parsed so callers
decide how to treat malformed input: the API rejects it, the points
engine scores it as zero.
"""

from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal
from typing import Optional

# ASCII digits only; ``\d`` would also accept other Unicode digits
MONETARY_TOKEN = re.compile(r"[0-9]+\.[0-9]{2}")
_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_SHAPE = re.compile(r"[0-9]{2}:[0-9]{2}")
_DECIMAL_SHAPE = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def is_monetary_token(value: str | None) -> bool:
    """Return True for amounts like ``"35.35"``: no sign, exactly two decimals."""
    return bool(value) and MONETARY_TOKEN.fullmatch(value) is not None


def parse_amount(value: str | None) -> Optional[Decimal]:
    """Parse a non-negative plain decimal amount (no sign, no exponent).

    Unlike :func:`is_monetary_token` this accepts any decimal notation
    (``"1.5"``, ``"3"``) because item prices are only required to be
    numbers by the scoring rules. Surrounding whitespace is rejected.
    """
    if not value or not _DECIMAL_SHAPE.fullmatch(value):
        return None
    return Decimal(value)


def parse_purchase_date(value: str | None) -> Optional[dt.date]:
    """Parse a ``YYYY-MM-DD`` calendar date."""
    if not value or not _DATE_SHAPE.fullmatch(value):
        return None
    try:
        return dt.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_purchase_time(value: str | None) -> Optional[dt.time]:
    """Parse a 24-hour ``HH:MM`` time of day."""
    if not value or not _TIME_SHAPE.fullmatch(value):
        return None
    try:
        return dt.datetime.strptime(value, "%H:%M").time()
    except ValueError:
        return None
