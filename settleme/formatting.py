# -*- coding: utf-8 -*-
"""Cell formatting rules shared by every report.

All timestamps, durations and amounts pass through these helpers before they
become table cells, so the CSV and the PDF output always agree on content.
"""

from __future__ import annotations

import math
import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Tuple

import pandas as pd

from .errors import MalformedRequestError

# Spanish short date + short time ("19/10/26, 14:05")
DATETIME_FORMAT = "%d/%m/%y, %H:%M"

_CENT = Decimal("0.01")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def to_timestamp(value: Any) -> pd.Timestamp:
    """Parse a stored timestamp into a UTC-aware pandas Timestamp.

    Naive values are taken to be UTC, which is how the clock endpoint stores
    them (ISO strings with a trailing ``Z``).
    """
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def check_timezone(tz: str) -> str:
    """Return `tz` unchanged if pandas can convert to it."""
    try:
        pd.Timestamp(0, tz="UTC").tz_convert(tz)
    except (KeyError, ValueError, TypeError, OSError) as exc:
        raise MalformedRequestError(f"Invalid time zone {tz!r}") from exc
    return tz


def format_datetime(value: Any, tz: str = "UTC") -> str:
    if value is None:
        return ""
    return to_timestamp(value).tz_convert(tz).strftime(DATETIME_FORMAT)


def format_hours(hours: Optional[float]) -> str:
    """Two-decimal hours, empty while the entry has no clock-out."""
    if hours is None or (isinstance(hours, float) and math.isnan(hours)):
        return ""
    return f"{hours:.2f}"


def to_amount(value: Any) -> Optional[Decimal]:
    """Coerce a stored amount to Decimal; anything non-numeric is absent."""
    if value is None or isinstance(value, bool):
        return None
    numeric = pd.to_numeric(value, errors="coerce")
    if pd.isna(numeric) or not math.isfinite(float(numeric)):
        return None
    return Decimal(str(numeric))


def format_amount(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ""
    if not amount.is_finite():
        return ""
    return str(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def collapse_newlines(text: Optional[str]) -> str:
    """Replace each line break (CRLF, CR or LF) with a single space."""
    return _LINE_BREAK.sub(" ", text or "")


def collation_key(name: str) -> Tuple[str, str]:
    """Case-insensitive sort key that orders accented letters with their base.

    "alpha" < "Álvaro" < "Beta": the primary key drops diacritics, the
    secondary key keeps them so "Alvaro" still sorts before "Álvaro".
    """
    folded = unicodedata.normalize("NFC", name or "").casefold()
    base = "".join(
        c for c in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(c)
    )
    return base, folded
