"""
Wire value normalization applied at the adapter boundary.

Conversion table:

=========================  ======================================
wire value                 canonical form
=========================  ======================================
timestamp ``str``          unchanged
``{"seconds": s, ...}``    ``YYYY-MM-DDTHH:MM:SS.mmmZ`` (UTC)
``datetime``               same ISO form
missing timestamp          ``""``
byte field ``str``         unchanged
``bytes`` / list of ints   lowercase hex
missing byte field         ``""``
=========================  ======================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def iso_utc(moment: datetime) -> str:
    """Millisecond ISO-8601 with a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return iso_utc(datetime.now(timezone.utc))


def normalize_timestamp(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return iso_utc(value)
    if isinstance(value, dict) and "seconds" in value:
        try:
            seconds = int(value["seconds"])
        except (TypeError, ValueError):
            return ""
        return iso_utc(datetime.fromtimestamp(seconds, tz=timezone.utc))
    return ""


def normalize_bytes(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, (list, tuple)) and all(isinstance(item, int) for item in value):
        try:
            return bytes(value).hex()
        except ValueError:
            return ""
    return ""


def to_int(value: Any, *, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="ignore")
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def to_amount(value: Any) -> str:
    """Decimal string for an amount, ``"0"`` when absent."""
    if value is None or value == "":
        return "0"
    return str(value)
