"""
Ingestion-time normalization of the loosely-typed booking fields.

Stored bookings carry seats either as a list of labels or as one
comma-joined string, and show dates either as timestamps or as strings.
Both are reduced to one canonical form right after reading from the store.
"""
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional


def normalize_seats(value: Any) -> List[str]:
    """Return seat labels as a list, whatever the stored shape."""
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(v) for v in value if v is not None]
    else:
        return []
    return [p.strip() for p in parts if p.strip()]


def join_seats(value: Any) -> str:
    return ", ".join(normalize_seats(value))


def normalize_show_date(value: Any) -> Optional[date]:
    """
    Reduce a stored show date to a calendar date.

    Accepts datetimes (store timestamps), dates, ISO-8601 strings and the
    `{"seconds": ..., "nanoseconds": ...}` shape of exported timestamps.
    Returns None for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, dict) and "seconds" in value:
        try:
            return datetime.fromtimestamp(float(value["seconds"]), tz=timezone.utc).date()
        except (TypeError, ValueError, OverflowError):
            return None
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def normalize_price(value: Any) -> Decimal:
    """Prices are stored as plain numbers; anything unreadable counts as zero."""
    if isinstance(value, bool) or value is None:
        return Decimal("0")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    # NaN and infinities count as unreadable
    return price if price.is_finite() else Decimal("0")


def format_price(value: Decimal) -> str:
    return f"{value:.2f}"
