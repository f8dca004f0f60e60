# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import date, datetime, timezone
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        household_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        household_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def short_id(value: str | UUID, length: int = 8) -> str:
    """First characters of an ID, used in fallback display names."""
    return normalize_uuid(value)[:length]


# =============================================================================
# Date Utilities
# =============================================================================

def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse a Supabase timestamp (ISO 8601, possibly with a trailing Z).

    Naive values are assumed to be UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def today_iso(today: date | None = None) -> str:
    """Today's date as YYYY-MM-DD, matching how worship_date is stored."""
    return (today or date.today()).isoformat()
