# =============================================================================
# core/services/ownership.py - Household Ownership Checks
# =============================================================================
# Every household belongs to the user in its created_by column. Services use
# the service-role client, so ownership is checked here before any read or
# write that touches a household, its members or its worship history.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import HouseholdNotFoundError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

HOUSEHOLDS_TABLE = "households"


def fetch_owned_household(
    household_id: str | UUID,
    user_id: str | UUID,
    columns: str = "*",
) -> dict[str, Any] | None:
    """Household row if it exists and belongs to user_id, else None."""
    return SupabaseClient.fetch_single(
        HOUSEHOLDS_TABLE,
        household_id,
        columns=columns,
        filters={"created_by": user_id},
    )


def require_household(
    household_id: str | UUID,
    user_id: str | UUID,
    columns: str = "*",
) -> dict[str, Any]:
    """
    Household row owned by user_id.

    Raises:
        HouseholdNotFoundError: If missing or owned by someone else
    """
    household = fetch_owned_household(household_id, user_id, columns=columns)
    if not household:
        # Same error for "missing" and "not yours" so other users' IDs stay hidden
        logger.debug(f"Household {household_id} not found for user {user_id}")
        raise HouseholdNotFoundError(str(household_id))
    return household
