# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - astrology.py: Can chi, nominal age, ruling star and luck-cycle lookups
# - vietnam_data.py: Province/ward reference data and address formatting
# - filters.py: In-memory filtering and sorting of household/member rows
# - demo_data.py: Reproducible demo household generator
# - utils.py: Shared utilities (UUID normalization, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "normalize_uuid",
]
