# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the registry's business logic:
# - models/: Pydantic schemas for households, members and worship events
# - services/: Supabase-backed operations, ownership checks, display fields
#
# Code in this package should NOT import from FastAPI routers.
# This keeps the logic testable and reusable from scripts.
# =============================================================================
