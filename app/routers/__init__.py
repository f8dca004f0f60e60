# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - households.py: Household CRUD, headship transfer, roster export
# - members.py: Family member CRUD and search
# - worship.py: Worship history endpoints
# - dashboard.py: Dashboard statistics
# - divisions.py: Province/ward reference data
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import households
from . import members
from . import worship
from . import dashboard
from . import divisions

__all__ = [
    "health",
    "households",
    "members",
    "worship",
    "dashboard",
    "divisions",
]
