# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Root banner and health check endpoints
# - catalog.py: Shirt catalog CRUD endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import catalog
from . import health

__all__ = [
    "catalog",
    "health",
]
