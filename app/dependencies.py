# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The CatalogService is built once during application startup (see
# app/main.py lifespan) and kept on app.state.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from core.services.catalog_service import CatalogService


def get_catalog_service(request: Request) -> CatalogService:
    """
    Get the CatalogService built at startup.
    """
    return request.app.state.catalog_service


# Type alias for dependency injection
CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]
