# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .catalog_service import CatalogService
from .photo_store import PhotoStore
from .shirt_repository import ShirtRepository

__all__ = [
    "CatalogService",
    "PhotoStore",
    "ShirtRepository",
]
