# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - shirt.py: Shirt record, create/update inputs, photo payloads, list pages
#
# These models define the "contract" between API and clients.
# =============================================================================

from .shirt import (
    CatalogPage,
    PhotoUpload,
    Shirt,
    ShirtCreate,
    ShirtUpdate,
)

__all__ = [
    "CatalogPage",
    "PhotoUpload",
    "Shirt",
    "ShirtCreate",
    "ShirtUpdate",
]
