# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for shirts and catalog pages
# - services/: Record store, photo store and the catalog service
#   that keeps the two consistent
#
# Code in this package should NOT define routes or touch request objects.
# This keeps the logic testable and reusable.
# =============================================================================
