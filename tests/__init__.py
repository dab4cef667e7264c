# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Catalog API:
# - test_utils.py: UUID and number parsing helpers
# - test_models.py: Pydantic model shapes and serialization
# - test_photo_store.py: Photo file naming, writing and removal
# - test_shirt_repository.py: Record store queries (mocked Supabase)
# - test_supabase_client.py: Client construction and startup checks
# - test_catalog_service.py: Record/photo consistency rules
# - test_catalog_api.py: HTTP endpoints end to end (in-memory store)
#
# Run tests with: pytest
# =============================================================================
