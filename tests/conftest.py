# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides an in-memory record store so Supabase is never contacted
# - Provides photo stores backed by temporary directories
# =============================================================================

import os
import tempfile

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="catalog-uploads-")

from uuid import uuid4

import pytest

from app.exceptions import RecordStoreError
from core.models.shirt import Shirt, ShirtCreate, ShirtUpdate
from core.services.catalog_service import CatalogService
from core.services.photo_store import PhotoStore
from core.services.shirt_repository import ShirtRepository


# =============================================================================
# In-Memory Record Store
# =============================================================================

class InMemoryShirtRepository(ShirtRepository):
    """
    ShirtRepository keeping rows in a dict.

    Insertion order is preserved, IDs are validated exactly like the
    Supabase-backed repository.
    """

    def __init__(self):
        super().__init__(client=None, table="shirts")
        self.rows: dict[str, dict] = {}
        self.fail_on: set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RecordStoreError(operation)

    def create(self, data: ShirtCreate) -> Shirt:
        self._check("create")
        row = {"id": str(uuid4()), **data.model_dump()}
        self.rows[row["id"]] = row
        return Shirt.from_db_row(row)

    def get(self, shirt_id):
        shirt_id = self.validate_id(shirt_id)
        self._check("get")
        row = self.rows.get(shirt_id)
        return Shirt.from_db_row(row) if row else None

    def count(self) -> int:
        return len(self.rows)

    def list(self, offset=None, limit=None):
        self._check("list")
        shirts = [Shirt.from_db_row(row) for row in self.rows.values()]
        if offset is None or limit is None:
            return shirts, len(shirts)
        return shirts[offset:offset + limit], len(shirts)

    def update(self, shirt_id, changes: ShirtUpdate):
        shirt_id = self.validate_id(shirt_id)
        self._check("update")
        row = self.rows.get(shirt_id)
        if row is None:
            return None
        row.update(changes.changes())
        return Shirt.from_db_row(row)

    def delete(self, shirt_id):
        shirt_id = self.validate_id(shirt_id)
        self._check("delete")
        row = self.rows.pop(shirt_id, None)
        return Shirt.from_db_row(row) if row else None

    def ping(self) -> bool:
        return "ping" not in self.fail_on


# =============================================================================
# Fixtures
# =============================================================================

BASE_URL = "http://testserver/"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def repository():
    """Empty in-memory record store."""
    return InMemoryShirtRepository()


@pytest.fixture
def photo_store(tmp_path):
    """Photo store writing to a fresh temporary directory."""
    store = PhotoStore(tmp_path / "uploads", url_path="/uploads")
    store.ensure_directory()
    return store


@pytest.fixture
def catalog_service(repository, photo_store):
    """CatalogService over the in-memory record store."""
    return CatalogService(repository, photo_store)


@pytest.fixture
def sample_fields():
    """Valid create form fields."""
    return {"brand": "Adidas", "size": "M", "price": "24999"}


@pytest.fixture
def png_bytes():
    """A few bytes standing in for a PNG photo."""
    return PNG_BYTES
