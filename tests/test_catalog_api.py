# =============================================================================
# tests/test_catalog_api.py - Catalog API Tests
# =============================================================================
# End-to-end tests through FastAPI's TestClient. The CatalogService is
# injected with an in-memory record store; photos go to the same temporary
# uploads directory the app serves under /uploads.
# =============================================================================

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.dependencies import get_catalog_service
from app.main import app, run
from core.services.catalog_service import CatalogService
from core.services.photo_store import PhotoStore
from lib.supabase_client import SupabaseClientError


@pytest.fixture
def api_photo_store():
    store = PhotoStore(settings.uploads_path, url_path=settings.UPLOADS_URL_PATH)
    store.ensure_directory()
    return store


@pytest.fixture
def client(repository, api_photo_store):
    """TestClient wired to an in-memory catalog."""
    service = CatalogService(repository, api_photo_store)
    app.dependency_overrides[get_catalog_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client, png_bytes=None, **fields):
    data = {"brand": "Adidas", "size": "M", "price": "24999"}
    data.update(fields)
    files = {"photo": ("front.png", png_bytes, "image/png")} if png_bytes else None
    return client.post("/catalog", data=data, files=files)


# =============================================================================
# Create
# =============================================================================

class TestCreateEndpoint:
    """Tests for POST /catalog."""

    def test_create_without_photo(self, client):
        response = _create(client)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"id", "brand", "size", "price", "photoRef"}
        assert body["photoRef"] == ""
        assert body["price"] == 24999

        fetched = client.get(f"/catalog/{body['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == body

    def test_create_with_photo(self, client, png_bytes):
        response = _create(client, png_bytes)

        assert response.status_code == 201
        photo_ref = response.json()["photoRef"]
        assert photo_ref.startswith("http://testserver/uploads/")
        assert photo_ref.endswith(".png")

        photo = client.get(photo_ref)
        assert photo.status_code == 200
        assert photo.content == png_bytes

    def test_missing_field(self, client):
        response = client.post("/catalog", data={"brand": "Adidas", "price": "10"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_non_numeric_price(self, client):
        response = _create(client, price="cheap")

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "price"}

    @pytest.mark.parametrize("price", ["1_000", "1e3", "١٢"])
    def test_price_must_be_plain_decimal(self, client, price):
        response = _create(client, price=price)

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "price"}

    def test_store_failure_is_400(self, client, repository):
        repository.fail_on.add("create")

        response = _create(client)

        assert response.status_code == 400
        assert response.json()["code"] == "SHIRT_CREATE_FAILED"

    def test_photo_too_large(self, client, png_bytes):
        with patch.object(settings, "MAX_PHOTO_SIZE_MB", 0):
            response = _create(client, png_bytes)

        assert response.status_code == 413
        assert response.json()["code"] == "PHOTO_TOO_LARGE"


# =============================================================================
# Read / List
# =============================================================================

class TestGetEndpoint:
    """Tests for GET /catalog/{id}."""

    def test_invalid_id(self, client):
        response = client.get("/catalog/123")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_not_found(self, client):
        response = client.get(f"/catalog/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "SHIRT_NOT_FOUND"


class TestListEndpoint:
    """Tests for GET /catalog."""

    @pytest.fixture
    def five_ids(self, client):
        return [_create(client, brand=f"Brand {i}").json()["id"] for i in range(5)]

    def test_list_all(self, client, five_ids):
        body = client.get("/catalog").json()

        assert body["paginated"] is False
        assert body["total"] == 5
        assert [s["id"] for s in body["data"]] == five_ids
        assert "total_pages" not in body

    def test_first_page(self, client, five_ids):
        body = client.get("/catalog", params={"offset": 0, "limit": 2}).json()

        assert body["paginated"] is True
        assert body["total"] == 5
        assert body["total_pages"] == 3
        assert body["page"] == 1
        assert body["per_page"] == 2
        assert [s["id"] for s in body["data"]] == five_ids[:2]

    def test_page_per_page(self, client, five_ids):
        body = client.get("/catalog", params={"page": 3, "per_page": 2}).json()

        assert body["page"] == 3
        assert [s["id"] for s in body["data"]] == five_ids[4:]

    def test_bad_window_returns_everything(self, client, five_ids):
        response = client.get("/catalog", params={"offset": "x", "limit": "2"})

        assert response.status_code == 200
        assert response.json()["paginated"] is False
        assert len(response.json()["data"]) == 5

    def test_store_error_is_500(self, client, repository):
        repository.fail_on.add("list")

        response = client.get("/catalog")

        assert response.status_code == 500
        assert response.json()["code"] == "RECORD_STORE_ERROR"


# =============================================================================
# Update
# =============================================================================

class TestUpdateEndpoint:
    """Tests for PUT /catalog/{id}."""

    def test_update_fields(self, client):
        shirt = _create(client).json()

        response = client.put(f"/catalog/{shirt['id']}", data={"size": "XL", "price": ""})

        assert response.status_code == 200
        assert response.json()["size"] == "XL"
        assert response.json()["price"] == shirt["price"]

    def test_replace_photo(self, client, png_bytes):
        shirt = _create(client, png_bytes).json()
        old_ref = shirt["photoRef"]

        response = client.put(
            f"/catalog/{shirt['id']}",
            files={"photo": ("back.jpg", b"new-photo", "image/jpeg")},
        )

        assert response.status_code == 200
        new_ref = response.json()["photoRef"]
        assert new_ref.endswith(".jpg")
        assert client.get(old_ref).status_code == 404
        assert client.get(new_ref).content == b"new-photo"

    def test_update_not_found(self, client):
        response = client.put(f"/catalog/{uuid4()}", data={"brand": "Puma"})
        assert response.status_code == 404

    def test_update_invalid_id(self, client):
        response = client.put("/catalog/abc", data={"brand": "Puma"})
        assert response.status_code == 400

    def test_update_bad_price(self, client):
        shirt = _create(client).json()

        response = client.put(f"/catalog/{shirt['id']}", data={"price": "-10"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


# =============================================================================
# Delete
# =============================================================================

class TestDeleteEndpoint:
    """Tests for DELETE /catalog/{id}."""

    def test_delete_removes_record_and_photo(self, client, png_bytes):
        shirt = _create(client, png_bytes).json()

        response = client.delete(f"/catalog/{shirt['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/catalog/{shirt['id']}").status_code == 404
        assert client.get(shirt["photoRef"]).status_code == 404

    def test_delete_twice(self, client):
        shirt = _create(client).json()
        client.delete(f"/catalog/{shirt['id']}")

        assert client.delete(f"/catalog/{shirt['id']}").status_code == 404
        assert client.delete(f"/catalog/{shirt['id']}").status_code == 404

    def test_delete_invalid_id(self, client):
        response = client.delete("/catalog/not-an-id")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"


# =============================================================================
# Misc
# =============================================================================

class TestHealthEndpoints:
    """Tests for root and health routes."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "Catalog API running"

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["environment"] == settings.ENVIRONMENT

    def test_ready(self, client):
        body = client.get("/health/ready").json()
        assert body["status"] == "ready"
        assert body["checks"] == {"record_store": "healthy", "photo_store": "healthy"}

    def test_degraded(self, client, repository):
        repository.fail_on.add("ping")
        assert client.get("/health/ready").json()["status"] == "degraded"

    def test_live(self, client):
        assert client.get("/health/live").json()["status"] == "alive"

    def test_missing_upload_is_404(self, client):
        assert client.get("/uploads/does-not-exist.png").status_code == 404


class TestStartup:
    """Tests for the application lifespan."""

    @pytest.fixture(autouse=True)
    def reset_state(self):
        app.state.catalog_service = None
        yield
        app.state.catalog_service = None

    def test_startup_fails_without_record_store(self):
        error = SupabaseClientError("unreachable", code="TABLE_UNREACHABLE")

        with patch("app.main.connect", side_effect=error):
            with pytest.raises(Exception, match="unreachable"):
                with TestClient(app):
                    pass

    def test_startup_builds_catalog_service(self):
        with patch("app.main.connect", return_value=MagicMock()) as mock_connect:
            with TestClient(app):
                service = app.state.catalog_service

        mock_connect.assert_called_once_with(
            settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY, settings.SHIRTS_TABLE
        )
        assert isinstance(service, CatalogService)
        assert service.photo_store.directory == settings.uploads_path


class TestServerEntryPoint:
    """Tests for the uvicorn launcher."""

    def test_run_uses_configured_host_and_port(self):
        with patch.object(settings, "API_HOST", "127.0.0.1"), \
                patch.object(settings, "API_PORT", 9123), \
                patch("app.main.uvicorn.run") as mock_run:
            run()

        mock_run.assert_called_once_with(
            "app.main:app", host="127.0.0.1", port=9123, reload=settings.DEBUG
        )
