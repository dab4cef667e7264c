# =============================================================================
# core/services/catalog_service.py - Catalog Business Logic
# =============================================================================
# Orchestrates the shirt record store and the photo store.
#
# The one rule enforced here: a record's photoRef always points at a file
# that exists. Photo writes happen before the record changes; old photos are
# removed only after the record no longer references them. A failed removal
# leaves an unreferenced file behind, never a record pointing at nothing.
# =============================================================================

import logging
import math
from typing import Any
from uuid import UUID

from app.exceptions import (
    CatalogException,
    PhotoStorageError,
    ShirtNotFoundError,
    ShirtValidationError,
)
from core.models.shirt import CatalogPage, PhotoUpload, Shirt, ShirtCreate, ShirtUpdate
from core.services.photo_store import PhotoStore
from core.services.shirt_repository import ShirtRepository
from lib.utils import parse_int, parse_number

logger = logging.getLogger(__name__)


# =============================================================================
# Field Coercion
# =============================================================================

def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_price(value: Any) -> float:
    price = parse_number(value)
    if price is None:
        raise ShirtValidationError("price", "must be a number")
    if price < 0:
        raise ShirtValidationError("price", "must not be negative")
    return price


def build_shirt_create(fields: dict[str, Any]) -> ShirtCreate:
    """
    Coerce form fields into a ShirtCreate.

    brand, size and price are required; price must parse as a
    non-negative number.

    Raises:
        ShirtValidationError: If a field is missing or malformed
    """
    brand = _clean_text(fields.get("brand"))
    if not brand:
        raise ShirtValidationError("brand", "is required")

    size = _clean_text(fields.get("size"))
    if not size:
        raise ShirtValidationError("size", "is required")

    raw_price = fields.get("price")
    if _clean_text(raw_price) == "":
        raise ShirtValidationError("price", "is required")

    return ShirtCreate(brand=brand, size=size, price=_coerce_price(raw_price))


def build_shirt_update(fields: dict[str, Any]) -> ShirtUpdate:
    """
    Coerce form fields into a ShirtUpdate.

    Missing or blank fields are left out of the update.

    Raises:
        ShirtValidationError: If price is present but malformed
    """
    changes: dict[str, Any] = {}

    for name in ("brand", "size"):
        value = _clean_text(fields.get(name))
        if value:
            changes[name] = value

    raw_price = fields.get("price")
    if _clean_text(raw_price) != "":
        changes["price"] = _coerce_price(raw_price)

    return ShirtUpdate(**changes)


def resolve_window(
    offset: Any = None,
    limit: Any = None,
    page: Any = None,
    per_page: Any = None,
) -> tuple[int, int] | None:
    """
    Work out the (offset, limit) window a list request asked for.

    offset/limit win when both are given; otherwise 1-indexed page/per_page
    are used. Anything missing, non-numeric, negative or with a limit of
    zero means no window.

    Example:
        resolve_window("0", "2")               # (0, 2)
        resolve_window(page="2", per_page="2") # (2, 2)
        resolve_window("abc", "2")             # None
    """
    offset_value = parse_int(offset)
    limit_value = parse_int(limit)

    if offset is None and limit is None:
        page_value = parse_int(page)
        per_page_value = parse_int(per_page)
        if page_value is None or per_page_value is None or page_value < 1:
            return None
        offset_value = (page_value - 1) * per_page_value
        limit_value = per_page_value

    if offset_value is None or limit_value is None:
        return None
    if offset_value < 0 or limit_value <= 0:
        return None
    return offset_value, limit_value


# =============================================================================
# Catalog Service
# =============================================================================

class CatalogService:
    """
    Service for catalog operations.

    Provides a clean interface between API routes, the record store and
    the photo store. Both stores are handed in at construction.

    Example:
        service = CatalogService(ShirtRepository(client), PhotoStore(Path("uploads")))
        shirt = service.create_one(
            {"brand": "Nike", "size": "M", "price": "30"},
            PhotoUpload(content=b"...", filename="front.png"),
            base_url="http://localhost:8000/",
        )
    """

    def __init__(self, repository: ShirtRepository, photo_store: PhotoStore):
        self.repository = repository
        self.photo_store = photo_store

    # -------------------------------------------------------------------------
    # Photo Helpers
    # -------------------------------------------------------------------------

    def _store_photo(self, photo: PhotoUpload, base_url: str) -> tuple[str, str]:
        """Write a photo and return (stored name, photoRef URL)."""
        name = self.photo_store.save(photo.content, photo.filename)
        return name, self.photo_store.build_url(base_url, name)

    def _discard_photo(self, name: str) -> None:
        """Remove a photo, logging instead of raising on failure."""
        try:
            self.photo_store.delete(name)
        except PhotoStorageError as e:
            logger.warning(f"Could not remove photo {name}, leaving it behind: {e.message}")

    def _discard_photo_ref(self, photo_ref: str) -> None:
        """Remove the file behind a photoRef if this store owns it."""
        name = self.photo_store.name_from_ref(photo_ref)
        if name is None:
            if photo_ref:
                logger.debug(f"Not removing external photo: {photo_ref}")
            return
        self._discard_photo(name)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def list_catalog(
        self,
        offset: Any = None,
        limit: Any = None,
        page: Any = None,
        per_page: Any = None,
    ) -> CatalogPage:
        """
        List the catalog, paginated only when a valid window was requested.

        Returns:
            CatalogPage; page/per_page/total_pages are set only when paginated

        Raises:
            RecordStoreError: If the record store fails
        """
        window = resolve_window(offset, limit, page, per_page)

        if window is None:
            shirts, total = self.repository.list()
            return CatalogPage(total=total, paginated=False, data=shirts)

        window_offset, window_limit = window
        shirts, total = self.repository.list(offset=window_offset, limit=window_limit)

        return CatalogPage(
            total=total,
            paginated=True,
            page=window_offset // window_limit + 1,
            per_page=window_limit,
            total_pages=math.ceil(total / window_limit),
            data=shirts,
        )

    def get_one(self, shirt_id: str | UUID) -> Shirt:
        """
        Get a shirt by ID.

        Raises:
            InvalidShirtIdError: If the ID is malformed
            ShirtNotFoundError: If no shirt has this ID
        """
        shirt = self.repository.get(shirt_id)
        if shirt is None:
            raise ShirtNotFoundError(str(shirt_id))
        return shirt

    def create_one(
        self,
        fields: dict[str, Any],
        photo: PhotoUpload | None = None,
        base_url: str = "",
    ) -> Shirt:
        """
        Create a shirt, saving its photo first when one is attached.

        If the photo can't be saved no record is created. If the record
        can't be created the saved photo is removed again.

        Raises:
            ShirtValidationError: If fields are missing or malformed
            PhotoStorageError: If the photo can't be written
            RecordStoreError: If the insert fails
        """
        data = build_shirt_create(fields)

        photo_name = None
        if photo is not None:
            photo_name, data.photo_ref = self._store_photo(photo, base_url)

        try:
            return self.repository.create(data)
        except CatalogException:
            if photo_name:
                self._discard_photo(photo_name)
            raise

    def update_one(
        self,
        shirt_id: str | UUID,
        fields: dict[str, Any],
        photo: PhotoUpload | None = None,
        base_url: str = "",
    ) -> Shirt:
        """
        Update a shirt, replacing its photo when a new one is attached.

        The new photo is written before anything else changes. The old one
        is removed only after the record points at the new photo.

        Raises:
            InvalidShirtIdError: If the ID is malformed
            ShirtNotFoundError: If no shirt has this ID
            ShirtValidationError: If price is malformed
            PhotoStorageError: If the new photo can't be written
            RecordStoreError: If the update fails
        """
        existing = self.get_one(shirt_id)
        changes = build_shirt_update(fields)

        photo_name = None
        if photo is not None:
            photo_name, changes.photo_ref = self._store_photo(photo, base_url)

        try:
            updated = self.repository.update(existing.id, changes)
        except CatalogException:
            if photo_name:
                self._discard_photo(photo_name)
            raise

        if updated is None:
            # Deleted by a concurrent request between the read and the write
            if photo_name:
                self._discard_photo(photo_name)
            raise ShirtNotFoundError(str(shirt_id))

        if photo_name and existing.photo_ref and existing.photo_ref != updated.photo_ref:
            self._discard_photo_ref(existing.photo_ref)

        return updated

    def delete_one(self, shirt_id: str | UUID) -> None:
        """
        Delete a shirt and, best effort, its photo.

        Succeeds once the record is gone even if the photo can't be removed.

        Raises:
            InvalidShirtIdError: If the ID is malformed
            ShirtNotFoundError: If no shirt has this ID
            RecordStoreError: If the delete fails
        """
        deleted = self.repository.delete(shirt_id)
        if deleted is None:
            raise ShirtNotFoundError(str(shirt_id))

        if deleted.photo_ref:
            self._discard_photo_ref(deleted.photo_ref)

    def is_ready(self) -> dict[str, bool]:
        """Report whether each backing store is usable."""
        return {
            "record_store": self.repository.ping(),
            "photo_store": self.photo_store.directory.is_dir(),
        }
