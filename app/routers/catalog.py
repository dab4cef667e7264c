# =============================================================================
# app/routers/catalog.py - Shirt Catalog Endpoints
# =============================================================================
# CRUD over the shirt catalog. Create and update accept multipart form data
# with an optional "photo" file field.
#
# Handlers are plain functions so FastAPI runs each request in its
# threadpool; the record store client is synchronous.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Path, Query, Request, Response, UploadFile

from app.config import settings
from app.dependencies import CatalogDep
from app.exceptions import (
    PhotoStorageError,
    PhotoTooLargeError,
    RecordStoreError,
    ShirtWriteError,
)
from core.models.shirt import PhotoUpload

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Helper Functions
# =============================================================================

def _read_photo(photo: UploadFile | None) -> PhotoUpload | None:
    """Read an uploaded photo, or None when the field was empty."""
    if photo is None:
        return None

    content = photo.file.read()
    filename = photo.filename or ""

    # Browsers send an empty part when no file was picked
    if not content and not filename:
        return None

    if len(content) > settings.max_photo_size_bytes:
        raise PhotoTooLargeError(len(content) / (1024 * 1024), settings.MAX_PHOTO_SIZE_MB)

    return PhotoUpload(content=content, filename=filename)


def _form_fields(
    brand: str | None,
    size: str | None,
    price: str | None,
) -> dict[str, str | None]:
    return {"brand": brand, "size": size, "price": price}


# =============================================================================
# Endpoints
# =============================================================================

@router.get("")
def list_catalog(
    catalog: CatalogDep,
    offset: Annotated[str | None, Query(description="Rows to skip (0-indexed)")] = None,
    limit: Annotated[str | None, Query(description="Rows per page")] = None,
    page: Annotated[str | None, Query(description="Page number (1-indexed)")] = None,
    per_page: Annotated[str | None, Query(description="Rows per page")] = None,
):
    """
    List the catalog.

    Without a window the whole catalog is returned with paginated=false.
    Pass offset+limit (or page+per_page) to get one page plus total_pages.
    Invalid window values fall back to the full listing.
    """
    result = catalog.list_catalog(offset=offset, limit=limit, page=page, per_page=per_page)
    return result.to_response()


@router.get("/{shirt_id}")
def get_shirt(
    shirt_id: Annotated[str, Path(description="Shirt UUID")],
    catalog: CatalogDep,
):
    """
    Get one shirt.

    Returns 400 for a malformed ID and 404 when no shirt has it.
    """
    return catalog.get_one(shirt_id).to_response()


@router.post("", status_code=201)
def create_shirt(
    request: Request,
    catalog: CatalogDep,
    brand: Annotated[str | None, Form()] = None,
    size: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    photo: Annotated[UploadFile | None, File(description="Optional shirt photo")] = None,
):
    """
    Create a shirt.

    brand, size and price are required. When a photo is attached it is
    stored first and the shirt's photoRef points at it.
    """
    upload = _read_photo(photo)

    try:
        shirt = catalog.create_one(
            _form_fields(brand, size, price),
            upload,
            base_url=str(request.base_url),
        )
    except (PhotoStorageError, RecordStoreError) as e:
        logger.error(f"Shirt creation failed: {e.message}")
        raise ShirtWriteError("create") from e

    return shirt.to_response()


@router.put("/{shirt_id}")
def update_shirt(
    request: Request,
    shirt_id: Annotated[str, Path(description="Shirt UUID")],
    catalog: CatalogDep,
    brand: Annotated[str | None, Form()] = None,
    size: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    photo: Annotated[UploadFile | None, File(description="Optional replacement photo")] = None,
):
    """
    Update a shirt.

    Any subset of brand, size and price may be sent; blank fields are
    ignored. A new photo replaces the old one, which is then removed.
    """
    upload = _read_photo(photo)

    try:
        shirt = catalog.update_one(
            shirt_id,
            _form_fields(brand, size, price),
            upload,
            base_url=str(request.base_url),
        )
    except (PhotoStorageError, RecordStoreError) as e:
        logger.error(f"Shirt update failed for {shirt_id}: {e.message}")
        raise ShirtWriteError("update") from e

    return shirt.to_response()


@router.delete("/{shirt_id}", status_code=204)
def delete_shirt(
    shirt_id: Annotated[str, Path(description="Shirt UUID")],
    catalog: CatalogDep,
):
    """
    Delete a shirt and its stored photo.
    """
    catalog.delete_one(shirt_id)
    return Response(status_code=204)
