# =============================================================================
# core/models/shirt.py - Shirt Schemas
# =============================================================================
# These models define the API contract for catalog operations:
# - Shirt: A catalog record as stored and returned to clients
# - ShirtCreate: Coerced fields for inserting a new record
# - ShirtUpdate: Partial fields for updating a record
# - PhotoUpload: An incoming photo payload with its original filename
# - CatalogPage: The response for listing the catalog
#
# The JSON shape clients see is {id, brand, size, price, photoRef}.
# The record store column for the photo reference is `photo_ref`.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Shirt(BaseModel):
    """
    A shirt in the catalog.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "brand": "Adidas",
            "size": "M",
            "price": 24999.0,
            "photoRef": "http://localhost:8000/uploads/1718000000000-482913.png"
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    # Assigned by the record store at creation, never changed afterwards
    id: str = Field(..., description="Unique shirt identifier")

    brand: str = Field(..., description="Brand name")

    size: str = Field(..., description="Size label (e.g. S, M, XL)")

    price: float = Field(..., description="Price, never negative")

    # Empty string when the shirt has no photo
    photo_ref: str = Field(
        default="",
        alias="photoRef",
        description="URL of the shirt photo, or empty"
    )

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "Shirt":
        """Build a Shirt from a record store row."""
        return cls(
            id=str(row["id"]),
            brand=row["brand"],
            size=row["size"],
            price=float(row["price"]),
            photo_ref=row.get("photo_ref") or "",
        )

    def to_response(self) -> dict[str, Any]:
        """Serialize with the client-facing field names."""
        return self.model_dump(by_alias=True)


class ShirtCreate(BaseModel):
    """Fields for a new shirt, already coerced."""

    brand: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    photo_ref: str = Field(default="")


class ShirtUpdate(BaseModel):
    """
    Partial fields for a shirt update.

    Fields left as None are not touched.
    """

    brand: str | None = Field(default=None, min_length=1)
    size: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0)
    photo_ref: str | None = Field(default=None)

    def changes(self) -> dict[str, Any]:
        """Only the fields that were set, as record store columns."""
        return self.model_dump(exclude_none=True)


class PhotoUpload(BaseModel):
    """An uploaded photo waiting to be written to the photo store."""

    content: bytes = Field(..., description="Raw file bytes")
    filename: str = Field(default="", description="Client-side filename")


class CatalogPage(BaseModel):
    """
    Result of listing the catalog.

    Example (paginated):
        {
            "total": 5,
            "paginated": true,
            "page": 1,
            "per_page": 2,
            "total_pages": 3,
            "data": [...]
        }

    When no window was requested, only total, paginated=false and data
    are present.
    """

    total: int = Field(default=0, ge=0)
    paginated: bool = Field(default=False)
    page: int | None = Field(default=None, ge=1)
    per_page: int | None = Field(default=None, ge=1)
    total_pages: int | None = Field(default=None, ge=0)
    data: list[Shirt] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        """Serialize for clients, dropping page fields on unpaginated results."""
        return self.model_dump(by_alias=True, exclude_none=True)
