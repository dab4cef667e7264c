# =============================================================================
# core/services/shirt_repository.py - Shirt Record Store
# =============================================================================
# CRUD and listing over the shirts table in Supabase.
#
# IDs are UUIDs generated by the database. A malformed ID is rejected with
# InvalidShirtIdError before any query runs; a well-formed ID with no row
# comes back as None so callers can decide how to report it.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import Client

from app.exceptions import InvalidShirtIdError, RecordStoreError
from core.models.shirt import Shirt, ShirtCreate, ShirtUpdate
from lib.supabase_client import is_no_rows_error
from lib.utils import parse_uuid

logger = logging.getLogger(__name__)

# PostgREST code for an offset past the end of the table
RANGE_NOT_SATISFIABLE_CODE = "PGRST103"

# Rows per request when reading the whole table; at or below PostgREST max-rows
LIST_CHUNK_SIZE = 1000


class ShirtRepository:
    """
    Record store for shirts.

    Rows are returned in insertion order (created_at ascending).

    Example:
        repo = ShirtRepository(client, table="shirts")
        shirt = repo.create(ShirtCreate(brand="Nike", size="L", price=30))
        items, total = repo.list(offset=0, limit=10)
    """

    def __init__(self, client: Client, table: str = "shirts"):
        self.client = client
        self.table = table

    @staticmethod
    def validate_id(shirt_id: str | UUID) -> str:
        """
        Check that an ID is a well-formed UUID.

        Raises:
            InvalidShirtIdError: If it isn't
        """
        parsed = parse_uuid(shirt_id)
        if parsed is None:
            raise InvalidShirtIdError(str(shirt_id))
        return str(parsed)

    def _rows(self, response: Any) -> list[dict[str, Any]]:
        return response.data or []

    # -------------------------------------------------------------------------
    # Create / Read
    # -------------------------------------------------------------------------

    def create(self, data: ShirtCreate) -> Shirt:
        """
        Insert a new shirt.

        Returns:
            The stored shirt with its generated ID

        Raises:
            RecordStoreError: If the insert fails
        """
        try:
            response = (
                self.client.table(self.table)
                .insert(data.model_dump())
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to insert shirt: {e}")
            raise RecordStoreError("create") from e

        rows = self._rows(response)
        if not rows:
            logger.error("Shirt insert returned no data")
            raise RecordStoreError("create")

        shirt = Shirt.from_db_row(rows[0])
        logger.info(f"Created shirt: {shirt.id}")
        return shirt

    def get(self, shirt_id: str | UUID) -> Shirt | None:
        """
        Fetch a shirt by ID.

        Returns:
            The shirt, or None if no row has this ID

        Raises:
            InvalidShirtIdError: If the ID is malformed
            RecordStoreError: If the query fails
        """
        shirt_id_str = self.validate_id(shirt_id)

        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("id", shirt_id_str)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                return None
            logger.error(f"Failed to fetch shirt {shirt_id_str}: {e}")
            raise RecordStoreError("get") from e

        return Shirt.from_db_row(response.data) if response.data else None

    def count(self) -> int:
        """Total number of shirts in the table."""
        try:
            response = (
                self.client.table(self.table)
                .select("id", count="exact", head=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to count shirts: {e}")
            raise RecordStoreError("count") from e

        return response.count or 0

    def list(
        self,
        offset: int | None = None,
        limit: int | None = None,
    ) -> tuple[list[Shirt], int]:
        """
        List shirts, optionally windowed.

        Without a window the table is read in LIST_CHUNK_SIZE ranges until
        the exact count is reached, so the server's max-rows cap never
        truncates the result.

        Args:
            offset: Rows to skip (0-indexed)
            limit: Maximum rows to return

        Returns:
            Tuple of (shirts, total). Without a window, total == len(shirts);
            with one, total is the size of the whole table.

        Raises:
            RecordStoreError: If the query fails
        """
        if offset is None or limit is None:
            return self._list_all()

        try:
            response = self._select_range(offset, offset + limit - 1)
        except Exception as e:
            if RANGE_NOT_SATISFIABLE_CODE in str(e):
                return [], self.count()
            logger.error(f"Failed to list shirts: {e}")
            raise RecordStoreError("list") from e

        shirts = [Shirt.from_db_row(row) for row in self._rows(response)]
        total = response.count if response.count is not None else len(shirts)
        return shirts, total

    def _list_all(self) -> tuple[list[Shirt], int]:
        rows: list[dict[str, Any]] = []
        total: int | None = None

        while True:
            start = len(rows)
            try:
                response = self._select_range(start, start + LIST_CHUNK_SIZE - 1)
            except Exception as e:
                if RANGE_NOT_SATISFIABLE_CODE in str(e):
                    break
                logger.error(f"Failed to list shirts: {e}")
                raise RecordStoreError("list") from e

            chunk = self._rows(response)
            rows.extend(chunk)
            if total is None:
                total = response.count
            if not chunk:
                break
            if total is not None and len(rows) >= total:
                break
            if total is None and len(chunk) < LIST_CHUNK_SIZE:
                break

        shirts = [Shirt.from_db_row(row) for row in rows]
        return shirts, len(shirts)

    def _select_range(self, start: int, end: int):
        return (
            self.client.table(self.table)
            .select("*", count="exact")
            .order("created_at")
            .range(start, end)
            .execute()
        )

    # -------------------------------------------------------------------------
    # Update / Delete
    # -------------------------------------------------------------------------

    def update(self, shirt_id: str | UUID, changes: ShirtUpdate) -> Shirt | None:
        """
        Apply the set fields of `changes` to a shirt.

        Returns:
            The updated shirt, or None if no row has this ID

        Raises:
            InvalidShirtIdError: If the ID is malformed
            RecordStoreError: If the update fails
        """
        shirt_id_str = self.validate_id(shirt_id)
        update_data = changes.changes()

        if not update_data:
            return self.get(shirt_id_str)  # Nothing to update

        try:
            response = (
                self.client.table(self.table)
                .update(update_data)
                .eq("id", shirt_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update shirt {shirt_id_str}: {e}")
            raise RecordStoreError("update") from e

        rows = self._rows(response)
        if not rows:
            return None

        logger.info(f"Updated shirt: {shirt_id_str} ({', '.join(sorted(update_data))})")
        return Shirt.from_db_row(rows[0])

    def delete(self, shirt_id: str | UUID) -> Shirt | None:
        """
        Delete a shirt and return the row that was removed.

        Returns:
            The deleted shirt, or None if no row had this ID

        Raises:
            InvalidShirtIdError: If the ID is malformed
            RecordStoreError: If the delete fails
        """
        shirt_id_str = self.validate_id(shirt_id)

        try:
            response = (
                self.client.table(self.table)
                .delete()
                .eq("id", shirt_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to delete shirt {shirt_id_str}: {e}")
            raise RecordStoreError("delete") from e

        rows = self._rows(response)
        if not rows:
            return None

        logger.info(f"Deleted shirt: {shirt_id_str}")
        return Shirt.from_db_row(rows[0])

    def ping(self) -> bool:
        """Check that the table answers a trivial query."""
        try:
            self.client.table(self.table).select("id").limit(1).execute()
        except Exception as e:
            logger.warning(f"Record store ping failed: {e}")
            return False
        return True
