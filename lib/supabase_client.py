# =============================================================================
# lib/supabase_client.py - Supabase Client Construction
# =============================================================================
# Builds the Supabase client used as the catalog's record store and checks
# that the backing table is reachable before the API starts serving.
#
# The client is created once at startup and handed to the repository that
# needs it; nothing in this module keeps a process-wide instance.
#
# Usage:
#   from lib.supabase_client import connect
#   client = connect(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY, "shirts")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_no_rows_error(error: Exception) -> bool:
    """Check whether a PostgREST error means "no matching row"."""
    return NO_ROWS_CODE in str(error)


def create_supabase_client(url: str, key: str) -> Client:
    """
    Create a Supabase client.

    Uses the service_role key which bypasses Row Level Security (RLS).
    This is appropriate for server-side operations.

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        client = create_client(url, key)
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
        ) from e

    logger.info("Supabase client initialized successfully")
    return client


def ping_table(client: Client, table: str) -> None:
    """
    Run a one-row query against a table to prove it is reachable.

    Raises:
        SupabaseClientError: If the table cannot be queried
    """
    try:
        client.table(table).select("id").limit(1).execute()
    except Exception as e:
        raise SupabaseClientError(
            message=f"Table '{table}' is not reachable: {e}",
            code="TABLE_UNREACHABLE",
            suggestion="Check connectivity and that the table exists (see scripts/create_shirts_table.sql)",
            details={"table": table}
        ) from e


def connect(url: str, key: str, table: str) -> Client:
    """
    Create a client and verify the record table before returning it.

    Startup calls this so the API never serves without a backing store.

    Raises:
        SupabaseClientError: If the client cannot be built or the table is unreachable
    """
    client = create_supabase_client(url, key)
    ping_table(client, table)
    logger.info(f"Connected to record store table '{table}'")
    return client
