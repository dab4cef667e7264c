# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client construction and connectivity check
# - utils.py: Shared utilities (UUID and number parsing)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClientError, connect, create_supabase_client
from lib.utils import parse_int, parse_number, parse_uuid

__all__ = [
    # Supabase
    "SupabaseClientError",
    "connect",
    "create_supabase_client",
    # Utils
    "parse_int",
    "parse_number",
    "parse_uuid",
]
