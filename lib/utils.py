# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import math
import re
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def parse_uuid(value: Any) -> UUID | None:
    """
    Parse a value as a UUID.

    Returns:
        The UUID, or None when the value is not a well-formed UUID

    Example:
        parse_uuid("550e8400-e29b-41d4-a716-446655440000")  # UUID(...)
        parse_uuid("not-a-uuid")  # None
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


# =============================================================================
# Number Utilities
# =============================================================================

# Plain ASCII decimal, optional sign and fraction: no exponents, underscores
# or non-ASCII digits
DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)", re.ASCII)


def parse_number(value: Any) -> float | None:
    """
    Coerce a numeric-looking value to float.

    Accepts ints, floats and plain decimal strings such as "19.99" or " 20 ".
    Booleans, NaN, infinities, exponents, digit separators and non-ASCII
    digits give None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not DECIMAL_PATTERN.fullmatch(text):
            return None
        number = float(text)
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int(value: Any) -> int | None:
    """
    Coerce a query-string value to int, or None when it is not an integer.

    Example:
        parse_int("10")   # 10
        parse_int("abc")  # None
        parse_int(None)   # None
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
