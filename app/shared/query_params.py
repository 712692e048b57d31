# app/shared/query_params.py
from typing import Optional


def positive_int_or_default(value: Optional[str], default: int) -> int:
    """Parse a paging query value; missing, unparsable or < 1 means `default`."""
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 1 else default
