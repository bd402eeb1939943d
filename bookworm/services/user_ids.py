from typing import Optional
from uuid import UUID


def normalize_user_id(raw_value: Optional[str]) -> str:
    """Return the canonical form of a store identifier, or "" when malformed.

    Identifiers are UUID strings. Surrounding whitespace and upper-case hex
    digits are tolerated; anything else is rejected.
    """
    compact = (raw_value or "").strip()
    if not compact:
        return ""
    try:
        parsed = UUID(compact)
    except (ValueError, AttributeError, TypeError):
        return ""
    canonical = str(parsed)
    if compact.lower() != canonical:
        # UUID() also accepts braces, urn: prefixes and bare hex.
        return ""
    return canonical
