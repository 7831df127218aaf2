from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from maasta.core.error_codes import INVALID_ID
from maasta.core.exceptions import CustomHTTPException


def ensure_uuid(value, label: str = "record") -> str:
    """
    Reject malformed identifiers before any query is issued.
    Returns the canonical lower-case string form.
    """
    if value is None or str(value).strip() in ("", "undefined", "null"):
        raise CustomHTTPException(422, f"Invalid {label} ID provided", error_code=INVALID_ID)
    try:
        return str(UUID(str(value).strip()))
    except (ValueError, AttributeError, TypeError):
        raise CustomHTTPException(422, f"Invalid {label} ID provided", error_code=INVALID_ID)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; convert aware inputs before comparing."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
