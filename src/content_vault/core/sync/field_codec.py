"""Conversion of single field values into their storage representation."""

import json
from typing import Any, Optional


class EncodingError(Exception):
    """Raised when a value cannot be serialized for storage."""

    pass


def encode_blob(value: Any) -> bytes:
    """Serialize a structured value into a BLOB column value.

    Args:
        value: JSON compatible value (maps, lists, scalars)

    Returns:
        UTF-8 encoded JSON

    Raises:
        EncodingError: If the value cannot be serialized
    """
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(
            f"Cannot encode value of type {type(value).__name__}: {e}"
        ) from e


def decode_blob(data: Optional[bytes]) -> Any:
    """Reverse of encode_blob, None stays None."""
    if data is None:
        return None
    return json.loads(data.decode("utf-8"))


def encode_boolean(value: Any) -> str:
    """Encode a boolean field, null and false both become "0"."""
    return "1" if value is True else "0"


def encode_scalar(value: Any) -> Optional[str]:
    """Encode a value for a TEXT, INT or REAL column.

    Strings and numbers keep their string form. Booleans, maps and lists are
    stored as JSON text.

    Raises:
        EncodingError: If a map or list cannot be serialized
    """
    if value is None:
        return None
    if isinstance(value, (bool, dict, list)):
        return encode_blob(value).decode("utf-8")
    return str(value)
