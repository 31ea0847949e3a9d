"""
Canonicalization helpers shared by both signing schemes.
"""

import secrets
import string
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote, urlencode

from ..constants import NONCE_LENGTH

NONCE_ALPHABET = string.ascii_letters + string.digits


def merge_maps(*maps: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Merge parameter maps into a new dict.

    Later maps override earlier ones on key collision, so callers layer
    defaults first and overrides last. ``None`` entries are skipped and
    no input is modified.
    """
    merged: Dict[str, Any] = {}
    for mapping in maps:
        if mapping:
            merged.update(mapping)
    return merged


def is_empty(value: Any) -> bool:
    """Check whether a value counts as absent for signing purposes."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (dict, list, tuple, set, frozenset, bytes)):
        return len(value) == 0
    return False


def filter_empty(mapping: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Drop keys whose value is an empty string, None or an empty collection.

    Zero and False are real values and are kept.
    """
    if not mapping:
        return {}
    return {key: value for key, value in mapping.items() if not is_empty(value)}


def stringify_value(value: Any) -> str:
    """Render a scalar the way the gateway expects it in signed strings."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def sorted_query_string(mapping: Optional[Mapping[str, Any]]) -> str:
    """
    Join ``k=v`` pairs with ``&`` in ascending key order.

    Values are not URL-escaped.
    """
    if not mapping:
        return ""
    return "&".join(
        f"{key}={stringify_value(mapping[key])}" for key in sorted(mapping)
    )


def encoded_query_string(mapping: Optional[Mapping[str, Any]]) -> str:
    """
    Percent-encode ``k=v`` pairs in ascending key order.

    Spaces become ``%20`` and reserved characters such as ``:`` and ``+``
    are escaped. The result is sent on the wire exactly as signed.
    """
    if not mapping:
        return ""
    return urlencode(
        [(key, stringify_value(mapping[key])) for key in sorted(mapping)],
        quote_via=quote
    )


def sort_by_key(mapping: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a copy of the mapping with keys in ascending order."""
    if not mapping:
        return {}
    return {key: mapping[key] for key in sorted(mapping)}


def random_nonce(length: int = NONCE_LENGTH) -> str:
    """Generate a random alphanumeric nonce."""
    return ''.join(secrets.choice(NONCE_ALPHABET) for _ in range(length))
