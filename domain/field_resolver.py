"""
Domain: Field resolution for heterogeneous raw records.

Rules implemented here:
- A field is resolved by trying an ordered list of alias keys. The first alias
  with a present, non-empty value wins; alias order is a priority list.
- Each alias is matched exactly first, then canonically (case and punctuation
  insensitive), so "Lead Name", "lead_name" and "LEAD-NAME" are the same key.
- None, empty/whitespace-only strings, empty lists and NaN are absent.
  Numeric 0 and False are present.
- Missing keys never raise; the caller's default is returned instead.
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional, Sequence

_NON_ALNUM = re.compile(r"[^0-9a-z]+")

# Keys tried, in order, when a linked record (dict) is reduced to text.
_LINKED_RECORD_KEYS = ("name", "email", "id")

# Linked records nest at most list -> record -> value; anything deeper is dropped.
_MAX_LINK_DEPTH = 3


def canonical_key(key: str) -> str:
    """Lower-case a key and drop every non-alphanumeric character."""

    return _NON_ALNUM.sub("", str(key).lower())


def is_present(value: Any) -> bool:
    """Return True when a raw value carries data (0 and False count as data)."""

    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


def _require_mapping(record: Any) -> None:
    if not isinstance(record, Mapping):
        raise TypeError(
            f"record must be a mapping of column name to value, got {type(record).__name__}"
        )


def _lookup(record: Mapping[str, Any], alias: str, canonical_index: Mapping[str, Any]) -> Any:
    if alias in record and is_present(record[alias]):
        return record[alias]
    value = canonical_index.get(canonical_key(alias))
    if is_present(value):
        return value
    return None


def _canonical_index(record: Mapping[str, Any]) -> dict[str, Any]:
    # First present value per canonical key wins, in record insertion order.
    index: dict[str, Any] = {}
    for key, value in record.items():
        ckey = canonical_key(key)
        if ckey not in index or not is_present(index[ckey]):
            index[ckey] = value
    return index


def resolve(record: Mapping[str, Any], aliases: Sequence[str], default: Any = "") -> Any:
    """
    Resolve a canonical field value from a raw record.

    Args:
        record: Raw record (column name → value)
        aliases: Alias keys, most trusted first
        default: Value returned when no alias resolves

    Returns:
        The raw value under the first alias that has data, or `default`.

    Raises:
        TypeError: If record is not a mapping

    Example:
        resolve({"Email": "a@b.com", "email": "x@y.com"}, ("Email", "email"))
        # Returns "a@b.com"
    """

    _require_mapping(record)

    canonical_index = _canonical_index(record)
    for alias in aliases:
        value = _lookup(record, alias, canonical_index)
        if value is not None:
            return value
    return default


def _to_text(value: Any, depth: int = 0) -> str:
    if isinstance(value, (Mapping, list, tuple)) and depth >= _MAX_LINK_DEPTH:
        return ""
    if isinstance(value, Mapping):
        for key in _LINKED_RECORD_KEYS:
            if is_present(value.get(key)):
                return _to_text(value[key], depth + 1)
        return ""
    if isinstance(value, (list, tuple)):
        parts = [_to_text(item, depth + 1) for item in value]
        return ", ".join(part for part in parts if part)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def resolve_text(record: Mapping[str, Any], aliases: Sequence[str], default: str = "") -> str:
    """
    Resolve a field and coerce it to stripped text.

    Record-store rows carry linked records as lists or dicts; those are reduced
    to their name (or email, or id) and joined with ", ".
    """

    value = resolve(record, aliases, None)
    if value is None:
        return default
    text = _to_text(value)
    return text if text else default


def resolve_optional_text(record: Mapping[str, Any], aliases: Sequence[str]) -> Optional[str]:
    """Like `resolve_text`, but returns None when nothing resolves."""

    text = resolve_text(record, aliases)
    return text or None


__all__ = [
    "canonical_key",
    "is_present",
    "resolve",
    "resolve_optional_text",
    "resolve_text",
]
