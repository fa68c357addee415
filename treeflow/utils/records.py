"""Helpers for reading loosely-shaped API records.

Records arrive as plain dicts from the persistence layer, sometimes in
camelCase, sometimes still in snake_case, with nested arrays that may be
missing or null.
"""

from collections.abc import Mapping
from typing import Any

_MISSING = object()


def safe_array(value: Any) -> list:
    """Return ``value`` if it is a list or tuple, else an empty list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def nested(record: Mapping[str, Any], *names: str) -> list:
    """First present nested array among ``names``, or an empty list."""
    for name in names:
        value = record.get(name)
        if value is not None:
            return safe_array(value)
    return []


def first_present(*sources: tuple[Mapping[str, Any], tuple[str, ...]], default: Any = None) -> Any:
    """Resolve a field across (mapping, names) pairs in precedence order.

    A name counts as present when its value is not None, so an explicit
    ``None`` in an override falls through to the record.
    """
    for mapping, names in sources:
        for name in names:
            value = mapping.get(name, _MISSING)
            if value is not _MISSING and value is not None:
                return value
    return default


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
