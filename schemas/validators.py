"""Reusable normalizers for values coming in from the record store and forms.

- JSON-valued columns may arrive as native lists or as JSON-encoded text.
- Name lists may arrive one-per-slot or comma-packed inside a single slot.
"""

import json
from typing import Any, Iterable, List, Optional


def parse_json_list(value: Any) -> list:
    """Parse if string, pass through if already a list, ``[]`` otherwise."""
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def split_names(value: Optional[Iterable[str] | str]) -> List[str]:
    """Flatten comma-packed name entries into one clean list.

    ``["A, B", "C"]`` and ``"A, B, C"`` both become ``["A", "B", "C"]``.
    Entries are trimmed and empties dropped; order is preserved.
    """
    if value is None:
        return []
    entries = [value] if isinstance(value, str) else list(value)

    names: List[str] = []
    for entry in entries:
        if entry is None:
            continue
        for part in str(entry).split(","):
            part = part.strip()
            if part:
                names.append(part)
    return names


def coerce_names(value: Any) -> List[str]:
    """Name list from a native list, JSON-encoded text or plain comma-packed text."""
    if isinstance(value, str) and not value.strip().startswith("["):
        return split_names(value)
    return split_names(parse_json_list(value))


def is_present(value: Any) -> bool:
    """Present means not None and not an empty string. ``0`` and ``False`` are present."""
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    return True
