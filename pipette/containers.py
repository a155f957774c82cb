"""
Return containers for non-tabular imports.

pandas objects already carry a per-object metadata store (``attrs``).
JSON/YAML documents and gene sets come back as plain dicts and lists,
which cannot; these thin subclasses add the same ``attrs`` dict so
provenance can be attached without becoming part of the data.

They compare equal to their plain counterparts, so callers can treat
them as ordinary dicts and lists.
"""

from __future__ import annotations

from typing import Any


class NamedList(dict):
    """A ``dict`` with an ``attrs`` metadata store.

    Used for JSON/YAML objects (mappings) and gene sets
    (set name -> member list).
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.attrs: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"NamedList({dict.__repr__(self)})"


class RecordList(list):
    """A ``list`` with an ``attrs`` metadata store (JSON/YAML arrays)."""

    def __init__(self, *args: Any) -> None:
        super().__init__(*args)
        self.attrs: dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"RecordList({list.__repr__(self)})"


def wrap_document(value: Any) -> Any:
    """Wrap a parsed JSON/YAML document in an attrs-capable container.

    Only the top level is wrapped; nested values are left untouched.
    Scalars (numbers, strings, None) are returned as-is and cannot carry
    metadata.
    """
    if isinstance(value, dict):
        return NamedList(value)
    if isinstance(value, list):
        return RecordList(value)
    return value
