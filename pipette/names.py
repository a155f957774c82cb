"""
Syntactic name helpers for pipette.

``make_names`` is the default name coercion applied to imported column
and element names; ``has_valid_names`` is the check run afterwards.
A "valid" name is a non-keyword Python identifier, so that columns can
be used with attribute access and in ``DataFrame.query`` expressions.

Duplicates are deliberately kept: coercion never renames ``a, a`` to
``a, a_1``. Duplicate names are reported, not repaired.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Iterable, Sequence

_INVALID_CHARS = re.compile(r"\W+")


def make_names(names: Iterable[object]) -> list[str]:
    """Coerce names into syntactically valid Python identifiers.

    - Runs of characters outside ``[A-Za-z0-9_]`` become ``_``.
    - Names that are empty or start with a digit are prefixed with ``X``.
    - Python keywords get a trailing ``_``.

    >>> make_names(["gene id", "1st", "class", "x"])
    ['gene_id', 'X1st', 'class_', 'x']
    """
    out: list[str] = []
    for name in names:
        text = "" if name is None else str(name).strip()
        text = _INVALID_CHARS.sub("_", text)
        if not text or text[0].isdigit():
            text = "X" + text
        if keyword.iskeyword(text):
            text += "_"
        out.append(text)
    return out


def has_valid_names(names: Sequence[object]) -> bool:
    """Whether every name is a non-keyword Python identifier."""
    return all(
        isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)
        for name in names
    )


def duplicated_names(names: Sequence[object]) -> list[str]:
    """Sorted unique names that occur more than once."""
    seen: set[object] = set()
    dupes: set[str] = set()
    for name in names:
        if name in seen:
            dupes.add(str(name))
        seen.add(name)
    return sorted(dupes)
