"""
Missing-value sanitization for pipette.

``sanitize_na()`` turns strings that stand for "no value" into real
missing values after import. Unlike ``ImportConfig.na_values``, which
only applies while a delimited or Excel file is parsed, it works on any
string, Series, or DataFrame, and it also catches whitespace-only cells.

Strings treated as missing (whole-value matches):

- empty string
- whitespace only
- ``NA``
- ``NULL``
- ``none available``

Only string data is touched: numeric columns, row labels and column
names are left as they are.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

NA_PATTERNS = (r"^$", r"^\s+$", r"^NA$", r"^NULL$", r"^none available$")

_NA_REGEX = "|".join(NA_PATTERNS)
_NA_RE = re.compile(_NA_REGEX)


def is_na_string(value: str) -> bool:
    """Whether *value* is one of the strings standing for a missing value."""
    return _NA_RE.search(value) is not None


def _has_strings(series: pd.Series) -> bool:
    return series.dtype == object or isinstance(series.dtype, pd.StringDtype)


def _sanitize_series(series: pd.Series) -> pd.Series:
    if isinstance(series.dtype, pd.CategoricalDtype):
        dropped = [
            c for c in series.cat.categories if isinstance(c, str) and is_na_string(c)
        ]
        if not dropped:
            return series.copy()
        return series.cat.remove_categories(dropped)
    if _has_strings(series):
        return series.replace(_NA_REGEX, np.nan, regex=True)
    return series.copy()


def sanitize_na(obj: Any) -> Any:
    """Replace "no value" strings in *obj* with missing values.

    Args:
        obj: A string, ``pandas.Series`` or ``pandas.DataFrame``. Any
            other object is returned unchanged.

    Returns:
        For a string, ``None`` if it stands for a missing value and the
        string itself otherwise. For a Series or DataFrame, a copy with
        matching string values set to NaN; categorical data loses the
        matching categories instead. The index is preserved.

    Examples::

        sanitize_na("NULL")                          # None
        sanitize_na(pd.Series(["1", "x", "", "NA"])) # ['1', 'x', nan, nan]
    """
    if isinstance(obj, str):
        return None if is_na_string(obj) else obj
    if isinstance(obj, pd.Series):
        return _sanitize_series(obj)
    if isinstance(obj, pd.DataFrame):
        out = obj.copy()
        for i in range(out.shape[1]):
            out.isetitem(i, _sanitize_series(out.iloc[:, i]))
        return out
    logger.debug("sanitize_na: returning %s unchanged", type(obj).__name__)
    return obj
