"""
Option applicability rules for pipette.

Many ``import_file()`` options only make sense for some formats (a sheet
selector for a CSV file means nothing). Rather than silently ignoring
them, every option that does not apply to the resolved format must be
left at its default, otherwise the call fails before any parsing.

Rule table:

=================  ==============================
Option             Applicable format groups
=================  ==============================
rownames           delim, excel
colnames           delim, excel
sheet              excel, prism
skip               delim, excel, lines
metadata           everything except lines
=================  ==============================

The reader options ``comment`` and ``n_max`` apply wherever the group's
importer lists them in ``BaseImporter.consumes`` (delim and lines take
both, excel takes ``n_max``).
"""

from __future__ import annotations

import logging
from typing import Any

from pipette.config import ImportConfig
from pipette.exceptions import OptionMismatchError
from pipette.formats import FormatGroup
from pipette.registry import importer_class
from pipette.request import OPTION_DEFAULTS, READER_DEFAULTS, ImportRequest

logger = logging.getLogger(__name__)

_G = FormatGroup

APPLICABLE_GROUPS: dict[str, frozenset[FormatGroup]] = {
    "rownames": frozenset({_G.DELIM, _G.EXCEL}),
    "colnames": frozenset({_G.DELIM, _G.EXCEL}),
    "sheet": frozenset({_G.EXCEL, _G.PRISM}),
    "skip": frozenset({_G.DELIM, _G.EXCEL, _G.LINES}),
    "metadata": frozenset(g for g in FormatGroup if g is not _G.LINES),
}


def _mismatch(option: str, tag: str, value: Any, default: Any) -> OptionMismatchError:
    return OptionMismatchError(
        f"'{option}' does not apply to '{tag}' files "
        f"(got {value!r}; leave it at the default {default!r})"
    )


def check_option_applicability(
    tag: str,
    group: FormatGroup,
    request: ImportRequest,
    config: ImportConfig,
) -> None:
    """Fail if an option was changed for a format it does not apply to.

    Args:
        tag: The resolved format tag (used in the error message).
        group: The group *tag* belongs to.
        request: The validated import request.
        config: Active config; supplies the ``metadata`` default.

    Raises:
        OptionMismatchError: If an inapplicable option differs from its
            default.
    """
    defaults = {**OPTION_DEFAULTS, "metadata": config.metadata}
    for option, groups in APPLICABLE_GROUPS.items():
        if group in groups:
            continue
        value = getattr(request, option)
        default = defaults[option]
        # ``1 == True`` in Python; compare types too so sheet=True is caught.
        if type(value) is not type(default) or value != default:
            raise _mismatch(option, tag, value, default)

    consumes = importer_class(group).consumes
    for option, default in READER_DEFAULTS.items():
        value = getattr(request, option)
        if option not in consumes and value != default:
            raise _mismatch(option, tag, value, default)
    logger.debug("Option applicability check passed for '%s'", tag)
