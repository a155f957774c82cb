"""
Format resolution for pipette.

Maps a file path or URL (plus an optional explicit override) to a
canonical lowercase format tag, and each tag to its format group.

The recognition table lives in ``formats.yaml`` next to this module and
is loaded once into Pydantic models. Adding an extension to an existing
group is a YAML-only change; a new group also needs an importer class
registered in ``pipette.registry``.

Resolution algorithm:
1. An explicit ``format`` other than "auto"/"none" is used verbatim
   (lowercased). The file name is not inspected at all.
2. Otherwise take the basename (the URL path component for remote files,
   so query strings and fragments are ignored).
3. Match the trailing extension, skipping one compression suffix
   (``.bz2``, ``.gz``, ``.xz``, ``.zip``): ``counts.csv.gz`` -> ``csv``.
4. Denylisted extensions fail with UnsupportedFormatError; extensions
   missing from the table fail with UnresolvedFormatError.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from functools import lru_cache
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field

from pipette.exceptions import UnresolvedFormatError, UnsupportedFormatError

logger = logging.getLogger(__name__)

_FORMATS_FILE = Path(__file__).parent / "formats.yaml"

COMPRESSION_SUFFIXES = ("bz2", "gz", "xz", "zip")

EXT_PATTERN = re.compile(
    r"\.([a-z0-9]+)(\.(" + "|".join(COMPRESSION_SUFFIXES) + r"))?$",
    re.IGNORECASE,
)

_URL_SCHEMES = ("http", "https", "ftp")


class FormatGroup(str, Enum):
    """Cluster of format tags sharing one importer and option rules."""

    DELIM = "delim"
    EXCEL = "excel"
    PRISM = "prism"
    RDATA_SINGLE = "rdata_single"
    RDATA = "rdata"
    MTX = "mtx"
    JSON = "json"
    YAML = "yaml"
    GMT = "gmt"
    GMX = "gmx"
    INTERVALS = "intervals"
    LINES = "lines"
    BCBIO = "bcbio"
    TABULAR = "tabular"


class GroupSpec(BaseModel):
    """One group entry of ``formats.yaml``."""
    description: str = ""
    tags: list[str]


class FormatTable(BaseModel):
    """The complete recognition table."""
    groups: dict[FormatGroup, GroupSpec]
    denylist: list[str] = Field(default_factory=list)

    def group_of(self, tag: str) -> FormatGroup | None:
        for group, spec in self.groups.items():
            if tag in spec.tags:
                return group
        return None

    @property
    def tags(self) -> list[str]:
        return [tag for spec in self.groups.values() for tag in spec.tags]


@lru_cache(maxsize=None)
def load_format_table(path: Path | None = None) -> FormatTable:
    """Load the recognition table (cached per path)."""
    path = path or _FORMATS_FILE
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    table = FormatTable.model_validate(raw)
    seen: dict[str, FormatGroup] = {}
    for group, spec in table.groups.items():
        for tag in spec.tags:
            if tag in seen:
                raise ValueError(
                    f"Format tag '{tag}' is listed in both "
                    f"'{seen[tag].value}' and '{group.value}'"
                )
            seen[tag] = group
    logger.debug("Loaded %d format tags from %s", len(seen), path)
    return table


def is_url(source: str) -> bool:
    """Whether *source* is a remote URL rather than a local path."""
    return urlparse(str(source)).scheme in _URL_SCHEMES


def source_basename(source: str) -> str:
    """Basename of a local path or of a URL's path component."""
    source = str(source)
    if is_url(source):
        return PurePosixPath(urlparse(source).path).name
    return Path(source).name


def extract_extension(source: str) -> str | None:
    """Lowercased extension of *source*, skipping a compression suffix."""
    match = EXT_PATTERN.search(source_basename(source))
    if match is None:
        return None
    return match.group(1).lower()


def resolve_format(source: str, format: str = "auto") -> str:
    """Resolve the format tag for *source*.

    Args:
        source: Local file path or URL.
        format: Explicit override. "auto" (or "none") infers the tag from
            the file extension.

    Returns:
        The canonical lowercase format tag.

    Raises:
        UnresolvedFormatError: No extension (or an unknown one) and no
            explicit override.
        UnsupportedFormatError: The extension is denylisted.
    """
    fmt = format.lower()
    if fmt not in ("auto", "none"):
        return fmt

    ext = extract_extension(source)
    if ext is None:
        raise UnresolvedFormatError(
            f"'{source_basename(source)}' does not contain a file type extension.\n"
            "Set the file format manually using the 'format' argument."
        )

    table = load_format_table()
    if ext in table.denylist:
        raise UnsupportedFormatError(
            f"'{ext}' files are intentionally not supported: {source_basename(source)}"
        )
    if table.group_of(ext) is None:
        raise UnresolvedFormatError(
            f"'{ext}' is not a recognized file extension: {source_basename(source)}\n"
            "Set the file format manually using the 'format' argument."
        )
    return ext


def supported_formats() -> dict[str, list[str]]:
    """Mapping of format group name -> supported tags."""
    table = load_format_table()
    return {group.value: list(spec.tags) for group, spec in table.groups.items()}
