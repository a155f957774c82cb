"""
Local/remote file resolution for pipette.

Importers never open the caller's source directly. They go through
``local_file()``, a context manager that yields a readable local path:

- Remote URLs (http, https, ftp) are downloaded with ``requests`` into a
  temporary directory.
- Compressed files (``.gz``, ``.bz2``, ``.xz``, single-member ``.zip``)
  are decompressed on the fly into the same temporary directory.
- Local uncompressed files are yielded as-is.

The temporary directory is removed on every exit path, including when
the importer fails halfway through parsing.

``optional_file()`` is the variant used for sidecar files: it yields
``None`` instead of failing when the file does not exist.
"""

from __future__ import annotations

import bz2
import gzip
import logging
import lzma
import shutil
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path

import requests

from pipette.formats import is_url, source_basename

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024

_OPENERS = {
    ".gz": gzip.open,
    ".bz2": bz2.open,
    ".xz": lzma.open,
}

# Failures that make an optional file count as absent.
_UNRESOLVABLE = (
    requests.RequestException,
    OSError,
    ValueError,
    EOFError,
    zipfile.BadZipFile,
    lzma.LZMAError,
)


def _download(url: str, dest_dir: Path, timeout: float | None) -> Path:
    """Stream *url* into *dest_dir* and return the local path."""
    dest = dest_dir / (source_basename(url) or "download")
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                f.write(chunk)
    logger.debug("Downloaded %s to %s", url, dest)
    return dest


def _decompress(path: Path, dest_dir: Path) -> Path:
    """Decompress *path* into *dest_dir* if it has a compression suffix."""
    suffix = path.suffix.lower()
    if suffix in _OPENERS:
        dest = dest_dir / path.stem
        with _OPENERS[suffix](path, "rb") as src, open(dest, "wb") as out:
            shutil.copyfileobj(src, out, _CHUNK_SIZE)
        logger.debug("Decompressed %s to %s", path.name, dest)
        return dest
    if suffix == ".zip":
        with zipfile.ZipFile(path) as archive:
            members = [m for m in archive.infolist() if not m.is_dir()]
            if len(members) != 1:
                raise ValueError(
                    f"'{path.name}' must contain exactly one file "
                    f"(found {len(members)})"
                )
            dest = dest_dir / Path(members[0].filename).name
            with archive.open(members[0]) as src, open(dest, "wb") as out:
                shutil.copyfileobj(src, out, _CHUNK_SIZE)
        logger.debug("Extracted %s from %s", dest.name, path.name)
        return dest
    return path


def file_exists(source: str, timeout: float | None = None) -> bool:
    """Whether *source* exists (local file, or URL answering a HEAD request)."""
    source = str(source)
    if is_url(source):
        response = requests.head(source, allow_redirects=True, timeout=timeout)
        return response.ok
    return Path(source).is_file()


@contextmanager
def local_file(
    source: str,
    *,
    quiet: bool = False,
    timeout: float | None = None,
) -> Iterator[Path]:
    """Yield a readable, uncompressed local copy of *source*.

    Args:
        source: Local path or URL.
        quiet: Suppress the download log message.
        timeout: ``requests`` timeout for remote downloads.

    Raises:
        FileNotFoundError: If a local *source* does not exist.
        requests.HTTPError: If a remote download fails.
    """
    source = str(source)
    with tempfile.TemporaryDirectory(prefix="pipette-") as tmpdir:
        tmp = Path(tmpdir)
        if is_url(source):
            if not quiet:
                logger.info("Downloading %s", source)
            path = _download(source, tmp, timeout)
        else:
            path = Path(source)
            if not path.is_file():
                raise FileNotFoundError(f"File not found: {source}")
        yield _decompress(path, tmp)


@contextmanager
def optional_file(
    source: str,
    *,
    quiet: bool = False,
    timeout: float | None = None,
) -> Iterator[Path | None]:
    """Like ``local_file()``, but yield ``None`` when *source* is unavailable.

    A missing file, a failed existence check or download, and an
    unreadable archive all count as "not provided". Errors raised by the
    caller inside the ``with`` block propagate as usual.
    """
    with ExitStack() as stack:
        try:
            if file_exists(source, timeout=timeout):
                path = stack.enter_context(
                    local_file(source, quiet=quiet, timeout=timeout)
                )
            else:
                logger.debug("Optional file not found: %s", source)
                path = None
        except _UNRESOLVABLE as exc:
            logger.debug("Optional file could not be resolved: %s (%s)", source, exc)
            path = None
        yield path
