"""
Configuration model and YAML I/O for pipette.

This module defines the process-wide import settings (delimited engine,
return shape, metadata/quiet defaults, NA strings, warning strictness of
the interval and Excel readers) plus helpers for loading, saving, and
swapping the active config.

Key objects:
- ImportConfig: Immutable settings snapshot.
- get_config() -> ImportConfig: The process-wide snapshot. On first use
  it is loaded from the YAML file named by ``PIPETTE_CONFIG`` (if set).
- set_config(config): Replace the process-wide snapshot.
- load_config(path) / save_config(config, path): YAML round-trip.

Threading model:
  ``import_file()`` reads the snapshot once at call start and passes it
  down explicitly, so a call never observes a config change halfway
  through. Replacing the snapshot while other threads are importing is
  the caller's responsibility.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat

from pipette.exceptions import PipetteError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PIPETTE_CONFIG"

Engine = Literal["pandas", "pyarrow", "polars", "csv"]
ReturnType = Literal["pandas", "polars"]


class ImportConfig(BaseModel):
    """Process-wide defaults for ``import_file()``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    engine: Engine = Field(
        "pandas", description="Backend used for delimited (CSV/TSV) files"
    )
    return_type: ReturnType = Field(
        "pandas",
        description="Shape returned for tabular data; polars frames have no row names",
    )
    metadata: bool = Field(
        False, description="Attach import provenance to supported return objects"
    )
    quiet: bool = Field(False, description="Suppress informational log messages")
    strict_intervals: bool = Field(
        True,
        description="Escalate warnings raised by genomic interval readers to errors",
    )
    strict_excel: bool = Field(
        True,
        description="Escalate warnings raised by Excel workbook readers to errors",
    )
    na_values: list[str] = Field(
        default_factory=lambda: ["", "NA", "#N/A", "NULL", "null"],
        description="Strings interpreted as missing values in tabular files",
    )
    download_timeout: PositiveFloat | None = Field(
        None, description="Timeout in seconds for remote downloads (None = no timeout)"
    )


_active_config: ImportConfig | None = None


def load_config(path: str | Path) -> ImportConfig:
    """Load and validate a YAML config file into an ImportConfig.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise PipetteError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return ImportConfig.model_validate(raw)


def save_config(config: ImportConfig, path: str | Path) -> None:
    """Serialize an ImportConfig to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# pipette configuration\n\n")
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    logger.info("Saved config to %s", path)


def get_config() -> ImportConfig:
    """Return the process-wide config snapshot."""
    global _active_config
    if _active_config is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        _active_config = load_config(env_path) if env_path else ImportConfig()
    return _active_config


def set_config(config: ImportConfig | None = None, **overrides) -> ImportConfig:
    """Replace the process-wide config snapshot.

    Args:
        config: New config. If ``None``, the current snapshot is used as
            the base for *overrides*.
        **overrides: Individual fields to change, e.g. ``engine="polars"``.

    Returns:
        The new active config.
    """
    global _active_config
    base = config if config is not None else get_config()
    if overrides:
        base = ImportConfig.model_validate({**base.model_dump(), **overrides})
    _active_config = base
    logger.debug("Active config: %s", base)
    return base


def reset_config() -> None:
    """Drop the active snapshot so the next ``get_config()`` reloads it."""
    global _active_config
    _active_config = None
