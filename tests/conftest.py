"""
Shared test fixtures for pipette tests.

Every test starts from the default ``ImportConfig``: the process-wide
snapshot is dropped before and after each test, and ``PIPETTE_CONFIG``
is cleared so a developer's own config file never leaks in.

Sample files are written to ``tmp_path`` by the ``write_file`` fixture;
no checked-in input files are required.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from pipette.config import CONFIG_ENV_VAR, reset_config


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _default_config(monkeypatch: pytest.MonkeyPatch):
    """Run every test against the default config."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write text *content* to ``tmp_path / name`` and return the path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs through import_file())",
    )
