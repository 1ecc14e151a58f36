"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep user-level config out and tear down handlers bound to runner streams."""
    monkeypatch.setattr(
        "sourceimpact.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"
    )
    for key in [k for k in os.environ if k.startswith("SOURCEIMPACT__")]:
        monkeypatch.delenv(key)
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project directory whose config keeps INFO logs off the output streams."""
    root = tmp_path / "project"
    config_dir = root / ".sourceimpact"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text("logging:\n  level: WARNING\n")
    return root
