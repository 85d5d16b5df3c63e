"""Shared fixtures: isolated config directory, headless Qt."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

# Qt widgets must not need a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty configuration directory."""
    path = tmp_path / "richmark-config"
    path.mkdir()
    return path
