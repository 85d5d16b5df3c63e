"""Tests for config.py and the pydantic models behind it."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from richmark.config import ConfigManager, get_config_manager
from richmark.exceptions import ConfigError
from richmark.models import RenderStyle, RichMarkConfig

# === models ===


def test_render_style_defaults() -> None:
    """Defaults reproduce the dark-theme look."""
    style = RenderStyle()
    assert style.include_prologue is True
    assert style.inline_code_background == "#30FFFFFF"
    assert style.blockquote_color == "#a0a0a0"
    assert style.heading_font_sizes == {1: 6, 2: 5, 3: 4}


def test_render_style_rejects_bad_colour() -> None:
    with pytest.raises(ValidationError):
        RenderStyle(blockquote_color="grey")


def test_render_style_rejects_bad_heading_sizes() -> None:
    """All three levels are required and sizes stay within 1..7."""
    with pytest.raises(ValidationError):
        RenderStyle(heading_font_sizes={1: 6, 2: 5})
    with pytest.raises(ValidationError):
        RenderStyle(heading_font_sizes={1: 9, 2: 5, 3: 4})


# === ConfigManager ===


def test_missing_file_gives_defaults(config_dir: Path) -> None:
    manager = ConfigManager(config_dir)
    assert manager.get_config() == RichMarkConfig()
    assert not manager.config_file.exists()


def test_set_value_persists(config_dir: Path) -> None:
    """Values written by one manager are read back by a fresh one."""
    ConfigManager(config_dir).set_value("style.blockquote_color", "#808080")
    reloaded = ConfigManager(config_dir).load()
    assert reloaded.style.blockquote_color == "#808080"


def test_set_value_decodes_json(config_dir: Path) -> None:
    """Booleans, numbers and mappings can be given as JSON strings."""
    manager = ConfigManager(config_dir)
    manager.set_value("style.include_prologue", "false")
    manager.set_value("viewer.font_size", "14")
    manager.set_value("style.heading_font_sizes", '{"1": 7, "2": 5, "3": 3}')

    reloaded = ConfigManager(config_dir).load()
    assert reloaded.style.include_prologue is False
    assert reloaded.viewer.font_size == 14
    assert reloaded.style.heading_font_sizes == {1: 7, 2: 5, 3: 3}


@pytest.mark.parametrize("key", ["style.nope", "nope", "style", "model_config.x", ""])
def test_set_value_unknown_key(config_dir: Path, key: str) -> None:
    with pytest.raises(ConfigError) as excinfo:
        ConfigManager(config_dir).set_value(key, "1")
    assert excinfo.value.key == key


def test_set_value_invalid_value(config_dir: Path) -> None:
    """Invalid values raise ConfigError and nothing is written."""
    manager = ConfigManager(config_dir)
    with pytest.raises(ConfigError) as excinfo:
        manager.set_value("viewer.font_size", "2")
    assert excinfo.value.details["errors"]
    assert not manager.config_file.exists()
    assert manager.get_config().viewer.font_size == 11


def test_corrupt_file_falls_back_to_defaults(config_dir: Path) -> None:
    (config_dir / "config.json").write_text("{not json", encoding="utf-8")
    assert ConfigManager(config_dir).load() == RichMarkConfig()


def test_invalid_values_in_file_fall_back_to_defaults(config_dir: Path) -> None:
    (config_dir / "config.json").write_text(
        json.dumps({"style": {"blockquote_color": "grey"}}), encoding="utf-8"
    )
    assert ConfigManager(config_dir).load() == RichMarkConfig()


def test_reset(config_dir: Path) -> None:
    manager = ConfigManager(config_dir)
    manager.set_value("style.include_prologue", "false")
    manager.reset()
    assert ConfigManager(config_dir).load() == RichMarkConfig()


def test_save_creates_directory(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir"
    ConfigManager(target).save(RichMarkConfig())
    data = json.loads((target / "config.json").read_text(encoding="utf-8"))
    assert data["style"]["heading_font_sizes"] == {"1": 6, "2": 5, "3": 4}


def test_get_config_manager_replaces_instance_for_new_dir(config_dir: Path, tmp_path: Path) -> None:
    first = get_config_manager(config_dir)
    assert first.config_dir == config_dir
    assert get_config_manager() is first
    second = get_config_manager(tmp_path)
    assert second is not first
    assert second.config_dir == tmp_path
