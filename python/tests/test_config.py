"""Tests for the config module."""

import pytest
from pathlib import Path

from ztarcc import config as cfg


@pytest.fixture
def defaults(monkeypatch):
    """Replace the loaded configuration with an editable one."""
    values = dict(cfg.FALLBACK_DEFAULTS)
    monkeypatch.setattr(cfg, "_config", {"defaults": values})
    return values


class TestConfig:
    """Tests for configuration accessors."""

    def test_load_has_defaults(self):
        """Test that loading always yields a defaults section."""
        assert "defaults" in cfg.load()

    def test_get_default_fallback(self, defaults):
        """Test the fallback for unknown keys."""
        assert cfg.get_default("missing", 42) == 42

    def test_relative_dirs_resolve_to_package(self, defaults):
        """Test that relative directories are package relative."""
        assert cfg.default_source_dir() == cfg.PACKAGE_DIR / "data" / "dictionary"
        assert cfg.default_output_dir() == cfg.PACKAGE_DIR / "data" / "compiled"

    def test_absolute_dir(self, defaults, tmp_path):
        """Test that absolute directories are kept."""
        defaults["output_dir"] = str(tmp_path)
        assert cfg.default_output_dir() == tmp_path

    def test_dict_dir_env(self, defaults, monkeypatch, tmp_path):
        """Test the environment override for compiled dictionaries."""
        monkeypatch.setenv(cfg.DICT_DIR_ENV, str(tmp_path))
        assert cfg.default_dict_dir() == Path(tmp_path)

    def test_dict_dir_default(self, defaults, monkeypatch):
        """Test the compiled directory without override."""
        monkeypatch.delenv(cfg.DICT_DIR_ENV, raising=False)
        assert cfg.default_dict_dir() == cfg.default_output_dir()

    def test_workers(self, defaults):
        """Test worker count resolution."""
        assert cfg.default_workers() is None
        defaults["workers"] = 4
        assert cfg.default_workers() == 4
        defaults["parallel"] = False
        assert cfg.default_workers() == 1

    def test_scripts(self, defaults):
        """Test the default conversion direction."""
        assert cfg.default_from() == "cn"
        assert cfg.default_to() == "tw"

    def test_reset(self, monkeypatch):
        """Test that reset forces a reload."""
        monkeypatch.setattr(cfg, "_config", {"defaults": {}})
        cfg.reset()
        assert cfg._config is None
        assert "defaults" in cfg.load()
