"""Configuration loader for ztarcc.

Loads defaults from config.json at project root, with hardcoded fallbacks.
Relative directories are resolved against the package directory.
"""

import json
import os
from pathlib import Path
from typing import Any

PACKAGE_DIR = Path(__file__).parent

# Overrides the compiled dictionary directory used by the default registry
DICT_DIR_ENV = "ZTARCC_DICT_DIR"

# Hardcoded fallback defaults
FALLBACK_DEFAULTS = {
    "source_dir": "data/dictionary",
    "output_dir": "data/compiled",
    "from": "cn",
    "to": "tw",
    "parallel": True,
    "workers": 0,
    "compression_level": 6,
    "vocab_min_length": 3,
    "segmenter": "jieba",
}

_config: dict[str, Any] | None = None


def _find_config() -> Path | None:
    """Find config.json by walking up from current file."""
    paths = [
        PACKAGE_DIR.parent.parent / "config.json",  # python/ztarcc -> root
        Path.cwd() / "config.json",
        Path.cwd().parent / "config.json",
    ]
    for path in paths:
        if path.exists():
            return path
    return None


def load() -> dict[str, Any]:
    """Load configuration from config.json or use fallbacks."""
    global _config
    if _config is not None:
        return _config

    config_path = _find_config()
    if config_path:
        try:
            with open(config_path, encoding="utf-8") as f:
                _config = json.load(f)
                return _config
        except (json.JSONDecodeError, OSError):
            pass

    # Fallback
    _config = {"defaults": FALLBACK_DEFAULTS}
    return _config


def reset() -> None:
    """Forget the loaded configuration so the next access re-reads it."""
    global _config
    _config = None


def get_default(key: str, fallback: Any = None) -> Any:
    """Get a default value from config."""
    cfg = load()
    return cfg.get("defaults", {}).get(key, fallback)


def _resolve_dir(value: str) -> Path:
    return PACKAGE_DIR / Path(value).expanduser()


# Convenience accessors
def default_source_dir() -> Path:
    return _resolve_dir(get_default("source_dir", FALLBACK_DEFAULTS["source_dir"]))


def default_output_dir() -> Path:
    return _resolve_dir(get_default("output_dir", FALLBACK_DEFAULTS["output_dir"]))


def default_dict_dir() -> Path:
    """Compiled dictionary directory, honouring ZTARCC_DICT_DIR."""
    override = os.environ.get(DICT_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return default_output_dir()


def default_from() -> str:
    return get_default("from", FALLBACK_DEFAULTS["from"])


def default_to() -> str:
    return get_default("to", FALLBACK_DEFAULTS["to"])


def default_workers() -> int | None:
    """Worker count for parallel conversion; None lets the executor decide."""
    if not get_default("parallel", FALLBACK_DEFAULTS["parallel"]):
        return 1
    workers = get_default("workers", FALLBACK_DEFAULTS["workers"])
    return workers or None


def default_compression_level() -> int:
    return get_default("compression_level", FALLBACK_DEFAULTS["compression_level"])


def default_vocab_min_length() -> int:
    return get_default("vocab_min_length", FALLBACK_DEFAULTS["vocab_min_length"])


def default_segmenter() -> str:
    return get_default("segmenter", FALLBACK_DEFAULTS["segmenter"])
