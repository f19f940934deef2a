"""Read side of the compiled dictionaries.

A DictionaryRegistry loads every pass and the vocabulary exactly once, on
first access, under a lock. Concurrent first callers wait for that single
load. Afterwards the tries are frozen and reads take no lock.

A failed load is cached: every later access raises the same LoadError.
"""

from pathlib import Path
from typing import Optional
import json
import logging
import pickle
import threading
import time
import zlib

from . import artifacts
from . import config as cfg
from .errors import LoadError
from .schema import PassId
from .trie import PrefixTrie

logger = logging.getLogger(__name__)


class DictionaryRegistry:
    """Lazily loaded, immutable set of compiled pass dictionaries."""

    def __init__(self, directory: Path | str):
        """Initialize registry. Nothing is read until first access.

        Args:
            directory: Directory written by DictionaryCompiler.
        """
        self.directory = Path(directory)
        self._lock = threading.Lock()
        self._passes: Optional[dict[PassId, PrefixTrie]] = None
        self._keys: frozenset[str] = frozenset()
        self._error: Optional[LoadError] = None
        self.load_count = 0

    def __repr__(self) -> str:
        state = "loaded" if self.loaded else "pending"
        return f"DictionaryRegistry({str(self.directory)!r}, {state})"

    @property
    def loaded(self) -> bool:
        return self._passes is not None

    def load(self) -> "DictionaryRegistry":
        """Load everything now if not done yet. Returns self.

        Raises:
            LoadError: If any artifact is missing or corrupt.
        """
        if self._passes is not None:
            return self

        with self._lock:
            if self._error is not None:
                raise self._error
            if self._passes is None:
                self.load_count += 1
                try:
                    passes, keys = self._read_all()
                except LoadError as e:
                    logger.error("Failed to load dictionaries from %s: %s", self.directory, e)
                    self._error = e
                    raise
                self._keys = keys
                # Published last; readers outside the lock test this field
                self._passes = passes
        return self

    def get(self, pass_id: PassId) -> PrefixTrie:
        """Get the trie for one pass."""
        return self.load()._passes[pass_id]

    def keys(self) -> frozenset[str]:
        """Get the segmenter vocabulary."""
        return self.load()._keys

    def _read_all(self) -> tuple[dict[PassId, PrefixTrie], frozenset[str]]:
        start = time.perf_counter()
        manifest_path = self.directory / artifacts.MANIFEST_NAME
        try:
            with open(manifest_path, encoding="utf-8") as f:
                manifest = json.load(f)
        except FileNotFoundError:
            raise LoadError(
                f"no compiled dictionaries in {self.directory} (run ztarcc-build)"
            ) from None
        except (OSError, json.JSONDecodeError) as e:
            raise LoadError(f"failed to read {manifest_path}: {e}") from e

        if not isinstance(manifest, dict) or manifest.get("format") != artifacts.ARTIFACT_FORMAT:
            raise LoadError(f"unsupported manifest format in {manifest_path}")

        entries = manifest.get("passes") or {}
        passes: dict[PassId, PrefixTrie] = {}
        for pass_id in PassId:
            filename = entries.get(pass_id.value)
            if filename is None:
                raise LoadError(f"manifest has no entry for dictionary {pass_id.value}")
            state = self._read_artifact(filename)
            try:
                passes[pass_id] = PrefixTrie.from_state(state)
            except ValueError as e:
                raise LoadError(f"failed to load dictionary {pass_id.value}: {e}") from e

        keys = self._read_artifact(manifest.get("keys", artifacts.KEYS_NAME))
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise LoadError("failed to load extra words: not a list of strings")

        logger.info(
            "Loaded %d dictionaries and %d extra words in %.3fs",
            len(passes),
            len(keys),
            time.perf_counter() - start,
        )
        return passes, frozenset(keys)

    def _read_artifact(self, filename: str):
        path = self.directory / filename
        try:
            blob = path.read_bytes()
        except OSError as e:
            raise LoadError(f"failed to read {path}: {e}") from e
        try:
            return artifacts.decode(blob)
        except zlib.error as e:
            raise LoadError(f"failed to decompress {filename}: {e}") from e
        except pickle.UnpicklingError as e:
            raise LoadError(f"failed to deserialize {filename}: {e}") from e


_default: Optional[DictionaryRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> DictionaryRegistry:
    """Process-wide registry over the configured compiled directory."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = DictionaryRegistry(cfg.default_dict_dir())
    return _default
