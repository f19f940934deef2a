"""Conversion pipeline: segment, route, rewrite.

Each token is rewritten by the two passes of its route. A pass scans the
token's UTF-8 bytes left to right; at each position the longest dictionary
key wins, and when nothing matches one codepoint is copied through. Every
byte is consumed exactly once per pass, so conversion never fails on text.

Usage:
    from ztarcc import Script, convert
    "".join(convert(Script.CN, Script.TW, "他们是勇敢的士兵"))
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional
import logging
import threading

from . import config as cfg
from .registry import DictionaryRegistry, default_registry
from .schema import Script, resolve
from .segment import Segmenter, create_segmenter
from .trie import PrefixTrie

logger = logging.getLogger(__name__)


def _codepoint_width(lead: int) -> int:
    """Byte length of a UTF-8 sequence from its lead byte."""
    if lead < 0x80:
        return 1
    if lead < 0xE0:
        return 2
    if lead < 0xF0:
        return 3
    return 4


def rewrite(trie: PrefixTrie, token: str) -> str:
    """Longest-prefix rewrite of one token with one pass."""
    data = token.encode("utf-8", "surrogatepass")
    parts = []
    offset = 0
    end = len(data)
    while offset < end:
        match = trie.longest_prefix(data, offset)
        if match is not None:
            length, value = match
            parts.append(value)
        else:
            length = _codepoint_width(data[offset])
            parts.append(data[offset:offset + length].decode("utf-8", "surrogatepass"))
        offset += length
    return "".join(parts)


def convert_word(passes: Iterable[PrefixTrie], word: str) -> str:
    """Apply each pass in order to a single word."""
    for trie in passes:
        word = rewrite(trie, word)
    return word


class Converter:
    """Converts text between scripts using one registry and one segmenter."""

    def __init__(
        self,
        registry: Optional[DictionaryRegistry] = None,
        segmenter: Optional[Segmenter] = None,
    ):
        """Initialize converter. Dictionaries load on first conversion.

        Args:
            registry: Compiled dictionaries (default: process-wide registry).
            segmenter: Word segmenter (default: configured backend).
        """
        self.registry = registry if registry is not None else default_registry()
        self._segmenter = segmenter
        self._lock = threading.Lock()
        self._ready = False

    def prepare(self) -> Segmenter:
        """Load dictionaries and augment the segmenter vocabulary, once.

        Raises:
            LoadError: If the registry cannot load.
        """
        if self._ready:
            return self._segmenter

        with self._lock:
            if not self._ready:
                keys = self.registry.keys()
                if self._segmenter is None:
                    self._segmenter = create_segmenter(cfg.default_segmenter())
                # Sorted so the augmented vocabulary is built the same way every run
                added = self._segmenter.add_words(sorted(keys))
                logger.info("Added %d extra words to %s segmenter", added, self._segmenter.name)
                self._ready = True
        return self._segmenter

    def cut(self, text: str) -> list[str]:
        """Segment text with the augmented vocabulary."""
        return list(self.prepare().cut(text))

    def convert(self, source: Script, target: Script, text: str) -> list[str]:
        """Convert text; the joined result is the converted text."""
        segmenter = self.prepare()
        passes = [self.registry.get(pass_id) for pass_id in resolve(source, target)]
        return [convert_word(passes, word) for word in segmenter.cut(text)]

    def convert_text(self, source: Script, target: Script, text: str) -> str:
        return "".join(self.convert(source, target, text))

    def convert_lines(
        self,
        source: Script,
        target: Script,
        text: str,
        workers: Optional[int] = None,
    ) -> list[str]:
        """Convert line by line in a thread pool, keeping input order.

        Line endings are preserved, so "".join(result) is the converted text.
        A worker count of 0 or None lets the executor decide.
        """
        if workers is not None and workers < 0:
            raise ValueError(f"workers must not be negative: {workers}")
        lines = text.splitlines(keepends=True)
        if not lines:
            return []
        self.prepare()
        if workers == 1 or len(lines) == 1:
            return [self.convert_text(source, target, line) for line in lines]

        with ThreadPoolExecutor(max_workers=workers or None) as executor:
            return list(
                executor.map(lambda line: self.convert_text(source, target, line), lines)
            )


_default: Optional[Converter] = None
_default_lock = threading.Lock()


def default_converter() -> Converter:
    """Process-wide converter over the default registry."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Converter()
    return _default


def convert(
    source: Script,
    target: Script,
    text: str,
    converter: Optional[Converter] = None,
) -> list[str]:
    """Convert text from one script to another.

    Args:
        source: Script of the input text.
        target: Script to produce.
        text: Input text.
        converter: Converter to use (default: process-wide converter).

    Returns:
        Converted tokens; their concatenation is the output text.

    Raises:
        LoadError: If the compiled dictionaries cannot be loaded.
    """
    return (converter or default_converter()).convert(source, target, text)
