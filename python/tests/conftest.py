"""Pytest configuration and fixtures."""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ztarcc.builder import DictionaryCompiler
from ztarcc.pipeline import Converter
from ztarcc.registry import DictionaryRegistry
from ztarcc.schema import PassId
from ztarcc.segment import Segmenter

BUNDLED_DICTIONARY = Path(__file__).parent.parent / "ztarcc" / "data" / "dictionary"


class WholeTextSegmenter(Segmenter):
    """Returns the input as a single token and records added words."""

    name = "whole"

    def __init__(self):
        self.words: list[str] = []

    def cut(self, text):
        return [text] if text else []

    def add_word(self, word):
        self.words.append(word)


def empty_pass_tables(**overrides) -> dict:
    """Pass table layout with every pass empty except `overrides`.

    Keys are PassId member names, e.g. FROM_CHINA=("A", "B").
    """
    tables = {pass_id: () for pass_id in PassId}
    for name, names in overrides.items():
        tables[PassId[name]] = tuple(names)
    return tables


@pytest.fixture
def write_tables(tmp_path):
    """Write {name: content} mapping tables into a fresh source directory."""

    def _write(tables: dict[str, str]) -> Path:
        source_dir = tmp_path / "sources"
        source_dir.mkdir(exist_ok=True)
        for name, content in tables.items():
            (source_dir / f"{name}.txt").write_text(content, encoding="utf-8")
        return source_dir

    return _write


@pytest.fixture(scope="session")
def compiled_dir(tmp_path_factory):
    """Bundled sample tables compiled once per test session."""
    output_dir = tmp_path_factory.mktemp("compiled")
    DictionaryCompiler(BUNDLED_DICTIONARY, output_dir).build()
    return output_dir


@pytest.fixture
def registry(compiled_dir):
    """A fresh, not yet loaded registry per test."""
    return DictionaryRegistry(compiled_dir)


@pytest.fixture
def whole_converter(registry):
    """Converter that treats the whole input as one token."""
    return Converter(registry, segmenter=WholeTextSegmenter())


@pytest.fixture(scope="session")
def jieba_converter(compiled_dir):
    """Converter using the jieba segmenter (built once, it is slow to initialize)."""
    from ztarcc.segment import JiebaSegmenter

    return Converter(DictionaryRegistry(compiled_dir), segmenter=JiebaSegmenter())
