"""ztarcc - Convert between Chinese scripts.

Converts text between OpenCC standard traditional Chinese and three regional
orthographies (Mainland simplified, Taiwan, Hong Kong) using compiled
character and phrase tables.

Core concepts:
    - Every conversion routes through the standard form in two passes
    - Each pass is a longest-prefix rewrite over a byte-level trie
    - Long dictionary phrases are added to the segmenter so they stay whole

Example:
    CN "他们是勇敢的士兵" -> TW "他們是勇敢的士兵"

Usage:
    from ztarcc import DictionaryCompiler, DictionaryRegistry, Converter, Script

    # Compile mapping tables (offline, once)
    DictionaryCompiler("data/dictionary", "data/compiled").build()

    # Convert
    converter = Converter(DictionaryRegistry("data/compiled"))
    text = converter.convert_text(Script.CN, Script.TW, "我能吞下玻璃而不伤身体。")
"""

from .builder import BuildStats, DictionaryCompiler
from .pipeline import Converter, convert, convert_word, rewrite
from .errors import BuildError, InputEncodingError, LoadError, ZtarccError
from .registry import DictionaryRegistry, default_registry
from .schema import PassId, Script, resolve

__version__ = "0.1.0"

__all__ = [
    "BuildError",
    "BuildStats",
    "Converter",
    "DictionaryCompiler",
    "DictionaryRegistry",
    "InputEncodingError",
    "LoadError",
    "PassId",
    "Script",
    "ZtarccError",
    "convert",
    "convert_word",
    "default_registry",
    "resolve",
    "rewrite",
]
