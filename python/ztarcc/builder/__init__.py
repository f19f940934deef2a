"""Dictionary compiler module.

Builds the compiled conversion data:
- One prefix-trie artifact per conversion pass
- The segmenter vocabulary (long dictionary keys)
- A manifest naming every artifact
"""

from .compiler import BuildStats, DictionaryCompiler, PASS_TABLES

__all__ = [
    "BuildStats",
    "DictionaryCompiler",
    "PASS_TABLES",
]
