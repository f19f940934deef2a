"""Mapping-table ingestion module.

Usage:
    from ztarcc.ingest import opencc, reverse_table

    table = opencc.ingest("path/to/STCharacters.txt")
    inverse = reverse_table(table)     # named "!STCharacters"
"""

from .base import Ingestor, reverse_table, REVERSED_PREFIX
from . import opencc

__all__ = [
    "Ingestor",
    "reverse_table",
    "REVERSED_PREFIX",
    "opencc",
]
