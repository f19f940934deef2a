"""OpenCC mapping-table ingestor.

Format (UTF-8, one entry per line):
    key<TAB>value                   # single replacement
    key<TAB>value other more        # only the first candidate is used

Every line must contain a tab. A line whose value part is blank is skipped.
"""

import re
from pathlib import Path
from typing import Iterator, Optional

from ..errors import BuildError
from .base import Ingestor

# ASCII whitespace only; U+3000 and friends belong to the value
ASCII_WHITESPACE = re.compile(r"[ \t\n\f\r]+")


class OpenCCIngestor(Ingestor):
    """Ingestor for OpenCC dictionary text files."""

    def parse(self, filepath: Path) -> Iterator[tuple[str, str, Optional[int]]]:
        """Parse an OpenCC dictionary.

        Args:
            filepath: Path to .txt file.

        Yields:
            Tuples of (key, value, line_number).
        """
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")

                key, sep, rest = line.partition("\t")
                if not sep:
                    raise BuildError(
                        f"{filepath.name}:{line_num}: could not split line"
                    )
                if not key:
                    raise BuildError(f"{filepath.name}:{line_num}: empty key")

                candidates = ASCII_WHITESPACE.split(rest.strip(" \t\n\f\r"))
                if candidates[0]:
                    yield key, candidates[0], line_num


def ingest(filepath: Path | str, name: Optional[str] = None):
    """Convenience function to ingest an OpenCC dictionary.

    Args:
        filepath: Path to .txt file.
        name: Table name (defaults to the file stem).

    Returns:
        MappingTable with entries.
    """
    return OpenCCIngestor().ingest(filepath, name=name)
