"""Base ingestor interface for mapping-table sources.

All ingestors inherit from Ingestor and implement the parse() method.
This provides a consistent API for loading key -> value tables from any
source format.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Optional
import logging

from ..errors import BuildError
from ..schema import MappingTable

logger = logging.getLogger(__name__)

REVERSED_PREFIX = "!"


class Ingestor(ABC):
    """Base class for mapping-table ingestors.

    Subclasses must implement:
        - parse(filepath) -> Iterator of (key, value, line_number) tuples

    The ingest() method handles duplicate accounting and MappingTable creation.
    """

    @abstractmethod
    def parse(self, filepath: Path) -> Iterator[tuple[str, str, Optional[int]]]:
        """Parse source file and yield (key, value, line_number) tuples.

        Args:
            filepath: Path to source file.

        Yields:
            Tuples of (key, value, line_number).

        Raises:
            BuildError: On a malformed line.
        """
        pass

    def get_table_name(self, filepath: Path) -> str:
        """Generate table name from filepath."""
        return filepath.stem

    def ingest(self, filepath: Path | str, name: Optional[str] = None) -> MappingTable:
        """Ingest a mapping table from file.

        Later lines overwrite earlier lines with the same key.

        Args:
            filepath: Path to source file.
            name: Table name (defaults to the file stem).

        Returns:
            MappingTable with entries and statistics.

        Raises:
            BuildError: If the file is missing, unreadable or malformed.
        """
        filepath = Path(filepath)
        table = MappingTable(
            name=name or self.get_table_name(filepath),
            source_path=str(filepath.resolve()),
        )

        try:
            for key, value, _line_num in self.parse(filepath):
                table.total_raw += 1
                if key in table.entries:
                    table.total_duplicates += 1
                table.entries[key] = value
        except OSError as e:
            raise BuildError(f"reading dictionary {table.name}: {e}") from e
        except UnicodeDecodeError as e:
            raise BuildError(f"dictionary {table.name} is not valid UTF-8: {e}") from e

        logger.info("Ingested %r", table)
        return table


def reverse_table(table: MappingTable) -> MappingTable:
    """Swap keys and values of an already parsed table.

    When several keys share a value, the key parsed last wins. The number of
    such collisions is kept in `total_duplicates`.

    Args:
        table: Forward table.

    Returns:
        New MappingTable named "!<name>".
    """
    reversed_table = MappingTable(
        name=REVERSED_PREFIX + table.name,
        source_path=table.source_path,
        total_raw=len(table.entries),
        reversed_from=table.name,
    )
    for key, value in table.entries.items():
        if value in reversed_table.entries:
            reversed_table.total_duplicates += 1
        reversed_table.entries[value] = key

    if reversed_table.total_duplicates:
        logger.warning(
            "%s: %d duplicate values, last key in source order wins",
            reversed_table.name,
            reversed_table.total_duplicates,
        )
    return reversed_table
