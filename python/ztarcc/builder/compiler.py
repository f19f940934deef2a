"""Dictionary compiler producing the per-pass trie artifacts.

Reads the OpenCC mapping tables named in PASS_TABLES, derives the reversed
tables ("!" prefix), merges each pass into a fresh PrefixTrie in declared
order and writes one compressed artifact per pass, one for the
segmenter vocabulary and a manifest tying them together.

Artifacts are written into a staging directory first and only moved into
the output directory once every pass compiled, so a failed build never
leaves a usable partial set behind.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
import json
import logging
import os
import tempfile

from .. import artifacts
from ..errors import BuildError
from ..ingest import opencc
from ..ingest.base import REVERSED_PREFIX, reverse_table
from ..schema import MappingTable, PassId
from ..trie import PrefixTrie

logger = logging.getLogger(__name__)

# Tables composing each pass, in insertion order. Later tables overwrite
# same-key entries of earlier ones.
PASS_TABLES: dict[PassId, tuple[str, ...]] = {
    PassId.FROM_STANDARD: (),
    PassId.FROM_CHINA: ("STCharacters", "STPhrases"),
    PassId.FROM_TAIWAN: (
        "!TWVariants",
        "TWVariantsRevPhrases",
        "!TWPhrasesIT",
        "!TWPhrasesName",
        "!TWPhrasesOther",
    ),
    PassId.FROM_HONG_KONG: ("!HKVariants", "HKVariantsRevPhrases"),
    PassId.TO_STANDARD: (),
    PassId.TO_CHINA: ("TSCharacters", "TSPhrases"),
    PassId.TO_TAIWAN: (
        "TWVariants",
        "TWPhrasesIT",
        "TWPhrasesName",
        "TWPhrasesOther",
    ),
    PassId.TO_HONG_KONG: ("HKVariants",),
}


@dataclass
class BuildStats:
    """Statistics from a build operation."""

    total_entries: int = 0
    by_pass: dict[str, int] = field(default_factory=dict)
    by_table: dict[str, int] = field(default_factory=dict)
    reverse_collisions: dict[str, int] = field(default_factory=dict)
    vocabulary_size: int = 0
    files_written: list[str] = field(default_factory=list)


class DictionaryCompiler:
    """Compiles mapping tables into per-pass trie artifacts."""

    def __init__(
        self,
        source_dir: Path | str,
        output_dir: Path | str,
        pass_tables: Optional[dict[PassId, tuple[str, ...]]] = None,
        compression_level: int = 6,
        vocab_min_length: int = 3,
    ):
        """Initialize compiler.

        Args:
            source_dir: Directory holding <Name>.txt mapping tables.
            output_dir: Directory receiving the compiled artifacts.
            pass_tables: Table composition per pass (defaults to PASS_TABLES).
            compression_level: zlib level for every artifact.
            vocab_min_length: Keys longer than this many UTF-8 bytes join
                the segmenter vocabulary.
        """
        self.source_dir = Path(source_dir)
        self.output_dir = Path(output_dir)
        self.pass_tables = dict(PASS_TABLES if pass_tables is None else pass_tables)
        self.compression_level = compression_level
        self.vocab_min_length = vocab_min_length

        missing = set(PassId) - set(self.pass_tables)
        if missing:
            raise BuildError(
                f"no table list for passes {sorted(p.value for p in missing)}"
            )

    def table_names(self) -> list[str]:
        """Forward table names referenced by any pass, first use order."""
        names: list[str] = []
        for tables in self.pass_tables.values():
            for name in tables:
                name = name.removeprefix(REVERSED_PREFIX)
                if name not in names:
                    names.append(name)
        return names

    def load_tables(self) -> dict[str, MappingTable]:
        """Parse every referenced source once, then derive the reversals.

        Raises:
            BuildError: On a missing or malformed source.
        """
        tables: dict[str, MappingTable] = {}
        for name in self.table_names():
            path = self.source_dir / f"{name}.txt"
            if not path.is_file():
                raise BuildError(f"failed to read {name}: {path} does not exist")
            tables[name] = opencc.ingest(path, name=name)

        for pass_tables in self.pass_tables.values():
            for name in pass_tables:
                if name.startswith(REVERSED_PREFIX) and name not in tables:
                    forward = tables.get(name.removeprefix(REVERSED_PREFIX))
                    if forward is None:
                        raise BuildError(f"failed to find dict {name}")
                    tables[name] = reverse_table(forward)

        return tables

    def compile_pass(
        self,
        pass_id: PassId,
        tables: dict[str, MappingTable],
        vocabulary: set[str],
    ) -> PrefixTrie:
        """Merge the tables of one pass into a fresh trie.

        Long keys are added to `vocabulary` as they are inserted.

        Raises:
            BuildError: If the pass references an unknown table.
        """
        trie = PrefixTrie()
        for name in self.pass_tables[pass_id]:
            table = tables.get(name)
            if table is None:
                raise BuildError(
                    f"failed to find dictionary {name} while constructing {pass_id.value}"
                )
            for key, value in table.entries.items():
                trie.insert(key, value)
                if len(key.encode("utf-8")) > self.vocab_min_length:
                    vocabulary.add(key)

        logger.info("Compiled %s: %d keys", pass_id.value, len(trie))
        return trie.freeze()

    def build(self) -> BuildStats:
        """Compile every pass and write artifacts plus manifest.

        Returns:
            BuildStats with counts and file paths.

        Raises:
            BuildError: On any failure; nothing is written to output_dir then.
        """
        stats = BuildStats()
        tables = self.load_tables()
        for name, table in tables.items():
            stats.by_table[name] = len(table)
            if table.reversed_from and table.total_duplicates:
                stats.reverse_collisions[name] = table.total_duplicates

        vocabulary: set[str] = set()
        compiled = {
            pass_id: self.compile_pass(pass_id, tables, vocabulary)
            for pass_id in PassId
        }

        try:
            self.output_dir.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(
                prefix=".ztarcc-build-", dir=self.output_dir.parent
            ) as staging:
                staging_dir = Path(staging)
                manifest = {
                    "format": artifacts.ARTIFACT_FORMAT,
                    "generated_at": datetime.now(timezone.utc).isoformat(),
                    "passes": {},
                    "keys": artifacts.KEYS_NAME,
                }

                for pass_id, trie in compiled.items():
                    filename = pass_id.value + artifacts.ARTIFACT_SUFFIX
                    self._write(staging_dir / filename, trie.to_state())
                    manifest["passes"][pass_id.value] = filename
                    stats.by_pass[pass_id.value] = len(trie)
                    stats.total_entries += len(trie)

                self._write(staging_dir / artifacts.KEYS_NAME, sorted(vocabulary))
                stats.vocabulary_size = len(vocabulary)

                with open(staging_dir / artifacts.MANIFEST_NAME, "w", encoding="utf-8") as f:
                    json.dump(manifest, f, indent=2, ensure_ascii=False)

                self.output_dir.mkdir(parents=True, exist_ok=True)
                # Manifest last: readers only trust artifacts it names
                names = list(manifest["passes"].values()) + [
                    artifacts.KEYS_NAME,
                    artifacts.MANIFEST_NAME,
                ]
                for name in names:
                    target = self.output_dir / name
                    os.replace(staging_dir / name, target)
                    stats.files_written.append(str(target))
        except OSError as e:
            raise BuildError(f"writing compiled dictionaries to {self.output_dir}: {e}") from e

        logger.info(
            "Wrote %d files to %s (%d vocabulary keys)",
            len(stats.files_written),
            self.output_dir,
            stats.vocabulary_size,
        )
        return stats

    def _write(self, path: Path, obj) -> None:
        with open(path, "wb") as f:
            f.write(artifacts.encode(obj, self.compression_level))
