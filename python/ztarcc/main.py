"""ztarcc CLI - Convert between Chinese scripts.

Usage:
    ztarcc input.txt output.txt --from cn --to tw
    cat input.txt | ztarcc - - -f hk -t cn
    ztarcc-build --source-dir opencc/data/dictionary
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from charset_normalizer import from_bytes

from . import config as cfg
from .builder import DictionaryCompiler
from .embed import CODES
from .errors import InputEncodingError, ZtarccError
from .pipeline import Converter
from .registry import DictionaryRegistry

# Encodings accepted for input text
SOURCE_ENCODINGS = ["utf_8", "big5", "gb18030"]


def decode_input(data: bytes) -> str:
    """Decode raw input: strict UTF-8 first, otherwise detect big5/gb18030.

    Raises:
        InputEncodingError: If no supported encoding fits.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    best = from_bytes(data, cp_isolation=SOURCE_ENCODINGS).best()
    if best is None:
        raise InputEncodingError("Failed to detect source encoding")
    if best.encoding not in SOURCE_ENCODINGS and best.encoding != "ascii":
        raise InputEncodingError(f"Failed to decode from {best.encoding}")
    return str(best)


def _worker_count(value: str) -> int:
    """argparse type for --workers: 0 means the executor default."""
    workers = int(value)
    if workers < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {workers}")
    return workers


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _write_output(path: str, chunks: list[str]) -> None:
    if path == "-":
        # Always UTF-8, whatever the locale encoding of stdout
        sys.stdout.flush()
        out = sys.stdout.buffer
        for chunk in chunks:
            out.write(chunk.encode("utf-8"))
        out.flush()
        return
    with open(path, "w", encoding="utf-8", newline="") as f:
        for chunk in chunks:
            f.write(chunk)


def main(argv: Optional[list[str]] = None) -> int:
    """Convert a file or stream."""
    codes = sorted(CODES)

    parser = argparse.ArgumentParser(
        description="ztarcc - Convert between Chinese scripts"
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help='The input file to convert. Use "-" to read from standard in.',
    )
    parser.add_argument(
        "output",
        nargs="?",
        default="-",
        help='The output file. Use "-" to print to standard output.',
    )
    parser.add_argument(
        "--from",
        "-f",
        dest="source",
        choices=codes,
        default=cfg.default_from(),
        help=f"The input script (default: {cfg.default_from()})",
    )
    parser.add_argument(
        "--to",
        "-t",
        dest="target",
        choices=codes,
        default=cfg.default_to(),
        help=f"The output script (default: {cfg.default_to()})",
    )
    parser.add_argument(
        "--dict-dir",
        "-d",
        type=Path,
        default=cfg.default_dict_dir(),
        help="Directory of compiled dictionaries",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=_worker_count,
        default=cfg.default_workers(),
        help="Threads used to convert lines in parallel (0: executor default)",
    )

    args = parser.parse_args(argv)

    try:
        text = decode_input(_read_input(args.input))
        converter = Converter(DictionaryRegistry(args.dict_dir))
        chunks = converter.convert_lines(
            CODES[args.source], CODES[args.target], text, workers=args.workers or None
        )
        _write_output(args.output, chunks)
    except (ZtarccError, OSError) as e:
        print(f"ERROR - {e}", file=sys.stderr)
        return 1

    return 0


def build_main(argv: Optional[list[str]] = None) -> int:
    """Compile mapping tables into conversion dictionaries."""
    parser = argparse.ArgumentParser(
        description="ztarcc-build - Compile conversion dictionaries"
    )
    parser.add_argument(
        "--source-dir",
        "-s",
        type=Path,
        default=cfg.default_source_dir(),
        help="Directory of OpenCC mapping tables (<Name>.txt)",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=cfg.default_output_dir(),
        help="Output directory for compiled dictionaries",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=cfg.default_compression_level(),
        help=f"zlib compression level (default: {cfg.default_compression_level()})",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only print errors",
    )

    args = parser.parse_args(argv)

    def log(*parts) -> None:
        if not args.quiet:
            print(*parts, file=sys.stderr)

    log("=" * 60)
    log("ztarcc - Dictionary Compiler")
    log("=" * 60)
    log(f"Sources: {args.source_dir}")
    log(f"Output: {args.output_dir}")
    log()

    compiler = DictionaryCompiler(
        source_dir=args.source_dir,
        output_dir=args.output_dir,
        compression_level=args.level,
        vocab_min_length=cfg.default_vocab_min_length(),
    )
    try:
        stats = compiler.build()
    except ZtarccError as e:
        print(f"ERROR - {e}", file=sys.stderr)
        return 1

    log("  Tables:")
    for name, count in sorted(stats.by_table.items()):
        log(f"    {name}: {count:,}")
    for name, count in sorted(stats.reverse_collisions.items()):
        log(f"    {name}: {count:,} reversed collisions")

    log("\n  Passes:")
    for name, count in stats.by_pass.items():
        log(f"    {name}: {count:,}")

    log(f"\n  Total keys: {stats.total_entries:,}")
    log(f"  Extra words: {stats.vocabulary_size:,}")
    log(f"  Files written: {len(stats.files_written)}")
    log("\n" + "=" * 60)
    log("Done!")
    log("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
