"""
Chart Notes command line.

Usage:
    chartnotes decode --notes "[4 Hours]\nsetup" --image a.png
    chartnotes encode entries.json
    chartnotes encode analysis.json --phased
    chartnotes review backtests --journal journal/charts.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import pandas as pd
from loguru import logger

from chartnotes.codec import ChartCodec, ChartEntry, PhasedChartCodec
from chartnotes.config import LOG_LEVELS, CodecConfig
from chartnotes.exceptions import ChartNotesError, ConfigError
from chartnotes.journal import JournalStore
from chartnotes.records import RECORD_TYPES


def setup_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def _entries_json(entries) -> list:
    return [entry.to_dict() for entry in entries]


def _read_json(path: str):
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        raise ChartNotesError(f"File not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ChartNotesError(f"Invalid JSON in {path}: {e}") from e


def _read_text(path: str) -> str:
    try:
        return Path(path).read_text()
    except FileNotFoundError:
        raise ChartNotesError(f"File not found: {path}") from None
    except (IsADirectoryError, UnicodeDecodeError) as e:
        raise ChartNotesError(f"Cannot read {path}: {e}") from e


def _entry_from_json(item) -> ChartEntry:
    """Entry from CLI JSON input, rejecting values of the wrong type"""
    if not isinstance(item, dict):
        raise ChartNotesError(f"Chart entry must be an object, got {item!r}")
    images = item.get("images") or []
    if not isinstance(images, list) or not all(isinstance(image, str) for image in images):
        raise ChartNotesError(f"Chart entry images must be a list of strings, got {images!r}")
    notes = item.get("notes") or ""
    if not isinstance(notes, str):
        raise ChartNotesError(f"Chart entry notes must be a string, got {notes!r}")
    timeframe = item.get("timeframe")
    if timeframe is not None and not isinstance(timeframe, str):
        raise ChartNotesError(f"Chart entry timeframe must be a string, got {timeframe!r}")
    return ChartEntry.from_dict(item)


def cmd_decode(args, config: CodecConfig) -> int:
    """Decode stored chart notes into entries"""
    if args.notes_file:
        notes = _read_text(args.notes_file)
    else:
        notes = (args.notes or "").replace("\\n", "\n")

    codec = ChartCodec(config.table())
    if args.phased:
        charts = PhasedChartCodec(codec).decode(notes, args.image)
        result = {"before": _entries_json(charts.before), "after": _entries_json(charts.after)}
    else:
        result = _entries_json(codec.decode(notes, args.image))

    print(json.dumps(result, indent=2))
    return 0


def cmd_encode(args, config: CodecConfig) -> int:
    """Encode a JSON entry list into stored notes + images"""
    data = _read_json(args.file)
    codec = ChartCodec(config.table())

    if args.phased:
        if not isinstance(data, dict):
            raise ChartNotesError("--phased expects an object with 'before' and 'after' lists")
        before = [_entry_from_json(item) for item in data.get("before", [])]
        after = [_entry_from_json(item) for item in data.get("after", [])]
        encoded = PhasedChartCodec(codec).encode(before, after)
    else:
        if not isinstance(data, list):
            raise ChartNotesError("Expected a JSON list of chart entries")
        encoded = codec.encode(_entry_from_json(item) for item in data)

    print(json.dumps(encoded.to_dict(), indent=2))
    return 0


def cmd_review(args, config: CodecConfig) -> int:
    """Print every chart entry of one record kind"""
    store = JournalStore(args.journal or config.journal_path, ChartCodec(config.table()))
    frame = store.review_frame(args.kind)

    if frame.empty:
        print(f"No charted {args.kind} in {store.path}")
        return 0

    with pd.option_context("display.max_colwidth", 40, "display.width", 120):
        print(frame.to_string(index=False))
    print(f"\n{len(frame)} charts across {frame['record_id'].nunique()} {args.kind}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chartnotes",
        description="Encode, decode and review journal chart notes",
    )
    parser.add_argument("--config", help="JSON config file (defaults to CHARTNOTES_* env vars)")
    parser.add_argument("--log-level", help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command")

    decode_parser = subparsers.add_parser("decode", help="Decode stored notes into chart entries")
    source = decode_parser.add_mutually_exclusive_group()
    source.add_argument("--notes", help="Stored notes text (\\n is read as a newline)")
    source.add_argument("--notes-file", help="File holding the stored notes text")
    decode_parser.add_argument("--image", action="append", default=[], help="Stored image, repeat in order")
    decode_parser.add_argument("--phased", action="store_true", help="Decode before/after trade analysis")
    decode_parser.set_defaults(func=cmd_decode)

    encode_parser = subparsers.add_parser("encode", help="Encode chart entries from a JSON file")
    encode_parser.add_argument("file", help="JSON list of entries, or {before, after} with --phased")
    encode_parser.add_argument("--phased", action="store_true", help="Encode before/after trade analysis")
    encode_parser.set_defaults(func=cmd_encode)

    review_parser = subparsers.add_parser("review", help="Table of chart entries in the journal")
    review_parser.add_argument("kind", choices=sorted(RECORD_TYPES), help="Record kind")
    review_parser.add_argument("--journal", help="Journal JSON file")
    review_parser.set_defaults(func=cmd_review)

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = CodecConfig.from_file(args.config) if args.config else CodecConfig.from_env()
        level = args.log_level.upper() if args.log_level else config.log_level
        if level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {args.log_level}")
        setup_logging(level)
        return args.func(args, config)
    except ChartNotesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
