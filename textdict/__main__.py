"""
CLI interface for text dictionaries.

Usage:
    python -m textdict match <dict file> "<text>" [options]
    python -m textdict info <dict file> [--json]
    python -m textdict normalize <dict file> [-o <output file>]

Options:
    --all                 Show every matching prefix, not only the longest
    --start N             Byte offset to match at
    --json                Output as JSON
    --on-duplicate P      error | keep_first | replace
    --log-level LEVEL     DEBUG, INFO, WARNING, ...
    --log-format FORMAT   console | json
"""

import argparse
import sys
from typing import List, Optional

from .core.entry import DictEntry
from .core.options import DictOptions, DuplicatePolicy
from .core.text_dict import TextDict
from .errors import EncodingError, TextDictError
from .formatters.json_formatter import format_info_json, format_match_json
from .logging_config import configure_logging
from .settings import ALLOWED_VALUES, load_settings


def format_entry(entry: DictEntry, indent: int = 2) -> str:
    """Format a single entry for display."""
    prefix = " " * indent
    return f"{prefix}{entry.key_text}  ->  {' '.join(entry.values_text)}"


def format_matches(text: str, matches: List[DictEntry], start: int = 0) -> str:
    """Format match results for display."""
    lines = [
        "=" * 60,
        "Prefix Matches",
        "=" * 60,
        f"Text: {text!r}",
        f"Start: {start}",
        "-" * 40,
    ]

    if not matches:
        lines.append("  (no match)")
    for entry in matches:
        lines.append(format_entry(entry))

    return '\n'.join(lines)


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def cmd_match(args: argparse.Namespace, options: DictOptions) -> int:
    try:
        text = args.text.encode("utf-8")
    except UnicodeEncodeError as exc:
        # Undecodable argv bytes arrive as lone surrogates
        raise EncodingError("Query text is not valid UTF-8") from exc

    dictionary = TextDict.from_file(args.dictionary, options)

    if args.all:
        matches = dictionary.match_all_prefixes(text, start=args.start)
    else:
        entry = dictionary.match_longest_prefix(text, start=args.start)
        matches = [entry] if entry is not None else []

    if args.json:
        print(format_match_json(args.text, matches, start=args.start))
    else:
        print(format_matches(args.text, matches, start=args.start))

    return 0 if matches else 1


def cmd_info(args: argparse.Namespace, options: DictOptions) -> int:
    dictionary = TextDict.from_file(args.dictionary, options)

    if args.json:
        print(format_info_json(len(dictionary), dictionary.key_max_length(), args.dictionary))
    else:
        print(f"Path: {args.dictionary}")
        print(f"Entries: {len(dictionary)}")
        print(f"Max key length: {dictionary.key_max_length()} bytes")
    return 0


def cmd_normalize(args: argparse.Namespace, options: DictOptions) -> int:
    dictionary = TextDict.from_file(args.dictionary, options)

    if args.output:
        dictionary.serialize_to_file(args.output)
    else:
        dictionary.serialize_to_stream(sys.stdout.buffer)
        sys.stdout.buffer.flush()
    return 0


def build_parser(settings: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='textdict',
        description='Query and normalize text substitution dictionaries'
    )

    parser.add_argument(
        '--log-level',
        type=str.upper,
        choices=ALLOWED_VALUES["log_level"],
        default=settings["log_level"],
        help='Minimum log level (default: %(default)s)'
    )

    parser.add_argument(
        '--log-format',
        choices=ALLOWED_VALUES["log_format"],
        default=settings["log_format"],
        help='Log output format (default: %(default)s)'
    )

    parser.add_argument(
        '--on-duplicate',
        choices=[p.value for p in DuplicatePolicy],
        default=settings["duplicate_policy"],
        help='How to handle keys that appear more than once (default: %(default)s)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    match = subparsers.add_parser('match', help='Match dictionary keys against text')
    match.add_argument('dictionary', help='Dictionary file')
    match.add_argument('text', help='Text to match at')
    match.add_argument(
        '--all',
        action='store_true',
        help='Show every matching prefix, longest first'
    )
    match.add_argument(
        '--start',
        type=non_negative_int,
        default=0,
        help='Byte offset in the UTF-8 encoded text'
    )
    match.add_argument('--json', action='store_true', help='Output result as JSON')
    match.set_defaults(handler=cmd_match)

    info = subparsers.add_parser('info', help='Show dictionary statistics')
    info.add_argument('dictionary', help='Dictionary file')
    info.add_argument('--json', action='store_true', help='Output result as JSON')
    info.set_defaults(handler=cmd_info)

    normalize = subparsers.add_parser(
        'normalize',
        help='Rewrite a dictionary sorted by key'
    )
    normalize.add_argument('dictionary', help='Dictionary file')
    normalize.add_argument(
        '-o', '--output',
        default=None,
        help='Output file (defaults to stdout)'
    )
    normalize.set_defaults(handler=cmd_normalize)

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    configure_logging(args.log_level, args.log_format)
    options = DictOptions(duplicate_policy=DuplicatePolicy(args.on_duplicate))

    try:
        return args.handler(args, options)
    except TextDictError as exc:
        print(f"error [{exc.code.value}]: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
