"""
Text Dictionary Format

Line-oriented UTF-8 format, one entry per line:

    <key><TAB><value1><SPACE><value2>...<valueN><LF>

- An optional UTF-8 byte-order mark is skipped on read; none is written.
- Lines may end in LF or CR LF; the last line may omit its terminator.
- There is no escaping, so keys cannot contain TAB/CR/LF/NUL and values
  cannot contain SPACE/CR/LF/NUL. A key cannot start with U+FEFF, which
  would be mistaken for a byte-order mark.
- Lines are read with the stream's own line iterator, so there is no line
  length limit.

Loading is all-or-nothing: every line is parsed before any entry is
inserted, and the lexicon is sorted once at the end.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Iterable, Iterator, List, Union

import structlog

from ..core.entry import DictEntry
from ..errors import (
    DictFileNotFoundError,
    FileWriteError,
    MalformedEntryError,
    UnrepresentableEntryError,
)
from ..utf8 import (
    find_next_delimiter,
    is_terminator,
    next_char_start,
    skip_utf8_bom,
    UTF8_BOM,
)

if TYPE_CHECKING:
    from ..core.text_dict import TextDict

logger = structlog.get_logger(__name__)

TAB = 0x09
SPACE = 0x20
LINE_ENDING = b"\n"

PathLike = Union[str, Path]

_KEY_FORBIDDEN = frozenset(b"\t\r\n\x00")
_VALUE_FORBIDDEN = frozenset(b" \r\n\x00")


def _byte_at(line: bytes, pos: int):
    return line[pos] if pos < len(line) else None


def parse_key_values(line: bytes) -> DictEntry:
    """
    Parse one dictionary line into an entry.

    Args:
        line: Raw line bytes, with or without its terminator

    Returns:
        DictEntry with at least one value

    Raises:
        MalformedEntryError: No tab before the terminator, an empty key,
            or an empty value
        EncodingError: The line is not valid UTF-8
    """
    pos = find_next_delimiter(line, TAB)
    if is_terminator(_byte_at(line, pos)):
        raise MalformedEntryError("Missing tab between key and values", line=line)
    if pos == 0:
        raise MalformedEntryError("Empty key", line=line)

    key = line[:pos]
    values: List[bytes] = []
    while not is_terminator(_byte_at(line, pos)):
        start = next_char_start(line, pos)
        pos = find_next_delimiter(line, SPACE, start)
        if pos == start:
            raise MalformedEntryError("Empty value", line=line)
        values.append(line[start:pos])

    return DictEntry(key, tuple(values))


def iter_entries(stream: BinaryIO) -> Iterator[DictEntry]:
    """
    Parse entries from a binary stream, skipping a leading BOM.

    Raises:
        MalformedEntryError: With ``line_number`` set to the 1-based line
    """
    if isinstance(stream, io.TextIOBase):
        raise TypeError("dictionary streams must be opened in binary mode")

    skip_utf8_bom(stream)
    for line_number, line in enumerate(stream, 1):
        try:
            yield parse_key_values(line)
        except MalformedEntryError as exc:
            raise MalformedEntryError(
                f"Line {line_number}: {exc}", line_number=line_number, line=line
            ) from exc


def load_from_stream(dictionary: "TextDict", stream: BinaryIO) -> int:
    """
    Load entries from a caller-owned binary stream into ``dictionary``.

    The stream is not closed. Nothing is inserted unless every line parses.

    Returns:
        Number of entries inserted
    """
    try:
        batch = list(iter_entries(stream))
    except MalformedEntryError as exc:
        logger.warning("textdict_load_failed", line_number=exc.line_number, error=str(exc))
        raise

    inserted = dictionary.insert_many(batch)
    dictionary.ensure_sorted()
    logger.debug("textdict_stream_loaded", lines=len(batch), inserted=inserted)
    return inserted


def load_from_file(dictionary: "TextDict", path: PathLike) -> int:
    """
    Load a dictionary file into ``dictionary``.

    Raises:
        DictFileNotFoundError: The path cannot be opened for reading
    """
    try:
        stream = open(path, "rb")
    except OSError as exc:
        raise DictFileNotFoundError(
            exc.errno, "Cannot open dictionary file", str(path)
        ) from exc

    with stream:
        inserted = load_from_stream(dictionary, stream)

    logger.info(
        "textdict_loaded",
        path=str(path),
        entries=inserted,
        max_key_length=dictionary.key_max_length(),
    )
    return inserted


def format_entry(entry: DictEntry) -> bytes:
    """
    Format a single entry as one line, terminator included.

    Raises:
        UnrepresentableEntryError: The entry cannot be read back unchanged
    """
    if not entry.key or _KEY_FORBIDDEN.intersection(entry.key):
        raise UnrepresentableEntryError(f"Key cannot be written: {entry.key!r}")
    # Would be read back as a byte-order mark when the entry sorts first
    if entry.key.startswith(UTF8_BOM):
        raise UnrepresentableEntryError(
            f"Key cannot start with a byte-order mark: {entry.key!r}"
        )
    if not entry.values:
        raise UnrepresentableEntryError(f"Entry has no values: {entry.key!r}")
    for value in entry.values:
        if not value or _VALUE_FORBIDDEN.intersection(value):
            raise UnrepresentableEntryError(
                f"Value cannot be written: {value!r} (key {entry.key!r})"
            )
    return entry.key + b"\t" + b" ".join(entry.values) + LINE_ENDING


def format_entries(entries: Iterable[DictEntry]) -> List[bytes]:
    """Format every entry, failing before any output is produced."""
    return [format_entry(entry) for entry in entries]


def serialize_to_stream(dictionary: "TextDict", stream: BinaryIO) -> int:
    """
    Write ``dictionary`` in sorted key order to a caller-owned binary stream.

    Returns:
        Number of entries written
    """
    lines = format_entries(dictionary.snapshot_entries())
    stream.writelines(lines)
    return len(lines)


def serialize_to_file(dictionary: "TextDict", path: PathLike) -> int:
    """
    Write ``dictionary`` to ``path``, replacing any existing file.

    Raises:
        FileWriteError: The path cannot be opened or written
    """
    lines = format_entries(dictionary.snapshot_entries())
    try:
        with open(path, "wb") as stream:
            stream.writelines(lines)
    except OSError as exc:
        logger.warning("textdict_serialize_failed", path=str(path), error=str(exc))
        raise FileWriteError(exc.errno, "Cannot write dictionary file", str(path)) from exc

    logger.info("textdict_serialized", path=str(path), entries=len(lines))
    return len(lines)


def dumps(dictionary: "TextDict") -> bytes:
    """Serialize ``dictionary`` to bytes."""
    return b"".join(format_entries(dictionary.snapshot_entries()))
