"""
UTF-8 Character Boundary Utilities

Pure helpers for walking UTF-8 encoded byte strings without ever splitting
a multi-byte character:
- Lead byte classification and character length
- Forward/backward stepping over whole characters
- Delimiter scanning that stops at line/file terminators
- Byte-budget truncation on character boundaries
- Byte-order mark handling for binary streams

Malformed input is never guessed at: any byte sequence without a valid
boundary interpretation raises ``EncodingError``.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Optional, Union

from ..errors import EncodingError


UTF8_BOM = b"\xef\xbb\xbf"

# Longest UTF-8 character in bytes
MAX_CHAR_BYTES = 4

# NUL, LF, CR
TERMINATORS = frozenset((0x00, 0x0A, 0x0D))

BytesLike = Union[bytes, bytearray, memoryview]


def encode_text(value: Union[str, BytesLike]) -> bytes:
    """Return ``value`` as UTF-8 bytes, encoding ``str`` input."""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def is_terminator(byte: Optional[int]) -> bool:
    """
    Check for a line or file ending.

    Args:
        byte: Byte value, or None for end of input

    Returns:
        True for NUL, LF, CR and end of input
    """
    return byte is None or byte in TERMINATORS


def is_continuation(byte: int) -> bool:
    """True for UTF-8 continuation bytes (10xxxxxx)."""
    return byte & 0xC0 == 0x80


# Lead bytes whose second byte is narrower than 80-BF (RFC 3629):
# E0 and F0 exclude overlong forms, ED excludes surrogates, F4 caps at U+10FFFF
SECOND_BYTE_RANGES = {
    0xE0: (0xA0, 0xBF),
    0xED: (0x80, 0x9F),
    0xF0: (0x90, 0xBF),
    0xF4: (0x80, 0x8F),
}


def char_length(lead: int, offset: Optional[int] = None) -> int:
    """
    Number of bytes in the character introduced by ``lead``.

    Args:
        lead: First byte of the character
        offset: Position of the byte, used in error reports

    Returns:
        1-4

    Raises:
        EncodingError: ``lead`` is a continuation byte or can never start a
            well-formed character (C0, C1, F5-FF)
    """
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    raise EncodingError(f"Invalid UTF-8 lead byte 0x{lead:02x}", offset)


def _check_sequence(text: BytesLike, pos: int, end: int) -> None:
    """Validate the continuation bytes of the character at ``pos``."""
    for i in range(pos + 1, end):
        if not is_continuation(text[i]):
            raise EncodingError(f"Expected continuation byte at offset {i}", i)

    bounds = SECOND_BYTE_RANGES.get(text[pos])
    if bounds is not None and not bounds[0] <= text[pos + 1] <= bounds[1]:
        raise EncodingError(
            f"Overlong, surrogate or out-of-range UTF-8 character at offset {pos}",
            pos,
        )


def next_char_start(text: BytesLike, pos: int) -> int:
    """
    Advance past exactly one character.

    Args:
        text: UTF-8 bytes
        pos: Offset of a character boundary inside ``text``

    Returns:
        Offset of the following character boundary

    Raises:
        EncodingError: The character is incomplete or badly formed
    """
    length = char_length(text[pos], pos)
    end = pos + length
    if end > len(text):
        raise EncodingError("Truncated UTF-8 character", pos)
    _check_sequence(text, pos, end)
    return end


def previous_char_length(text: BytesLike, end: int) -> int:
    """
    Byte length of the character that ends at ``end``.

    Walks back over continuation bytes to the lead byte and checks that the
    lead byte announces exactly that many bytes.

    Args:
        text: UTF-8 bytes
        end: Offset one past a character boundary (0 < end <= len(text))

    Returns:
        1-4

    Raises:
        EncodingError: No valid character ends at ``end``
    """
    if end <= 0:
        raise ValueError("No character precedes offset 0")

    pos = end - 1
    while is_continuation(text[pos]):
        pos -= 1
        if pos < 0 or end - pos > MAX_CHAR_BYTES:
            raise EncodingError("Orphan UTF-8 continuation bytes", end - 1)

    length = char_length(text[pos], pos)
    if length != end - pos:
        raise EncodingError(
            f"UTF-8 character at offset {pos} does not end at offset {end}", pos
        )
    _check_sequence(text, pos, end)
    return length


def find_next_delimiter(
    text: BytesLike,
    delimiter: Union[int, bytes],
    start: int = 0
) -> int:
    """
    Find the next standalone ``delimiter`` byte on the current line.

    Scans character by character, so a delimiter byte is only recognised on
    a character boundary. Stops early at a terminator (NUL, LF, CR) or at
    the end of input.

    Args:
        text: UTF-8 bytes
        delimiter: Single byte (int or length-1 bytes)
        start: Offset of a character boundary to start from

    Returns:
        Offset of the delimiter, of the terminator, or ``len(text)``
    """
    if isinstance(delimiter, (bytes, bytearray)):
        if len(delimiter) != 1:
            raise ValueError("delimiter must be a single byte")
        delimiter = delimiter[0]

    pos = start
    end = len(text)
    while pos < end:
        byte = text[pos]
        if byte == delimiter or byte in TERMINATORS:
            return pos
        pos = next_char_start(text, pos)
    return end


def truncate(text: BytesLike, max_bytes: int) -> bytes:
    """
    Copy at most ``max_bytes`` bytes without cutting a character in half.

    The result length is the largest character boundary <= ``max_bytes``.
    Every character kept is validated.

    Examples:
        truncate("a中b".encode(), 2) -> b"a"
        truncate("a中b".encode(), 4) -> "a中".encode()

    Raises:
        EncodingError: A kept or boundary character is malformed
    """
    if max_bytes < 0:
        raise ValueError("max_bytes must be non-negative")

    size = len(text)
    limit = min(max_bytes, size)
    pos = 0
    while pos < limit:
        length = char_length(text[pos], pos)
        if pos + length > limit:
            if pos + length > size:
                raise EncodingError("Truncated UTF-8 character", pos)
            break
        pos = next_char_start(text, pos)
    return bytes(text[:pos])


def skip_utf8_bom(stream: BinaryIO) -> bool:
    """
    Consume a UTF-8 byte-order mark at the current stream position.

    Uses ``peek()`` when the stream is buffered, otherwise ``seek()``.

    Returns:
        True if a BOM was consumed

    Raises:
        io.UnsupportedOperation: The stream can neither peek nor seek
    """
    peek = getattr(stream, "peek", None)
    if peek is not None:
        if peek(len(UTF8_BOM))[:len(UTF8_BOM)] == UTF8_BOM:
            stream.read(len(UTF8_BOM))
            return True
        return False

    if not stream.seekable():
        raise io.UnsupportedOperation(
            "stream must support peek() or seek() to skip a byte-order mark"
        )
    pos = stream.tell()
    if stream.read(len(UTF8_BOM)) == UTF8_BOM:
        return True
    stream.seek(pos)
    return False
