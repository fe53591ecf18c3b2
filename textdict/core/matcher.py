"""
Prefix Matcher

Longest-match and all-matches queries over a sorted key list.

A query truncates the text at the scan position to the longest key length
(on a character boundary), then shrinks the candidate one character at a
time, looking each candidate up by binary search:

    text: "方便面条"   max key length: 9 bytes
    candidates: "方便面" -> "方便" -> "方"

``match_longest_prefix`` stops at the first hit; ``match_all_prefixes``
collects every hit, longest first.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import Iterator, List, Optional, Sequence, Union

from ..utf8 import previous_char_length, truncate
from .entry import DictEntry


def find_key(keys: Sequence[bytes], key: bytes) -> int:
    """
    Binary search for an exact key.

    Returns:
        Index of ``key`` in ``keys``, or -1
    """
    idx = bisect_left(keys, key)
    if idx < len(keys) and keys[idx] == key:
        return idx
    return -1


def iter_prefix_matches(
    keys: Sequence[bytes],
    entries: Sequence[DictEntry],
    max_length: int,
    text: Union[str, bytes],
    start: int = 0
) -> Iterator[DictEntry]:
    """
    Yield entries whose key is a prefix of ``text[start:]``, longest first.

    Args:
        keys: Sorted keys, ``keys[i] == entries[i].key``
        entries: Entries in the same order
        max_length: Longest key length in bytes
        text: Text to scan; ``str`` is UTF-8 encoded first
        start: Byte offset of a character boundary in the encoded text

    Raises:
        EncodingError: The text at ``start`` is not valid UTF-8
    """
    if start < 0:
        raise ValueError("start must be non-negative")
    if not keys:
        return

    if isinstance(text, str):
        text = text.encode("utf-8")
    candidate = truncate(memoryview(text)[start:], max_length)

    length = len(candidate)
    while length > 0:
        idx = find_key(keys, candidate[:length])
        if idx >= 0:
            yield entries[idx]
        length -= previous_char_length(candidate, length)


def match_longest_prefix(
    keys: Sequence[bytes],
    entries: Sequence[DictEntry],
    max_length: int,
    text: Union[str, bytes],
    start: int = 0
) -> Optional[DictEntry]:
    """Longest entry whose key is a prefix of the text, or None."""
    return next(iter_prefix_matches(keys, entries, max_length, text, start), None)


def match_all_prefixes(
    keys: Sequence[bytes],
    entries: Sequence[DictEntry],
    max_length: int,
    text: Union[str, bytes],
    start: int = 0
) -> List[DictEntry]:
    """Every entry whose key is a prefix of the text, longest first."""
    return list(iter_prefix_matches(keys, entries, max_length, text, start))
