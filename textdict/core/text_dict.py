"""
Text Dictionary

In-memory dictionary backed by a lexicon sorted by key, answering
longest-prefix and all-prefixes queries for greedy text substitution
(e.g. script conversion).

Lifecycle:
- Entries are inserted in any order; each insert leaves the lexicon DIRTY.
- Any read that depends on order (matching, exact lookup, iteration,
  export) sorts first and leaves the lexicon SORTED.
- ``rebuild_from`` replaces the whole lexicon from another dictionary and
  trusts its order.

Thread safety:
    There is no internal locking, and even reads may sort the lexicon.
    Callers sharing a dictionary between threads must either guard every
    call with one lock, or finish building it, call ``ensure_sorted()`` and
    publish it as read-only.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple, Union

import structlog

from ..errors import DuplicateKeyError, MalformedEntryError
from ..formatters import text_format
from ..utf8 import encode_text
from .entry import DictEntry, TextLike
from .matcher import find_key, match_all_prefixes, match_longest_prefix
from .options import DictOptions, DuplicatePolicy, LexiconState

logger = structlog.get_logger(__name__)


class DictLike(Protocol):
    """Anything that can export a sorted lexicon."""

    def key_max_length(self) -> int:
        ...

    def snapshot_entries(self) -> Iterable[DictEntry]:
        ...


class TextDict:
    """
    Dictionary with prefix matching over a lazily sorted lexicon.

    Example:
        d = TextDict()
        d.add("a", "X")
        d.add("ab", "Y")
        d.match_longest_prefix("abc").values_text   # ("Y",)
        [e.key for e in d.match_all_prefixes("abc")]  # [b"ab", b"a"]
    """

    def __init__(self, options: Optional[DictOptions] = None):
        self.options = options or DictOptions()
        self._lexicon: List[DictEntry] = []
        self._keys: List[bytes] = []
        self._by_key: Dict[bytes, DictEntry] = {}
        self._max_length = 0
        self._state = LexiconState.SORTED
        # Set when an entry was replaced in place of an older one
        self._stale = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[DictEntry],
        options: Optional[DictOptions] = None
    ) -> "TextDict":
        """Build a sorted dictionary from entries."""
        dictionary = cls(options)
        dictionary.insert_many(entries)
        dictionary.ensure_sorted()
        return dictionary

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        options: Optional[DictOptions] = None
    ) -> "TextDict":
        """Load a dictionary file."""
        dictionary = cls(options)
        dictionary.load_from_file(path)
        return dictionary

    @classmethod
    def load(
        cls,
        source: Union[str, os.PathLike, BinaryIO],
        options: Optional[DictOptions] = None
    ) -> "TextDict":
        """
        Load a dictionary from a path or an open binary stream.

        Paths are opened and closed here; streams are left open.
        """
        if isinstance(source, (str, os.PathLike)):
            return cls.from_file(source, options)
        dictionary = cls(options)
        dictionary.load_from_stream(source)
        return dictionary

    @classmethod
    def from_dict(cls, other: DictLike) -> "TextDict":
        """Copy the lexicon of another dictionary."""
        dictionary = cls()
        dictionary.rebuild_from(other)
        return dictionary

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, entry: DictEntry) -> bool:
        """
        Add one entry.

        Returns:
            False if the entry was ignored as a duplicate (KEEP_FIRST)

        Raises:
            MalformedEntryError: Empty key or no values
            DuplicateKeyError: Key already present and duplicates are errors
        """
        return self.insert_many([entry]) == 1

    def add(self, key: TextLike, *values: TextLike) -> bool:
        """Add an entry built from ``key`` and ``values``."""
        return self.insert(DictEntry(key, values))

    def insert_many(self, entries: Iterable[DictEntry]) -> int:
        """
        Add a batch of entries atomically.

        Every entry is validated, and duplicates are resolved, before any of
        them is stored; on error the dictionary is unchanged.

        Returns:
            Number of entries stored (new or replacing)
        """
        policy = self.options.duplicate_policy
        pending: Dict[bytes, DictEntry] = {}

        for entry in entries:
            if not isinstance(entry, DictEntry):
                raise TypeError(f"Expected DictEntry, got {type(entry).__name__}")
            if not entry.key:
                raise MalformedEntryError("Entry key is empty")
            if not entry.values:
                raise MalformedEntryError(f"Entry has no values: {entry.key!r}")

            if entry.key in pending or entry.key in self._by_key:
                if policy is DuplicatePolicy.ERROR:
                    raise DuplicateKeyError(entry.key)
                if policy is DuplicatePolicy.KEEP_FIRST:
                    continue
            pending[entry.key] = entry

        for key, entry in pending.items():
            if key in self._by_key:
                self._stale = True
            else:
                self._lexicon.append(entry)
                self._max_length = max(self._max_length, len(key))
            self._by_key[key] = entry

        if pending:
            self._state = LexiconState.DIRTY
        return len(pending)

    def rebuild_from(self, other: DictLike) -> None:
        """
        Replace the whole lexicon with ``other``'s.

        ``other.snapshot_entries()`` must already be sorted by key.
        """
        self._lexicon = list(other.snapshot_entries())
        self._keys = [entry.key for entry in self._lexicon]
        self._by_key = {entry.key: entry for entry in self._lexicon}
        self._max_length = other.key_max_length()
        self._state = LexiconState.SORTED
        self._stale = False
        logger.info("textdict_rebuilt", entries=len(self._lexicon))

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    @property
    def state(self) -> LexiconState:
        return self._state

    @property
    def is_sorted(self) -> bool:
        return self._state is LexiconState.SORTED

    def ensure_sorted(self) -> None:
        """Sort the lexicon by key if an insert left it unsorted."""
        if self._state is LexiconState.SORTED:
            return
        if self._stale:
            self._lexicon = list(self._by_key.values())
            self._stale = False
        self._lexicon.sort()
        self._keys = [entry.key for entry in self._lexicon]
        self._state = LexiconState.SORTED
        logger.debug("textdict_sorted", entries=len(self._lexicon))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def key_max_length(self) -> int:
        """Longest key length in bytes (0 when empty)."""
        return self._max_length

    def snapshot_entries(self) -> Tuple[DictEntry, ...]:
        """All entries in ascending key order."""
        self.ensure_sorted()
        return tuple(self._lexicon)

    def get(self, key: TextLike) -> Optional[DictEntry]:
        """Get an entry by exact key."""
        self.ensure_sorted()
        idx = find_key(self._keys, encode_text(key))
        return self._lexicon[idx] if idx >= 0 else None

    def __contains__(self, key) -> bool:
        return isinstance(key, (str, bytes)) and encode_text(key) in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self) -> Iterator[DictEntry]:
        return iter(self.snapshot_entries())

    def __repr__(self) -> str:
        return (
            f"TextDict(entries={len(self)}, max_key_length={self._max_length}, "
            f"state={self._state.value})"
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match_longest_prefix(
        self,
        text: TextLike,
        start: int = 0
    ) -> Optional[DictEntry]:
        """
        Find the entry with the longest key that prefixes ``text``.

        Args:
            text: Text to scan; ``str`` is UTF-8 encoded first
            start: Byte offset into the encoded text

        Returns:
            The matching entry, or None
        """
        self.ensure_sorted()
        return match_longest_prefix(
            self._keys, self._lexicon, self._max_length, text, start
        )

    def match_all_prefixes(self, text: TextLike, start: int = 0) -> List[DictEntry]:
        """
        Find every entry whose key prefixes ``text``, longest key first.
        """
        self.ensure_sorted()
        return match_all_prefixes(
            self._keys, self._lexicon, self._max_length, text, start
        )

    # ------------------------------------------------------------------
    # Text format I/O
    # ------------------------------------------------------------------

    def load_from_file(self, path: Union[str, Path]) -> int:
        """Load entries from a dictionary file. See ``text_format``."""
        return text_format.load_from_file(self, path)

    def load_from_stream(self, stream: BinaryIO) -> int:
        """Load entries from a caller-owned binary stream."""
        return text_format.load_from_stream(self, stream)

    def serialize_to_file(self, path: Union[str, Path]) -> int:
        """Write the dictionary to a file in sorted order."""
        return text_format.serialize_to_file(self, path)

    def serialize_to_stream(self, stream: BinaryIO) -> int:
        """Write the dictionary to a caller-owned binary stream."""
        return text_format.serialize_to_stream(self, stream)
