"""
Per-dictionary options.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DuplicatePolicy(str, Enum):
    """What to do when a key is inserted twice."""
    ERROR = "error"
    KEEP_FIRST = "keep_first"
    REPLACE = "replace"


class LexiconState(str, Enum):
    """Sort state of a lexicon."""
    DIRTY = "dirty"
    SORTED = "sorted"


@dataclass
class DictOptions:
    """
    Configuration options for a dictionary.

    Attributes:
        duplicate_policy: Handling of keys inserted more than once. ``ERROR``
            rejects the insert (and fails a whole load), ``KEEP_FIRST`` ignores
            later entries, ``REPLACE`` lets the later entry win.
    """
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.ERROR

    def __post_init__(self):
        self.duplicate_policy = DuplicatePolicy(self.duplicate_policy)
