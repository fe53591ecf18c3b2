"""
Core dictionary modules.
"""

from .entry import DictEntry
from .options import DictOptions, DuplicatePolicy, LexiconState
from .text_dict import TextDict, DictLike
from .matcher import match_longest_prefix, match_all_prefixes

__all__ = [
    "DictEntry",
    "DictOptions",
    "DuplicatePolicy",
    "LexiconState",
    "TextDict",
    "DictLike",
    "match_longest_prefix",
    "match_all_prefixes",
]
