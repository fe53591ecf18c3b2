"""
Text Substitution Dictionary

Sorted key -> candidates dictionary for greedy text substitution passes
(script conversion, phrase replacement, segmentation).

Features:
- Longest-prefix and all-prefixes matching by binary search
- UTF-8 aware: candidate keys are never cut inside a multi-byte character
- Lazy sorting: inserts are O(1), the lexicon is sorted on the next read
- Round-trippable tab/space separated text format
"""

from .core.entry import DictEntry
from .core.options import DictOptions, DuplicatePolicy, LexiconState
from .core.text_dict import TextDict, DictLike
from .errors import (
    ErrorCode,
    TextDictError,
    MalformedEntryError,
    EncodingError,
    DuplicateKeyError,
    DictFileNotFoundError,
    FileWriteError,
    UnrepresentableEntryError,
)
from .formatters.text_format import (
    parse_key_values,
    load_from_file,
    load_from_stream,
    serialize_to_file,
    serialize_to_stream,
    dumps,
)

__version__ = "1.0.0"
__all__ = [
    "DictEntry",
    "DictOptions",
    "DuplicatePolicy",
    "LexiconState",
    "TextDict",
    "DictLike",
    "ErrorCode",
    "TextDictError",
    "MalformedEntryError",
    "EncodingError",
    "DuplicateKeyError",
    "DictFileNotFoundError",
    "FileWriteError",
    "UnrepresentableEntryError",
    "parse_key_values",
    "load_from_file",
    "load_from_stream",
    "serialize_to_file",
    "serialize_to_stream",
    "dumps",
]
