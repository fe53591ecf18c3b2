"""
Dictionary entry: a key with its ordered replacement candidates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

from ..utf8 import encode_text

TextLike = Union[str, bytes]


@dataclass(frozen=True, order=True)
class DictEntry:
    """
    Represents a single dictionary entry.

    Entries compare by ``key`` only (byte-wise), which is the order the
    lexicon is sorted and searched in. An entry is immutable; use
    ``with_values`` to derive a variant.

    Attributes:
        key: UTF-8 encoded key
        values: UTF-8 encoded candidates, preferred candidate first
    """
    key: bytes
    values: Tuple[bytes, ...] = field(default=(), compare=False)

    def __post_init__(self):
        # frozen: normalize through object.__setattr__
        values = self.values
        if isinstance(values, (str, bytes)):
            values = (values,)
        object.__setattr__(self, "key", encode_text(self.key))
        object.__setattr__(self, "values", tuple(encode_text(v) for v in values))

    @classmethod
    def of(cls, key: TextLike, *values: TextLike) -> "DictEntry":
        """Build an entry from a key and any number of values."""
        return cls(key, values)

    def with_values(self, *values: TextLike) -> "DictEntry":
        """Return a copy with ``values`` appended."""
        return DictEntry(self.key, self.values + tuple(values))

    @property
    def key_text(self) -> str:
        return self.key.decode("utf-8")

    @property
    def values_text(self) -> Tuple[str, ...]:
        return tuple(v.decode("utf-8") for v in self.values)

    @property
    def default_value(self) -> bytes:
        """The preferred candidate."""
        return self.values[0]

    @property
    def key_length(self) -> int:
        """Key length in bytes."""
        return len(self.key)
