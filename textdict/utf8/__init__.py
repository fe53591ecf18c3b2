"""
UTF-8 character boundary helpers.
"""

from .utf8_util import (
    encode_text,
    is_terminator,
    is_continuation,
    char_length,
    next_char_start,
    previous_char_length,
    find_next_delimiter,
    truncate,
    skip_utf8_bom,
    UTF8_BOM,
    MAX_CHAR_BYTES,
    TERMINATORS,
)

__all__ = [
    "encode_text",
    "is_terminator",
    "is_continuation",
    "char_length",
    "next_char_start",
    "previous_char_length",
    "find_next_delimiter",
    "truncate",
    "skip_utf8_bom",
    "UTF8_BOM",
    "MAX_CHAR_BYTES",
    "TERMINATORS",
]
