"""
Serialization formats for text dictionaries.
"""

from .text_format import (
    parse_key_values,
    iter_entries,
    load_from_file,
    load_from_stream,
    format_entry,
    serialize_to_file,
    serialize_to_stream,
    dumps,
)
from .json_formatter import (
    entry_to_dict,
    format_match_json,
    format_info_json,
)

__all__ = [
    "parse_key_values",
    "iter_entries",
    "load_from_file",
    "load_from_stream",
    "format_entry",
    "serialize_to_file",
    "serialize_to_stream",
    "dumps",
    "entry_to_dict",
    "format_match_json",
    "format_info_json",
]
