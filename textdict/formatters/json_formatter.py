"""
JSON Formatter for dictionary entries and match results

Provides readable JSON output for the CLI and tooling:
- Entries as ``{"key": ..., "values": [...]}`` with decoded text
- Match results with the scan position and matched byte length
- Dictionary summaries
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional

from ..core.entry import DictEntry


def entry_to_dict(entry: DictEntry) -> Dict[str, Any]:
    """Decoded view of an entry."""
    return {
        "key": entry.key_text,
        "values": list(entry.values_text),
        "key_length": entry.key_length,
    }


def format_match_json(
    text: str,
    matches: Iterable[Optional[DictEntry]],
    start: int = 0
) -> str:
    """
    Format prefix match results as JSON.

    Args:
        text: Query text
        matches: Matched entries, longest first (None entries are skipped)
        start: Byte offset the query was made at

    Returns:
        JSON string

    Example:
        >>> print(format_match_json("abc", [DictEntry.of("ab", "Y")]))
        {
          "text": "abc",
          "start": 0,
          "matches": [
            {
              "key": "ab",
              "values": [
                "Y"
              ],
              "key_length": 2
            }
          ]
        }
    """
    output = {
        "text": text,
        "start": start,
        "matches": [entry_to_dict(e) for e in matches if e is not None],
    }
    return json.dumps(output, ensure_ascii=False, indent=2)


def format_info_json(entries: int, max_key_length: int, path: Optional[str] = None) -> str:
    """Format a dictionary summary as JSON."""
    output: Dict[str, Any] = {}
    if path is not None:
        output["path"] = path
    output["entries"] = entries
    output["max_key_length"] = max_key_length
    return json.dumps(output, ensure_ascii=False, indent=2)
