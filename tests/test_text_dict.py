"""
Tests for DictEntry, TextDict and prefix matching.

Tests cover:
- Entry ordering and immutability
- Lazy sorting and the sort state
- Max key length tracking
- Longest-prefix and all-prefixes matching, including multi-byte text
- Duplicate key policies
- Rebuilding from another dictionary
"""

import dataclasses

import pytest
from structlog.testing import capture_logs

from textdict import (
    DictEntry,
    DictOptions,
    DuplicateKeyError,
    DuplicatePolicy,
    EncodingError,
    LexiconState,
    MalformedEntryError,
    TextDict,
)


class FrozenLexicon:
    """Minimal read-only dictionary exposing only the export capability."""

    def __init__(self, entries):
        self._entries = sorted(entries)

    def key_max_length(self):
        return max((len(e.key) for e in self._entries), default=0)

    def snapshot_entries(self):
        return list(self._entries)


class TestDictEntry:
    """Tests for the entry record."""

    def test_str_input_is_encoded(self):
        entry = DictEntry.of("中", "中國", "中国")
        assert entry.key == "中".encode("utf-8")
        assert entry.values == ("中國".encode("utf-8"), "中国".encode("utf-8"))
        assert entry.key_text == "中"
        assert entry.values_text == ("中國", "中国")
        assert entry.default_value == "中國".encode("utf-8")
        assert entry.key_length == 3

    def test_single_value_is_not_split(self):
        assert DictEntry("k", "value").values == (b"value",)

    def test_orders_by_key_only(self):
        assert DictEntry.of("a", "Z") < DictEntry.of("b", "A")
        assert DictEntry.of("a", "X") == DictEntry.of("a", "Y")

    def test_byte_order_matches_code_point_order(self):
        keys = ["z", "é", "中", "𝄞", "a"]
        entries = sorted(DictEntry.of(k, "v") for k in keys)
        assert [e.key_text for e in entries] == sorted(keys)

    def test_immutable(self):
        entry = DictEntry.of("a", "X")
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.key = b"b"

    def test_with_values_returns_copy(self):
        entry = DictEntry.of("a", "X")
        variant = entry.with_values("Y")
        assert entry.values == (b"X",)
        assert variant.values == (b"X", b"Y")
        assert variant.key == entry.key


class TestSorting:
    """Tests for lazy sorting."""

    def test_new_dictionary_is_sorted(self):
        assert TextDict().state is LexiconState.SORTED

    def test_insert_marks_dirty(self):
        dictionary = TextDict()
        dictionary.add("b", "B")
        assert dictionary.state is LexiconState.DIRTY
        assert not dictionary.is_sorted

    def test_snapshot_is_sorted(self):
        dictionary = TextDict()
        for key in ["d", "b", "中", "a", "c", "ab"]:
            dictionary.add(key, key.upper())

        keys = [e.key for e in dictionary.snapshot_entries()]
        assert keys == sorted(keys)
        assert dictionary.state is LexiconState.SORTED

    def test_insert_after_read_resorts(self, simple_dict):
        simple_dict.snapshot_entries()
        simple_dict.add("aa", "Z")
        assert simple_dict.state is LexiconState.DIRTY
        assert [e.key for e in simple_dict] == [b"a", b"aa", b"ab"]

    def test_key_max_length_does_not_sort(self, simple_dict):
        assert simple_dict.key_max_length() == 2
        assert simple_dict.state is LexiconState.DIRTY

    def test_ensure_sorted_is_idempotent(self, simple_dict):
        simple_dict.ensure_sorted()
        first = [(e.key, e.values) for e in simple_dict.snapshot_entries()]
        simple_dict.ensure_sorted()
        assert [(e.key, e.values) for e in simple_dict.snapshot_entries()] == first


class TestMaxKeyLength:
    """Tests for max key length tracking."""

    def test_empty(self):
        assert TextDict().key_max_length() == 0

    def test_counts_bytes(self):
        dictionary = TextDict()
        dictionary.add("ab", "X")
        dictionary.add("中文", "X")
        assert dictionary.key_max_length() == 6

    def test_never_decreases(self):
        dictionary = TextDict()
        dictionary.add("abcd", "X")
        dictionary.add("a", "X")
        assert dictionary.key_max_length() == 4


class TestLongestMatch:
    """Tests for greedy longest-prefix matching."""

    def test_longest_key_wins(self, simple_dict):
        assert simple_dict.match_longest_prefix("abc").key == b"ab"

    def test_falls_back_to_shorter_key(self, simple_dict):
        assert simple_dict.match_longest_prefix("ac").key == b"a"

    def test_no_match(self, simple_dict):
        assert simple_dict.match_longest_prefix("zz") is None

    def test_exact_text(self, simple_dict):
        assert simple_dict.match_longest_prefix("ab").values == (b"Y",)

    def test_bytes_input(self, simple_dict):
        assert simple_dict.match_longest_prefix(b"abc").key == b"ab"

    def test_start_offset(self, simple_dict):
        assert simple_dict.match_longest_prefix("xxab", start=2).key == b"ab"
        assert simple_dict.match_longest_prefix("xxab", start=4) is None

    def test_multibyte_keys(self):
        dictionary = TextDict()
        dictionary.add("方", "方")
        dictionary.add("方便", "方便")
        dictionary.add("方便面", "方便麵")

        assert dictionary.match_longest_prefix("方便面条").values_text == ("方便麵",)
        assert dictionary.match_longest_prefix("方便的").key_text == "方便"
        assert dictionary.match_longest_prefix("方法").key_text == "方"

    def test_candidate_never_splits_character(self):
        # Budget of 4 bytes lands inside '中'
        dictionary = TextDict()
        dictionary.add("abcd", "X")
        dictionary.add("ab", "Y")
        assert dictionary.match_longest_prefix("ab中").key == b"ab"

    def test_greedy_scan(self):
        dictionary = TextDict()
        dictionary.add("头发", "頭髮")
        dictionary.add("发", "發")
        dictionary.add("发展", "發展")

        text = "头发发展".encode("utf-8")
        pos = 0
        keys = []
        while pos < len(text):
            entry = dictionary.match_longest_prefix(text, start=pos)
            assert entry is not None
            keys.append(entry.key_text)
            pos += entry.key_length
        assert keys == ["头发", "发展"]

    def test_malformed_text(self, simple_dict):
        with pytest.raises(EncodingError):
            simple_dict.match_longest_prefix(b"a\xff")

    def test_start_inside_character(self):
        dictionary = TextDict()
        dictionary.add("中", "X")
        with pytest.raises(EncodingError):
            dictionary.match_longest_prefix("中文", start=1)

    def test_match_after_insert(self, simple_dict):
        assert simple_dict.match_longest_prefix("abc").key == b"ab"
        simple_dict.add("abc", "Z")
        assert simple_dict.match_longest_prefix("abcd").key == b"abc"


class TestAllPrefixes:
    """Tests for all-prefixes matching."""

    def test_longest_first(self, simple_dict):
        assert [e.key for e in simple_dict.match_all_prefixes("abc")] == [b"ab", b"a"]

    def test_single_match(self, simple_dict):
        assert [e.key for e in simple_dict.match_all_prefixes("ac")] == [b"a"]

    def test_no_match(self, simple_dict):
        assert simple_dict.match_all_prefixes("zz") == []

    def test_multibyte_segmentation(self):
        dictionary = TextDict()
        for key in ["方", "方便", "方便面", "便"]:
            dictionary.add(key, key)
        matches = dictionary.match_all_prefixes("方便面条")
        assert [e.key_text for e in matches] == ["方便面", "方便", "方"]


class TestEmptyStore:
    """Queries on an empty dictionary."""

    def test_longest_match(self):
        assert TextDict().match_longest_prefix("abc") is None

    def test_all_prefixes(self):
        assert TextDict().match_all_prefixes("abc") == []

    def test_empty_text(self, simple_dict):
        assert simple_dict.match_longest_prefix("") is None
        assert simple_dict.match_all_prefixes("") == []

    def test_snapshot(self):
        assert TextDict().snapshot_entries() == ()


class TestInsertValidation:
    """Tests for rejected inserts."""

    def test_entry_without_values(self):
        dictionary = TextDict()
        with pytest.raises(MalformedEntryError):
            dictionary.insert(DictEntry("key"))
        assert len(dictionary) == 0

    def test_empty_key(self):
        with pytest.raises(MalformedEntryError):
            TextDict().add("", "X")

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            TextDict().insert(("a", ["X"]))


class TestDuplicates:
    """Tests for duplicate key policies."""

    def test_error_by_default(self, simple_dict):
        with pytest.raises(DuplicateKeyError) as exc_info:
            simple_dict.add("a", "other")
        assert exc_info.value.key == b"a"
        assert simple_dict.get("a").values == (b"X",)
        assert len(simple_dict) == 2

    def test_batch_with_duplicate_commits_nothing(self):
        dictionary = TextDict()
        with pytest.raises(DuplicateKeyError):
            dictionary.insert_many([
                DictEntry.of("x", "1"),
                DictEntry.of("y", "2"),
                DictEntry.of("x", "3"),
            ])
        assert len(dictionary) == 0
        assert dictionary.key_max_length() == 0

    def test_keep_first(self):
        dictionary = TextDict(DictOptions(duplicate_policy=DuplicatePolicy.KEEP_FIRST))
        assert dictionary.add("a", "first") is True
        assert dictionary.add("a", "second") is False
        assert dictionary.get("a").values_text == ("first",)

    def test_replace(self):
        dictionary = TextDict(DictOptions(duplicate_policy="replace"))
        dictionary.add("b", "B")
        dictionary.add("a", "first")
        dictionary.ensure_sorted()
        dictionary.add("a", "second")
        dictionary.add("c", "C")

        entries = dictionary.snapshot_entries()
        assert [e.key for e in entries] == [b"a", b"b", b"c"]
        assert dictionary.get("a").values_text == ("second",)

    def test_replace_within_batch(self):
        dictionary = TextDict(DictOptions(duplicate_policy=DuplicatePolicy.REPLACE))
        dictionary.insert_many([DictEntry.of("a", "1"), DictEntry.of("a", "2")])
        assert len(dictionary) == 1
        assert dictionary.match_longest_prefix("a").values_text == ("2",)


class TestLookup:
    """Tests for exact lookup helpers."""

    def test_get(self, simple_dict):
        assert simple_dict.get("ab").values == (b"Y",)
        assert simple_dict.get(b"a").values == (b"X",)
        assert simple_dict.get("abc") is None

    def test_contains(self, simple_dict):
        assert "a" in simple_dict
        assert b"ab" in simple_dict
        assert "b" not in simple_dict
        assert 42 not in simple_dict

    def test_len_and_iter(self, simple_dict):
        assert len(simple_dict) == 2
        assert [e.key for e in simple_dict] == [b"a", b"ab"]

    def test_repr(self, simple_dict):
        assert "entries=2" in repr(simple_dict)


class TestRebuild:
    """Tests for replacing a lexicon from another dictionary."""

    def test_rebuild_from_text_dict(self, simple_dict):
        other = TextDict()
        other.add("old", "O")

        other.rebuild_from(simple_dict)

        assert other.is_sorted
        assert [(e.key, e.values) for e in other.snapshot_entries()] == [
            (b"a", (b"X",)),
            (b"ab", (b"Y",)),
        ]
        assert other.key_max_length() == 2
        assert "old" not in other

    def test_rebuild_from_any_exporter(self):
        source = FrozenLexicon([DictEntry.of("中文", "中文"), DictEntry.of("a", "A")])
        dictionary = TextDict.from_dict(source)

        assert dictionary.state is LexiconState.SORTED
        assert dictionary.key_max_length() == 6
        assert dictionary.match_longest_prefix("中文字").key_text == "中文"

    def test_insert_after_rebuild(self, simple_dict):
        dictionary = TextDict.from_dict(simple_dict)
        dictionary.add("b", "B")
        assert [e.key for e in dictionary] == [b"a", b"ab", b"b"]
        assert [e.key for e in simple_dict] == [b"a", b"ab"]

    def test_logs_rebuild(self, simple_dict):
        with capture_logs() as logs:
            TextDict.from_dict(simple_dict)
        assert {"event": "textdict_rebuilt", "entries": 2, "log_level": "info"} in logs


def test_from_entries():
    dictionary = TextDict.from_entries([DictEntry.of("b", "B"), DictEntry.of("a", "A")])
    assert dictionary.is_sorted
    assert [e.key for e in dictionary] == [b"a", b"b"]
