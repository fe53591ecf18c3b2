"""
Shared fixtures for textdict tests.
"""

from pathlib import Path

import pytest
import structlog

import textdict
from textdict import DictEntry, TextDict


@pytest.fixture(autouse=True)
def reset_structlog():
    """The CLI configures structlog globally; undo it after every test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def simple_dict() -> TextDict:
    """Store with keys {"a": ["X"], "ab": ["Y"]}."""
    dictionary = TextDict()
    dictionary.insert(DictEntry.of("ab", "Y"))
    dictionary.insert(DictEntry.of("a", "X"))
    return dictionary


@pytest.fixture
def sample_dict_path() -> Path:
    return Path(textdict.__file__).parent / "data" / "sample_phrases.txt"
