"""
Demo: Greedy conversion and segmentation alternatives

Loads the bundled sample dictionary and shows:
- A greedy longest-match conversion pass
- Every dictionary prefix at each position
"""

from pathlib import Path

import textdict
from textdict.utf8 import next_char_start
from textdict import TextDict


SAMPLE = Path(textdict.__file__).parent / "data" / "sample_phrases.txt"


def convert(dictionary: TextDict, text: str) -> str:
    """Replace each longest match with its preferred candidate."""
    data = text.encode("utf-8")
    out = []
    pos = 0
    while pos < len(data):
        entry = dictionary.match_longest_prefix(data, start=pos)
        if entry is None:
            # No key starts here; copy one character through
            end = next_char_start(data, pos)
            out.append(data[pos:end])
            pos = end
        else:
            out.append(entry.default_value)
            pos += entry.key_length
    return b"".join(out).decode("utf-8")


def demo_conversion(dictionary: TextDict):
    print("=" * 80)
    print("  GREEDY CONVERSION DEMO")
    print("=" * 80)

    for text in ["头发很长", "方便面条", "后来发展了十公里"]:
        print(f"\nInput:  {text}")
        print(f"Output: {convert(dictionary, text)}")


def demo_prefixes(dictionary: TextDict):
    print("\n\n" + "=" * 80)
    print("  ALL PREFIXES DEMO")
    print("=" * 80)

    text = "发展中"
    data = text.encode("utf-8")
    pos = 0
    while pos < len(data):
        matches = dictionary.match_all_prefixes(data, start=pos)
        keys = ", ".join(e.key_text for e in matches) or "(none)"
        print(f"  offset {pos:2d}: {keys}")
        pos = next_char_start(data, pos)


if __name__ == "__main__":
    dictionary = TextDict.from_file(SAMPLE)
    demo_conversion(dictionary)
    demo_prefixes(dictionary)
