"""Mining of enum constants from free-text schema descriptions."""

from __future__ import annotations

import re
from typing import Optional

ENUM_MARKER = "Possible values are:"

# One constant per match: a quoted token, a dash/space connector, then the
# sentence up to and including the next period.
_ENUM_VALUE_RE = re.compile(r"\"(\w+)\"[ -]+([^.]+\.)", re.MULTILINE)


def has_enum_marker(description: Optional[str]) -> bool:
    """Return whether a description announces a closed set of values."""
    return description is not None and ENUM_MARKER in description


def mine_enum_values(text: str) -> list[tuple[str, str]]:
    """Extract ``(token, documentation)`` pairs in the order they occur.

    Matches are leftmost and non-overlapping; text that does not follow the
    ``"TOKEN" - Sentence.`` shape is skipped.

    Args:
        text (str): Schema description text.

    Returns:
        list[tuple[str, str]]: Enum tokens with their trailing sentence.
    """
    return [(match.group(1), match.group(2)) for match in _ENUM_VALUE_RE.finditer(text)]
