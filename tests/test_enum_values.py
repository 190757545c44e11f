"""Unit tests for enum mining from descriptions."""

from __future__ import annotations

from discovery_client_generator.enum_values import ENUM_MARKER, has_enum_marker, mine_enum_values


def test_two_values_are_mined_in_order() -> None:
    """Each quoted token is paired with the sentence that follows it."""
    text = 'Possible values are: "A" - First. "B" - Second.'
    assert mine_enum_values(text) == [("A", "First."), ("B", "Second.")]


def test_marker_detection() -> None:
    """Only descriptions containing the marker announce enum values."""
    assert has_enum_marker(f"Status. {ENUM_MARKER} \"x\" - X.")
    assert not has_enum_marker("Status of the task.")
    assert not has_enum_marker(None)


def test_marker_without_matches_yields_no_values() -> None:
    """A marker followed by unstructured text yields an empty list."""
    assert mine_enum_values(f"{ENUM_MARKER} anything goes here") == []


def test_connector_may_be_spaces_only() -> None:
    """Tokens may be separated from their sentence by spaces alone."""
    text = 'Possible values are: "public"  Visible to everyone. "private" - Only you.'
    assert mine_enum_values(text) == [
        ("public", "Visible to everyone."),
        ("private", "Only you."),
    ]


def test_sentences_may_span_lines() -> None:
    """The documentation runs to the next period, across newlines."""
    text = 'Possible values are:\n"ok" - Everything\nworked.\n"failed" - It did not.'
    assert mine_enum_values(text) == [
        ("ok", "Everything\nworked."),
        ("failed", "It did not."),
    ]


def test_non_word_tokens_are_skipped() -> None:
    """Quoted text with non-word characters does not produce a value."""
    text = 'Possible values are: "in-progress" - Running. "done" - Finished.'
    assert mine_enum_values(text) == [("done", "Finished.")]
