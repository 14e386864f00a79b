"""Test slide delimiter handling."""

import pytest
from slide_engine.splitter import split_slides


def test_single_slide():
    assert split_slides("# Only slide\n\nNotes") == ["# Only slide\n\nNotes"]


@pytest.mark.parametrize(
    "body",
    [
        "# One\n---\n# Two",
        "# One\n\n---\n\n# Two",
        "# One\n-----\n# Two",
        "# One\n---   \n# Two",
    ],
)
def test_delimiter_variants(body):
    assert split_slides(body) == ["# One", "# Two"]


@pytest.mark.parametrize(
    "body",
    [
        "Text with --- inside it",
        "A line --- like so -----",
        "--- at the very start without a newline before it",
    ],
)
def test_dashes_that_are_not_delimiters(body):
    assert len(split_slides(body)) == 1


def test_chunks_are_stripped():
    assert split_slides("  \n# One  \n---\n\n  # Two\n\n") == ["# One", "# Two"]


def test_delimiter_inside_code_fence_still_splits():
    body = "```\ncode\n---\nmore\n```"

    assert split_slides(body) == ["```\ncode", "more\n```"]
