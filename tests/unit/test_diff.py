"""Test presentation diffing and the full-render policy."""

import pytest
from slide_engine.diff import FULL_RENDER_THRESHOLD, diff_presentations, requires_full_render
from slide_engine.hashing import SlideHasher, build_presentation_cache, sha256_hash
from slide_engine.models import DiffType, SlideDiff
from slide_engine.slide_parser import SlideParser


def parse(source):
    return SlideParser().parse(source)


def deck(*slides, frontmatter=""):
    return frontmatter + "\n---\n".join(slides)


def diff_sources(old_source, new_source):
    cache = build_presentation_cache(parse(old_source))
    return diff_presentations(cache, parse(new_source))


@pytest.mark.parametrize(
    "source",
    [
        "# Same\n---\n# Same",
        "# One\n\nNotes\n---\n## Two\n\t- a\n\t- b\n---\n![x](x.png)",
        "---\ntitle: Deck\n---\n# Only",
        "",
    ],
)
def test_unchanged_presentation_is_none(source):
    presentation = parse(source)
    diff = diff_presentations(build_presentation_cache(presentation), presentation)

    assert diff.type == DiffType.NONE
    assert diff.modified_indices == []
    assert diff.added_indices == []
    assert diff.removed_indices == []
    assert diff.frontmatter_changed is False
    assert diff.theme_changed is False
    assert requires_full_render(diff) is False


def test_removing_an_element_is_content_only():
    old = deck("# First", "## Second\n\tpoint one\n\tpoint two", "# Third")
    new = deck("# First", "## Second\n\tpoint one", "# Third")

    diff = diff_sources(old, new)

    assert diff.type == DiffType.CONTENT_ONLY
    assert diff.modified_indices == [1]
    assert diff.added_indices == []
    assert diff.removed_indices == []
    assert diff.frontmatter_changed is False
    assert requires_full_render(diff) is False


def test_editing_a_speaker_note_is_content_only():
    diff = diff_sources(deck("# A\nold note", "# B"), deck("# A\nnew note", "# B"))

    assert diff.type == DiffType.CONTENT_ONLY
    assert diff.modified_indices == [0]


def test_inserting_a_slide_is_structural():
    old = deck("# A", "# B", "# C")
    new = deck("# A", "# B", "# New", "# C")

    diff = diff_sources(old, new)

    assert diff.type == DiffType.STRUCTURAL
    assert diff.added_indices == [2]
    assert diff.removed_indices == []
    assert diff.modified_indices == []
    assert requires_full_render(diff) is False


def test_removing_a_slide_is_structural():
    diff = diff_sources(deck("# A", "# B", "# C"), deck("# A", "# C"))

    assert diff.type == DiffType.STRUCTURAL
    assert diff.added_indices == []
    assert diff.removed_indices == [1]


def test_edited_slide_in_structural_diff_is_removed_and_added():
    diff = diff_sources(deck("# A", "# B"), deck("# A", "# B edited", "# C"))

    assert diff.type == DiffType.STRUCTURAL
    assert diff.modified_indices == []
    assert diff.removed_indices == [1]
    assert diff.added_indices == [1, 2]


def test_duplicate_slides_match_first_unmatched_old_slide():
    diff = diff_sources(deck("# X", "# X", "# Y"), deck("# X", "# Y"))

    assert diff.removed_indices == [1]
    assert diff.added_indices == []


def test_reordered_slides_with_count_change_are_all_matched():
    diff = diff_sources(deck("# A", "# B", "# C"), deck("# C", "# A"))

    assert diff.type == DiffType.STRUCTURAL
    assert diff.added_indices == []
    assert diff.removed_indices == [1]


def test_theme_change_forces_full_render():
    old = deck("# A", frontmatter="---\ntheme: zurich\n---\n")
    new = deck("# A", frontmatter="---\ntheme: minimal\n---\n")

    diff = diff_sources(old, new)

    assert diff.type == DiffType.CONTENT_ONLY
    assert diff.modified_indices == []
    assert diff.frontmatter_changed is True
    assert diff.theme_changed is True
    assert requires_full_render(diff) is True


def test_any_frontmatter_change_counts_as_theme_change():
    old = deck("# A", frontmatter="---\nauthor: Ann\n---\n")
    new = deck("# A", frontmatter="---\nauthor: Bob\n---\n")

    diff = diff_sources(old, new)

    assert diff.theme_changed is True
    assert requires_full_render(diff) is True


def test_unknown_frontmatter_keys_do_not_count_as_changes():
    old = deck("# A", frontmatter="---\nnotes: one\n---\n")
    new = deck("# A", frontmatter="---\nnotes: two\n---\n")

    assert diff_sources(old, new).type == DiffType.NONE


def test_hidden_flag_marks_slide_modified():
    presentation = parse(deck("# A", "# B"))
    cache = build_presentation_cache(presentation)
    presentation.slides[1].hidden = True

    diff = diff_presentations(cache, presentation)

    assert diff.type == DiffType.CONTENT_ONLY
    assert diff.modified_indices == [1]


def test_many_added_slides_force_full_render():
    old = deck("# A")
    new = deck("# A", *[f"# New {n}" for n in range(FULL_RENDER_THRESHOLD + 1)])

    diff = diff_sources(old, new)

    assert diff.type == DiffType.STRUCTURAL
    assert len(diff.added_indices) == FULL_RENDER_THRESHOLD + 1
    assert requires_full_render(diff) is True


@pytest.mark.parametrize(
    "diff,expected",
    [
        (SlideDiff(type=DiffType.STRUCTURAL, added_indices=list(range(5))), False),
        (SlideDiff(type=DiffType.STRUCTURAL, added_indices=list(range(6))), True),
        (SlideDiff(type=DiffType.STRUCTURAL, removed_indices=list(range(5))), False),
        (SlideDiff(type=DiffType.STRUCTURAL, removed_indices=list(range(6))), True),
        (SlideDiff(type=DiffType.CONTENT_ONLY, modified_indices=list(range(50))), False),
        (SlideDiff(type=DiffType.CONTENT_ONLY, frontmatter_changed=True, theme_changed=True), True),
    ],
)
def test_requires_full_render_threshold(diff, expected):
    assert requires_full_render(diff) is expected


def test_custom_hasher_round_trip():
    presentation = parse(deck("# A", "# B"))
    cache = SlideHasher(sha256_hash).build_cache(presentation)

    assert diff_presentations(cache, presentation, hasher=sha256_hash).type == DiffType.NONE


def test_diff_serialization():
    diff = diff_sources(deck("# A", "# B", "# C"), deck("# A", "# C"))

    assert diff.to_dict() == {
        "type": "structural",
        "modified_indices": [],
        "added_indices": [],
        "removed_indices": [1],
        "frontmatter_changed": False,
        "theme_changed": False,
    }
