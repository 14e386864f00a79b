"""
Layout inference for slides that do not name a layout explicitly.

The rules overlap (two images and a heading satisfy both the split and the
grid rule), so they are evaluated strictly in order and the first match
wins.
"""
from typing import Callable, List, Sequence, Tuple

from .models import SlideElement, SlideLayout


class _Counts:
    def __init__(self, elements: Sequence[SlideElement]):
        self.headings = [e for e in elements if e.is_heading()]
        self.images = [e for e in elements if e.is_image()]
        self.visible = [e for e in elements if e.visible]


def _is_full_image(c: _Counts) -> bool:
    return bool(c.images) and not c.headings and len(c.visible) == len(c.images)


def _is_title(c: _Counts) -> bool:
    level = c.headings[0].level if c.headings else None
    return level is not None and level <= 2 and len(c.visible) <= 2


def _is_section(c: _Counts) -> bool:
    return len(c.headings) == 1 and c.headings[0].level == 3 and len(c.visible) <= 2


def _is_caption(c: _Counts) -> bool:
    return len(c.images) == 1 and len(c.visible) > 1


def _is_split(c: _Counts) -> bool:
    return bool(c.images) and bool(c.headings)


def _is_grid(c: _Counts) -> bool:
    return len(c.images) > 1


LAYOUT_RULES: List[Tuple[SlideLayout, Callable[[_Counts], bool]]] = [
    (SlideLayout.FULL_IMAGE, _is_full_image),
    (SlideLayout.TITLE, _is_title),
    (SlideLayout.SECTION, _is_section),
    (SlideLayout.CAPTION, _is_caption),
    (SlideLayout.SPLIT, _is_split),
    (SlideLayout.GRID, _is_grid),
]


def infer_layout(elements: Sequence[SlideElement]) -> SlideLayout:
    """
    Pick a layout from the element mix of a slide.

    Args:
        elements: Parsed elements of the slide, in source order

    Returns:
        The first matching layout from :data:`LAYOUT_RULES`, or DEFAULT
    """
    counts = _Counts(elements)
    for layout, rule in LAYOUT_RULES:
        if rule(counts):
            return layout
    return SlideLayout.DEFAULT
