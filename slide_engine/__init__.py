"""
Slide engine: compile markdown decks into a slide model and detect what
changed between two versions of a deck.
"""
from .diff import FULL_RENDER_THRESHOLD, diff_presentations, requires_full_render
from .frontmatter import FRONTMATTER_KEYS, extract_frontmatter
from .hashing import (
    SlideHasher,
    StringHasher,
    build_presentation_cache,
    fast_hash,
    hash_frontmatter,
    hash_slide,
    sha256_hash,
)
from .layout import infer_layout
from .models import (
    DiffType,
    ElementType,
    Frontmatter,
    Presentation,
    PresentationCache,
    Slide,
    SlideDiff,
    SlideElement,
    SlideFingerprint,
    SlideLayout,
    SlideMetadata,
)
from .renderer import SlideRenderer
from .slide_parser import SlideParser, parse_presentation
from .splitter import split_slides

__all__ = [
    "DiffType",
    "ElementType",
    "FRONTMATTER_KEYS",
    "FULL_RENDER_THRESHOLD",
    "Frontmatter",
    "Presentation",
    "PresentationCache",
    "Slide",
    "SlideDiff",
    "SlideElement",
    "SlideFingerprint",
    "SlideHasher",
    "SlideLayout",
    "SlideMetadata",
    "SlideParser",
    "SlideRenderer",
    "StringHasher",
    "build_presentation_cache",
    "diff_presentations",
    "extract_frontmatter",
    "fast_hash",
    "hash_frontmatter",
    "hash_slide",
    "infer_layout",
    "parse_presentation",
    "requires_full_render",
    "sha256_hash",
    "split_slides",
]
