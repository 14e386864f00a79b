"""
Data models for the slide engine.
"""
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class ElementType(str, Enum):
    """Closed set of content element kinds a slide can carry."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    BLOCKQUOTE = "blockquote"
    IMAGE = "image"
    CODE = "code"
    TABLE = "table"
    MATH = "math"


class SlideLayout(str, Enum):
    """Named visual arrangements.

    The parser only ever infers TITLE, SECTION, DEFAULT, FULL_IMAGE,
    CAPTION, SPLIT and GRID; the rest can only be requested explicitly
    through a ``layout:`` line.
    """
    COVER = "cover"
    TITLE = "title"
    SECTION = "section"
    DEFAULT = "default"
    ONE_COLUMN = "1-column"
    TWO_COLUMNS = "2-columns"
    THREE_COLUMNS = "3-columns"
    TWO_COLUMNS_1_2 = "2-columns-1+2"
    TWO_COLUMNS_2_1 = "2-columns-2+1"
    FULL_IMAGE = "full-image"
    HALF_IMAGE = "half-image"
    HALF_IMAGE_HORIZONTAL = "half-image-horizontal"
    CAPTION = "caption"
    SPLIT = "split"
    GRID = "grid"

    @classmethod
    def coerce(cls, value: str) -> Union["SlideLayout", str]:
        """Return the enum member for *value*, or *value* itself if unknown."""
        try:
            return cls(value)
        except ValueError:
            return value


def _layout_value(layout: Union[SlideLayout, str, None]) -> Optional[str]:
    if isinstance(layout, SlideLayout):
        return layout.value
    return layout


@dataclass
class Frontmatter:
    """
    Deck-level settings taken from the leading ``---`` block.

    Every field is optional; ``None`` means the key was not present.
    """
    title: Optional[Union[str, bool]] = None
    author: Optional[Union[str, bool]] = None
    date: Optional[Union[str, bool]] = None
    theme: Optional[Union[str, bool]] = None
    title_font: Optional[Union[str, bool]] = None
    body_font: Optional[Union[str, bool]] = None
    accent1: Optional[Union[str, bool]] = None
    accent2: Optional[Union[str, bool]] = None
    accent3: Optional[Union[str, bool]] = None
    accent4: Optional[Union[str, bool]] = None
    accent5: Optional[Union[str, bool]] = None
    accent6: Optional[Union[str, bool]] = None
    light_background: Optional[Union[str, bool]] = None
    dark_background: Optional[Union[str, bool]] = None
    header_left: Optional[Union[str, bool]] = None
    header_middle: Optional[Union[str, bool]] = None
    header_right: Optional[Union[str, bool]] = None
    footer_left: Optional[Union[str, bool]] = None
    footer_middle: Optional[Union[str, bool]] = None
    footer_right: Optional[Union[str, bool]] = None
    logo: Optional[Union[str, bool]] = None
    logo_size: Optional[Union[str, bool]] = None
    aspect_ratio: Optional[Union[str, bool]] = None
    show_progress: Optional[Union[str, bool]] = None
    show_slide_numbers: Optional[Union[str, bool]] = None
    transition: Optional[Union[str, bool]] = None

    def to_dict(self) -> Dict[str, Union[str, bool]]:
        """Set fields only, in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def is_empty(self) -> bool:
        return not self.to_dict()


@dataclass
class SlideMetadata:
    """Per-slide settings read from the ``key: value`` preamble."""
    layout: Optional[Union[SlideLayout, str]] = None
    background: Optional[str] = None
    background_opacity: Optional[float] = None
    mode: Optional[str] = None  # "light" or "dark"
    css_class: Optional[str] = None  # `class:` in source

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.layout is not None:
            data["layout"] = _layout_value(self.layout)
        if self.background is not None:
            data["background"] = self.background
        if self.background_opacity is not None:
            data["background_opacity"] = self.background_opacity
        if self.mode is not None:
            data["mode"] = self.mode
        if self.css_class is not None:
            data["class"] = self.css_class
        return data


@dataclass
class SlideElement:
    """
    One classified piece of visible slide content.

    ``level`` is only set for headings (1-6).
    """
    type: ElementType
    content: str
    raw: str
    visible: bool = True
    level: Optional[int] = None

    def is_heading(self):
        return self.type == ElementType.HEADING

    def is_paragraph(self):
        return self.type == ElementType.PARAGRAPH

    def is_list(self):
        return self.type == ElementType.LIST

    def is_blockquote(self):
        return self.type == ElementType.BLOCKQUOTE

    def is_image(self):
        return self.type == ElementType.IMAGE

    def is_code_block(self):
        return self.type == ElementType.CODE

    def is_table(self):
        return self.type == ElementType.TABLE

    def is_math(self):
        return self.type == ElementType.MATH

    @classmethod
    def heading(cls, content: str, level: int, raw: str) -> "SlideElement":
        return cls(type=ElementType.HEADING, content=content, raw=raw, level=level)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type.value,
            "content": self.content,
            "visible": self.visible,
            "raw": self.raw,
        }
        if self.level is not None:
            data["level"] = self.level
        return data


@dataclass
class Slide:
    """
    A single parsed slide.

    ``hidden`` belongs to whoever displays the deck; the engine never sets
    it but includes it in the metadata fingerprint.
    """
    index: int
    metadata: SlideMetadata
    elements: List[SlideElement] = field(default_factory=list)
    speaker_notes: List[str] = field(default_factory=list)
    raw_content: str = ""
    hidden: Optional[bool] = None

    @property
    def layout(self) -> Optional[Union[SlideLayout, str]]:
        return self.metadata.layout

    def visible_elements(self) -> List[SlideElement]:
        return [e for e in self.elements if e.visible]

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "index": self.index,
            "metadata": self.metadata.to_dict(),
            "elements": [e.to_dict() for e in self.elements],
            "speaker_notes": list(self.speaker_notes),
            "raw_content": self.raw_content,
        }
        if self.hidden is not None:
            data["hidden"] = self.hidden
        return data


@dataclass
class Presentation:
    frontmatter: Frontmatter
    slides: List[Slide]
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frontmatter": self.frontmatter.to_dict(),
            "slides": [s.to_dict() for s in self.slides],
        }


@dataclass(frozen=True)
class SlideFingerprint:
    content_hash: str
    metadata_hash: str
    combined_hash: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "content_hash": self.content_hash,
            "metadata_hash": self.metadata_hash,
            "combined_hash": self.combined_hash,
        }


@dataclass(frozen=True)
class PresentationCache:
    """
    Snapshot of a built presentation used as the "before" side of a diff.

    Callers replace their reference after diffing; a cache is never
    updated in place.
    """
    frontmatter_hash: str
    slide_fingerprints: Tuple[SlideFingerprint, ...]
    slide_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frontmatter_hash": self.frontmatter_hash,
            "slide_fingerprints": [fp.to_dict() for fp in self.slide_fingerprints],
            "slide_count": self.slide_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PresentationCache":
        """
        Rebuild a cache written by :meth:`to_dict`.

        Raises:
            ValueError: If *data* is not a cache payload
        """
        try:
            fingerprints = tuple(
                SlideFingerprint(
                    content_hash=str(fp["content_hash"]),
                    metadata_hash=str(fp["metadata_hash"]),
                    combined_hash=str(fp["combined_hash"]),
                )
                for fp in data["slide_fingerprints"]
            )
            frontmatter_hash = str(data["frontmatter_hash"])
            slide_count = int(data["slide_count"])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid presentation cache: {e}") from e

        if slide_count != len(fingerprints):
            raise ValueError(
                f"Invalid presentation cache: slide_count={slide_count} "
                f"but {len(fingerprints)} fingerprints"
            )
        return cls(
            frontmatter_hash=frontmatter_hash,
            slide_fingerprints=fingerprints,
            slide_count=slide_count,
        )


class DiffType(str, Enum):
    NONE = "none"
    CONTENT_ONLY = "content-only"
    STRUCTURAL = "structural"


@dataclass
class SlideDiff:
    """Result of comparing a cached presentation against a new one."""
    type: DiffType
    modified_indices: List[int] = field(default_factory=list)
    added_indices: List[int] = field(default_factory=list)
    removed_indices: List[int] = field(default_factory=list)
    frontmatter_changed: bool = False
    theme_changed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "modified_indices": list(self.modified_indices),
            "added_indices": list(self.added_indices),
            "removed_indices": list(self.removed_indices),
            "frontmatter_changed": self.frontmatter_changed,
            "theme_changed": self.theme_changed,
        }
