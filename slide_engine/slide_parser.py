"""
Slide parser: turns a deck's source text into a :class:`Presentation`.

Conventions (iA Presenter style):

- ``---`` on its own line separates slides
- headings, images, code fences, ``$$`` math and ``|`` tables are shown
- tab- or 4-space-indented lines are shown (lists, quotes, paragraphs)
- every other line is a speaker note
- lines starting with ``//`` are comments and are dropped entirely

Malformed input never raises. Unterminated fences and math blocks run to
the end of the slide, and anything that cannot be classified becomes a
speaker note.
"""
import logging
import re
from enum import Enum
from typing import List, Optional, Tuple

from .frontmatter import extract_frontmatter
from .layout import infer_layout
from .models import ElementType, Presentation, Slide, SlideElement, SlideLayout, SlideMetadata
from .splitter import split_slides

logger = logging.getLogger(__name__)


class ScanState(Enum):
    """Where the line scanner currently is within a slide."""
    METADATA = "metadata"
    BODY = "body"


_LAYOUT_RE = re.compile(r"^layout:\s*(.+)$", re.IGNORECASE)
_BACKGROUND_RE = re.compile(r"^background:\s*(.+)$", re.IGNORECASE)
_OPACITY_RE = re.compile(r"^opacity:\s*(\d+)%?$", re.IGNORECASE)
_MODE_RE = re.compile(r"^mode:\s*(light|dark)$", re.IGNORECASE)
_CLASS_RE = re.compile(r"^class:\s*(.+)$", re.IGNORECASE)

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_IMAGE_RE = re.compile(r"^!\[([^\]]*)\]\(([^)]+)\)$")
_BULLET_RE = re.compile(r"^[-*+]\s+(.+)$")
_NUMBERED_RE = re.compile(r"^\d+\.\s+(.+)$")
_LIST_CONTINUATION_RE = re.compile(r"^(?:[-*+]|\d+\.)\s+")
_QUOTE_PREFIX_RE = re.compile(r"^>\s*")

CODE_FENCE = "```"
MATH_FENCE = "$$"


def _is_indented(line: str) -> bool:
    return line.startswith("\t") or line.startswith("    ")


def _dedent_once(line: str) -> str:
    if line.startswith("\t"):
        return line[1:]
    if line.startswith("    "):
        return line[4:]
    return line


class SlideParser:
    """
    Two-phase line scanner producing :class:`Slide` objects.

    Phase one reads the optional ``key: value`` preamble into
    :class:`SlideMetadata`; phase two classifies the remaining lines into
    elements and speaker notes.
    """

    def __init__(self, debug: bool = False):
        """
        Args:
            debug: Log every classification decision at DEBUG level
        """
        self.debug = debug

    def parse(self, source: str) -> Presentation:
        """
        Parse a complete document.

        Args:
            source: Full document text, frontmatter included

        Returns:
            Presentation whose slides are numbered 0..n-1. Chunks without
            any element or speaker note are left out.
        """
        frontmatter, body = extract_frontmatter(source)

        slides: List[Slide] = []
        for chunk in split_slides(body):
            slide = self.parse_slide(chunk, len(slides))
            if slide.elements or slide.speaker_notes:
                slides.append(slide)
            elif self.debug:
                logger.debug(f"Skipping empty slide chunk {chunk!r}")

        logger.debug(f"Parsed {len(slides)} slides")
        return Presentation(frontmatter=frontmatter, slides=slides, source=source)

    def parse_slide(self, raw_content: str, index: int) -> Slide:
        """
        Parse one slide chunk.

        Args:
            raw_content: Slide text as produced by the splitter
            index: Ordinal to give the slide

        Returns:
            The parsed slide, with ``metadata.layout`` always set
        """
        lines = raw_content.split("\n")
        metadata, body_start = self._read_preamble(lines)
        elements, speaker_notes = self._read_body(lines[body_start:])

        if metadata.layout is None:
            metadata.layout = infer_layout(elements)
            if self.debug:
                logger.debug(f"Slide {index}: inferred layout {metadata.layout.value}")

        return Slide(
            index=index,
            metadata=metadata,
            elements=elements,
            speaker_notes=speaker_notes,
            raw_content=raw_content,
        )

    # ------------------------------------------------------------------
    # Phase one: metadata preamble
    # ------------------------------------------------------------------

    def _read_preamble(self, lines: List[str]) -> Tuple[SlideMetadata, int]:
        """Return the slide metadata and the index of the first body line.

        A blank line closes the preamble and everything above it is
        consumed, including colon lines that matched no known key. A line
        without a colon, or a heading, closes it right after the last
        recognised key.
        """
        metadata = SlideMetadata()
        body_start = 0
        state = ScanState.METADATA
        i = 0

        while state is ScanState.METADATA and i < len(lines):
            line = lines[i].strip()

            if not line:
                body_start = i + 1
                state = ScanState.BODY
            elif self._apply_metadata_line(line, metadata):
                body_start = i + 1
            elif ":" not in line or line.startswith("#"):
                state = ScanState.BODY
            i += 1

        return metadata, body_start

    def _apply_metadata_line(self, line: str, metadata: SlideMetadata) -> bool:
        match = _LAYOUT_RE.match(line)
        if match:
            metadata.layout = SlideLayout.coerce(match.group(1).strip())
            return True

        match = _BACKGROUND_RE.match(line)
        if match:
            metadata.background = match.group(1).strip()
            return True

        match = _OPACITY_RE.match(line)
        if match:
            metadata.background_opacity = int(match.group(1)) / 100
            return True

        match = _MODE_RE.match(line)
        if match:
            metadata.mode = match.group(1).lower()
            return True

        match = _CLASS_RE.match(line)
        if match:
            metadata.css_class = match.group(1).strip()
            return True

        return False

    # ------------------------------------------------------------------
    # Phase two: body classification
    # ------------------------------------------------------------------

    def _read_body(self, lines: List[str]) -> Tuple[List[SlideElement], List[str]]:
        elements: List[SlideElement] = []
        speaker_notes: List[str] = []
        i = 0

        while i < len(lines):
            line = lines[i]

            if not line.strip():
                i += 1
                continue

            # Comment: hidden from slide and notes alike
            if line.strip().startswith("//"):
                i += 1
                continue

            element, next_index = self._classify(lines, i)
            if element is None:
                speaker_notes.append(line)
                i += 1
                continue

            if self.debug:
                logger.debug(f"{element.type.value}: {element.raw!r}")
            elements.append(element)
            i = next_index

        return elements, speaker_notes

    def _classify(self, lines: List[str], i: int) -> Tuple[Optional[SlideElement], int]:
        """Classify the line at *i*; ``(None, i)`` means speaker note."""
        line = lines[i]

        match = _HEADING_RE.match(line)
        if match:
            level = len(match.group(1))
            return SlideElement.heading(match.group(2), level, raw=line), i + 1

        match = _IMAGE_RE.match(line)
        if match:
            return SlideElement(type=ElementType.IMAGE, content=match.group(2), raw=line), i + 1

        if line.startswith(CODE_FENCE):
            return self._read_code_block(lines, i)

        if line.startswith(MATH_FENCE):
            return self._read_math_block(lines, i)

        if "|" in line and line.strip().startswith("|"):
            return self._read_table(lines, i)

        if _is_indented(line):
            return self._read_indented(lines, i)

        return None, i

    def _read_code_block(self, lines: List[str], start: int) -> Tuple[SlideElement, int]:
        language = lines[start][len(CODE_FENCE):].strip()
        i = start + 1
        while i < len(lines) and not lines[i].startswith(CODE_FENCE):
            i += 1

        code = "\n".join(lines[start + 1:i])
        content = f"{language}\n{code}" if language else code
        raw = "\n".join(lines[start:i + 1])
        return SlideElement(type=ElementType.CODE, content=content, raw=raw), i + 1

    def _read_math_block(self, lines: List[str], start: int) -> Tuple[SlideElement, int]:
        i = start + 1
        # A bare `$$` opens a block; `$$ ... $$` on one line is self-contained
        if lines[start].strip() == MATH_FENCE:
            while i < len(lines) and lines[i].strip() != MATH_FENCE:
                i += 1
            if i < len(lines):
                i += 1

        raw = "\n".join(lines[start:i])
        content = raw
        if content.startswith(MATH_FENCE):
            content = content[len(MATH_FENCE):]
        if content.endswith(MATH_FENCE):
            content = content[:-len(MATH_FENCE)]
        return SlideElement(type=ElementType.MATH, content=content.strip(), raw=raw), i

    def _read_table(self, lines: List[str], start: int) -> Tuple[SlideElement, int]:
        i = start
        while i < len(lines) and "|" in lines[i]:
            i += 1

        rows = lines[start:i]
        # An indented table would otherwise read as an indented code block
        if _is_indented(rows[0]):
            rows = [_dedent_once(row) for row in rows]
        table = "\n".join(rows)
        return SlideElement(type=ElementType.TABLE, content=table, raw=table), i

    def _read_indented(self, lines: List[str], start: int) -> Tuple[SlideElement, int]:
        text = _dedent_once(lines[start])

        if _BULLET_RE.match(text) or _NUMBERED_RE.match(text):
            items = [text]
            i = start + 1
            while i < len(lines) and _is_indented(lines[i]):
                item = _dedent_once(lines[i])
                if not _LIST_CONTINUATION_RE.match(item):
                    break
                items.append(item)
                i += 1

            content = "\n".join(items)
            return SlideElement(type=ElementType.LIST, content=content, raw=content), i

        if text.startswith(">"):
            quote = _QUOTE_PREFIX_RE.sub("", text, count=1)
            return SlideElement(type=ElementType.BLOCKQUOTE, content=quote, raw=text), start + 1

        return SlideElement(type=ElementType.PARAGRAPH, content=text, raw=text), start + 1


def parse_presentation(source: str) -> Presentation:
    """
    Convenience function to parse a document with default settings.

    Args:
        source: Full document text

    Returns:
        Parsed presentation
    """
    return SlideParser().parse(source)
