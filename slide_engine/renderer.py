"""
HTML rendering of parsed slides.

Produces theme-free markup: layout, mode and class are exposed as CSS
classes and data attributes so a stylesheet supplied by the host can take
over from there.
"""
import logging
import re
from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from mdit_py_plugins.dollarmath import dollarmath_plugin

from .models import ElementType, Frontmatter, Presentation, Slide, SlideElement, SlideLayout

logger = logging.getLogger(__name__)

_IMAGE_ALT_RE = re.compile(r"^!\[([^\]]*)\]")
_ORDERED_ITEM_RE = re.compile(r"^\d+\.")
_ITEM_MARKER_RE = re.compile(r"^(?:[-*+]|\d+\.)\s+")


def _layout_name(slide: Slide) -> str:
    layout = slide.layout
    if isinstance(layout, SlideLayout):
        return layout.value
    return layout or SlideLayout.DEFAULT.value


def _span(value) -> str:
    return "" if value is None else f"<span>{escapeHtml(str(value))}</span>"


class SlideRenderer:
    """
    Render slides and elements to HTML fragments using markdown-it-py.
    """

    def __init__(self, include_notes: bool = False, debug: bool = False):
        """
        Args:
            include_notes: Append speaker notes as ``<aside class="notes">``
            debug: Log each rendered slide
        """
        self.include_notes = include_notes
        self.debug = debug

        # Raw HTML in slide text is shown as text, never injected
        self.markdown_processor = MarkdownIt('commonmark', {'html': False})
        self.markdown_processor.enable(['table', 'strikethrough'])
        self.markdown_processor = self.markdown_processor.use(
            dollarmath_plugin,
            allow_space=False,   # Don't allow spaces after/before $
            allow_digits=False,  # Don't allow digits before/after $
            double_inline=False  # Don't allow $$ in inline context
        )

    def render_inline(self, text: str) -> str:
        return self.markdown_processor.renderInline(text)

    def render_element(self, element: SlideElement) -> str:
        """
        Render a single element.

        Raises:
            ValueError: If the element carries a type outside ElementType
        """
        kind = element.type

        if kind == ElementType.HEADING:
            level = element.level or 1
            return f"<h{level}>{self.render_inline(element.content)}</h{level}>"

        elif kind == ElementType.PARAGRAPH:
            return f"<p>{self.render_inline(element.content)}</p>"

        elif kind == ElementType.BLOCKQUOTE:
            return f"<blockquote>{self.render_inline(element.content)}</blockquote>"

        elif kind == ElementType.LIST:
            return self._render_list(element.content)

        elif kind == ElementType.IMAGE:
            return self._render_image(element)

        elif kind == ElementType.CODE:
            return self._render_code(element)

        elif kind == ElementType.TABLE:
            return self.markdown_processor.render(element.content).strip()

        elif kind == ElementType.MATH:
            return f'<div class="math-block">{escapeHtml(element.content)}</div>'

        raise ValueError(f"Unknown element type: {kind!r}")

    def _render_list(self, content: str) -> str:
        lines = content.split("\n")
        tag = "ol" if _ORDERED_ITEM_RE.match(lines[0]) else "ul"
        items = "".join(
            f"<li>{self.render_inline(_ITEM_MARKER_RE.sub('', line, count=1))}</li>"
            for line in lines
        )
        return f"<{tag}>{items}</{tag}>"

    def _render_image(self, element: SlideElement) -> str:
        match = _IMAGE_ALT_RE.match(element.raw)
        alt = match.group(1) if match else ""
        return (
            f'<figure class="image-figure">'
            f'<img src="{escapeHtml(element.content)}" alt="{escapeHtml(alt)}" />'
            f'</figure>'
        )

    def _render_code(self, element: SlideElement) -> str:
        language = element.raw.split("\n", 1)[0][3:].strip()
        code = element.content
        if language:
            code = code[len(language) + 1:]
        class_attr = f' class="language-{escapeHtml(language)}"' if language else ""
        return f"<pre><code{class_attr}>{escapeHtml(code)}</code></pre>"

    def render_notes(self, slide: Slide) -> str:
        paragraphs = "".join(f"<p>{self.render_inline(note)}</p>" for note in slide.speaker_notes)
        return f'<aside class="notes">{paragraphs}</aside>'

    def render_header(self, frontmatter: Frontmatter) -> str:
        """Deck-wide header, or an empty string when no header field is set."""
        cells = [
            ("header-left", frontmatter.header_left),
            ("header-middle", frontmatter.header_middle),
            ("header-right", frontmatter.header_right),
        ]
        if all(value is None for _, value in cells):
            return ""
        divs = "".join(f'<div class="{name}">{_span(value)}</div>' for name, value in cells)
        return f'<header class="slide-header">{divs}</header>'

    def render_footer(self, frontmatter: Frontmatter, index: int) -> str:
        """Deck-wide footer; the slide number sits on the right unless turned off."""
        right = _span(frontmatter.footer_right)
        if frontmatter.show_slide_numbers is not False:
            right += f"<span>{index + 1}</span>"
        return (
            '<footer class="slide-footer">'
            f'<div class="footer-left">{_span(frontmatter.footer_left)}</div>'
            f'<div class="footer-middle">{_span(frontmatter.footer_middle)}</div>'
            f'<div class="footer-right">{right}</div>'
            '</footer>'
        )

    def render_slide(self, slide: Slide, frontmatter: Optional[Frontmatter] = None) -> str:
        """
        Render one slide as a ``<section>``.

        Args:
            slide: Parsed slide
            frontmatter: Deck frontmatter supplying header, footer and slide
                number settings

        Returns:
            HTML string
        """
        layout = _layout_name(slide)
        meta = slide.metadata

        classes = ["slide", f"layout-{layout}"]
        if meta.css_class:
            classes.append(meta.css_class)

        attrs = [
            f'class="{escapeHtml(" ".join(classes))}"',
            f'data-index="{slide.index}"',
            f'data-layout="{escapeHtml(layout)}"',
        ]
        if meta.mode:
            attrs.append(f'data-mode="{meta.mode}"')
        if meta.background:
            attrs.append(f'data-background="{escapeHtml(meta.background)}"')
        if meta.background_opacity is not None:
            attrs.append(f'data-background-opacity="{meta.background_opacity:g}"')

        frontmatter = frontmatter or Frontmatter()
        body: List[str] = []
        header = self.render_header(frontmatter)
        if header:
            body.append(header)
        body.extend(self.render_element(e) for e in slide.visible_elements())
        body.append(self.render_footer(frontmatter, slide.index))
        if self.include_notes and slide.speaker_notes:
            body.append(self.render_notes(slide))

        if self.debug:
            logger.debug(f"Rendered slide {slide.index} ({layout}, {len(body)} blocks)")

        inner = "\n".join(body)
        return f"<section {' '.join(attrs)}>\n{inner}\n</section>"

    def render(self, presentation: Presentation) -> List[str]:
        """Render every slide of *presentation*, in order."""
        return [self.render_slide(slide, presentation.frontmatter) for slide in presentation.slides]
