"""
Leading ``---`` metadata block handling.

Only flat ``key: value`` pairs are understood. Keys go through
:data:`FRONTMATTER_KEYS`; anything not listed there is dropped so that
decks written for other tools still load.
"""
import logging
import re
from typing import Dict, Tuple, Union

from .models import Frontmatter

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*\n", re.DOTALL)

# Source spelling -> Frontmatter attribute. Both kebab-case and camelCase
# spellings are accepted; keep this table in sync with decks authored for
# the desktop tool.
FRONTMATTER_KEYS: Dict[str, str] = {
    "title": "title",
    "author": "author",
    "date": "date",
    "theme": "theme",
    "title-font": "title_font",
    "titleFont": "title_font",
    "body-font": "body_font",
    "bodyFont": "body_font",
    "accent1": "accent1",
    "accent2": "accent2",
    "accent3": "accent3",
    "accent4": "accent4",
    "accent5": "accent5",
    "accent6": "accent6",
    "light-background": "light_background",
    "lightBackground": "light_background",
    "dark-background": "dark_background",
    "darkBackground": "dark_background",
    "header-left": "header_left",
    "headerLeft": "header_left",
    "header-middle": "header_middle",
    "headerMiddle": "header_middle",
    "header-right": "header_right",
    "headerRight": "header_right",
    "footer-left": "footer_left",
    "footerLeft": "footer_left",
    "footer-middle": "footer_middle",
    "footerMiddle": "footer_middle",
    "footer-right": "footer_right",
    "footerRight": "footer_right",
    "logo": "logo",
    "logo-size": "logo_size",
    "logoSize": "logo_size",
    "aspect-ratio": "aspect_ratio",
    "aspectRatio": "aspect_ratio",
    "show-progress": "show_progress",
    "showProgress": "show_progress",
    "show-slide-numbers": "show_slide_numbers",
    "showSlideNumbers": "show_slide_numbers",
    "transition": "transition",
}


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _coerce(value: str) -> Union[str, bool]:
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def parse_frontmatter_block(block: str) -> Frontmatter:
    """
    Parse the body of a frontmatter block (without the ``---`` fences).

    Args:
        block: Text between the opening and closing delimiter lines

    Returns:
        Frontmatter with every recognised key filled in
    """
    frontmatter = Frontmatter()

    for line in block.split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue

        key = key.strip()
        attr = FRONTMATTER_KEYS.get(key)
        if attr is None:
            logger.debug(f"Ignoring unknown frontmatter key {key!r}")
            continue

        setattr(frontmatter, attr, _coerce(_unquote(value.strip())))

    return frontmatter


def extract_frontmatter(source: str) -> Tuple[Frontmatter, str]:
    """
    Split a document into its frontmatter and the remaining body.

    A missing or unterminated block is not an error: an empty
    :class:`Frontmatter` is returned together with the untouched source.

    Args:
        source: Full document text

    Returns:
        Tuple of (frontmatter, body text)
    """
    match = _FRONTMATTER_RE.match(source)
    if not match:
        return Frontmatter(), source

    return parse_frontmatter_block(match.group(1)), source[match.end():]
