"""Slide delimiter handling."""
import re
from typing import List

# Three or more dashes alone on a line. Not fence-aware: a `---` line inside
# a code block or table ends the slide as well.
SLIDE_DELIMITER_RE = re.compile(r"\n---+\s*\n")


def split_slides(body: str) -> List[str]:
    """
    Split the post-frontmatter body into raw slide chunks.

    Args:
        body: Document text with the frontmatter already removed

    Returns:
        One stripped chunk per slide, empty chunks included
    """
    return [chunk.strip() for chunk in SLIDE_DELIMITER_RE.split(body)]
