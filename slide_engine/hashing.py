"""
Slide fingerprints for change detection.

Hashes here only answer "did this slide change since last time?". They
are not identities and collisions are accepted. The hash function is
injectable so a stronger one can replace :func:`fast_hash` without
touching the diff logic.
"""
import hashlib
import json
from typing import Any, Dict, Optional, Protocol

from .models import Frontmatter, Presentation, PresentationCache, Slide, SlideFingerprint

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class StringHasher(Protocol):
    """Anything mapping a string to a fixed-width string digest."""

    def __call__(self, text: str) -> str:
        ...


def _utf16_units(text: str):
    for ch in text:
        code = ord(ch)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 + (code >> 10)
            yield 0xDC00 + (code & 0x3FF)
        else:
            yield code


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return sign + "".join(reversed(digits))


def fast_hash(text: str) -> str:
    """
    32-bit rolling hash (``h * 31 + c`` over UTF-16 code units) in base 36.

    Produces the same digests as the desktop tool, so caches written by
    either side stay comparable.
    """
    h = 0
    for unit in _utf16_units(text):
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(h)


def sha256_hash(text: str) -> str:
    """Collision-resistant alternative to :func:`fast_hash`."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _serialize(data: Dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class SlideHasher:
    """Computes fingerprints with a configurable string hash."""

    def __init__(self, hasher: Optional[StringHasher] = None):
        self.hasher = hasher or fast_hash

    def hash_slide(self, slide: Slide) -> SlideFingerprint:
        """
        Fingerprint one slide.

        The content hash covers elements and speaker notes; the metadata
        hash covers slide metadata plus the externally owned ``hidden``
        flag.
        """
        parts = [f"{e.type.value}:{e.content}:{e.raw}" for e in slide.elements]
        parts.append("notes:" + "|".join(slide.speaker_notes))
        content_hash = self.hasher("||".join(parts))

        metadata = slide.metadata.to_dict()
        if slide.hidden is not None:
            metadata["hidden"] = slide.hidden
        metadata_hash = self.hasher(_serialize(metadata))

        combined_hash = self.hasher(f"{content_hash}::{metadata_hash}")
        return SlideFingerprint(
            content_hash=content_hash,
            metadata_hash=metadata_hash,
            combined_hash=combined_hash,
        )

    def hash_frontmatter(self, frontmatter: Frontmatter) -> str:
        return self.hasher(_serialize(frontmatter.to_dict()))

    def build_cache(self, presentation: Presentation) -> PresentationCache:
        """Snapshot *presentation* for a later :func:`diff_presentations` call."""
        return PresentationCache(
            frontmatter_hash=self.hash_frontmatter(presentation.frontmatter),
            slide_fingerprints=tuple(self.hash_slide(s) for s in presentation.slides),
            slide_count=len(presentation.slides),
        )


_default_hasher = SlideHasher()


def hash_slide(slide: Slide) -> SlideFingerprint:
    return _default_hasher.hash_slide(slide)


def hash_frontmatter(frontmatter: Frontmatter) -> str:
    return _default_hasher.hash_frontmatter(frontmatter)


def build_presentation_cache(presentation: Presentation) -> PresentationCache:
    return _default_hasher.build_cache(presentation)
