"""
Presentation diffing.

Decides whether a consumer holding a :class:`PresentationCache` can patch
individual slides or has to rebuild everything after the source changed.

Known limitations, kept on purpose:

- when the slide count changes, slides are matched greedily by exact
  combined hash (first unmatched old slide wins). Edited slides then show
  up as one removal plus one addition, never as modified, and duplicate
  slides can be paired with the "wrong" twin.
- any frontmatter change counts as a theme change.
"""
import logging
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional, Set

from .hashing import SlideHasher, StringHasher
from .models import DiffType, Presentation, PresentationCache, SlideDiff

logger = logging.getLogger(__name__)

# More added or removed slides than this and patching is not worth it
FULL_RENDER_THRESHOLD = 5


def diff_presentations(
    old_cache: PresentationCache,
    new_presentation: Presentation,
    hasher: Optional[StringHasher] = None,
) -> SlideDiff:
    """
    Compare a cached presentation with a freshly parsed one.

    Args:
        old_cache: Snapshot built from the previous version
        new_presentation: Newly parsed presentation
        hasher: String hash used when *old_cache* was built (default
            :func:`~slide_engine.hashing.fast_hash`)

    Returns:
        SlideDiff classifying the change as none, content-only or structural
    """
    slide_hasher = SlideHasher(hasher)

    frontmatter_changed = slide_hasher.hash_frontmatter(new_presentation.frontmatter) != old_cache.frontmatter_hash
    theme_changed = frontmatter_changed

    new_hashes = [slide_hasher.hash_slide(s).combined_hash for s in new_presentation.slides]
    old_hashes = [fp.combined_hash for fp in old_cache.slide_fingerprints]

    if len(new_hashes) == old_cache.slide_count:
        modified = [i for i, h in enumerate(new_hashes) if i >= len(old_hashes) or old_hashes[i] != h]

        if not modified and not frontmatter_changed:
            logger.debug("Diff: no changes")
            return SlideDiff(type=DiffType.NONE)

        logger.debug(f"Diff: content-only, modified={modified}, frontmatter_changed={frontmatter_changed}")
        return SlideDiff(
            type=DiffType.CONTENT_ONLY,
            modified_indices=modified,
            frontmatter_changed=frontmatter_changed,
            theme_changed=theme_changed,
        )

    # Old indices per hash, lowest first: popping one is the greedy first fit
    unmatched: Dict[str, Deque[int]] = defaultdict(deque)
    for old_idx, old_hash in enumerate(old_hashes):
        unmatched[old_hash].append(old_idx)

    matched_old: Set[int] = set()
    matched_new: Set[int] = set()
    for new_idx, new_hash in enumerate(new_hashes):
        candidates = unmatched.get(new_hash)
        if candidates:
            matched_old.add(candidates.popleft())
            matched_new.add(new_idx)

    removed: List[int] = [i for i in range(old_cache.slide_count) if i not in matched_old]
    added: List[int] = [i for i in range(len(new_hashes)) if i not in matched_new]

    logger.debug(f"Diff: structural, added={added}, removed={removed}")
    return SlideDiff(
        type=DiffType.STRUCTURAL,
        added_indices=added,
        removed_indices=removed,
        frontmatter_changed=frontmatter_changed,
        theme_changed=theme_changed,
    )


def requires_full_render(diff: SlideDiff) -> bool:
    """
    Whether *diff* is too large to apply slide by slide.

    True on any theme change, or when more than
    :data:`FULL_RENDER_THRESHOLD` slides were added or removed.
    """
    if diff.theme_changed:
        return True

    if len(diff.added_indices) > FULL_RENDER_THRESHOLD or len(diff.removed_indices) > FULL_RENDER_THRESHOLD:
        return True

    return False
