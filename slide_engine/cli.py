#!/usr/bin/env python3
"""
Command-line entry point: parse decks, snapshot them and diff against a
snapshot.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from .diff import diff_presentations, requires_full_render
from .hashing import build_presentation_cache
from .models import PresentationCache
from .renderer import SlideRenderer
from .slide_parser import SlideParser

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="slide-engine", description="Parse slide decks and detect changes between versions.")
    p.add_argument("--debug", action="store_true", help="Enable verbose logging")
    sub = p.add_subparsers(dest="command", required=True)

    parse_cmd = sub.add_parser("parse", help="Print the parsed presentation as JSON")
    parse_cmd.add_argument("markdown", type=Path, help="Deck file to parse")
    parse_cmd.add_argument("--html", action="store_true", help="Print rendered slide HTML instead of JSON")
    parse_cmd.add_argument("--notes", action="store_true", help="Include speaker notes in the HTML output")

    cache_cmd = sub.add_parser("cache", help="Write a change-detection snapshot of a deck")
    cache_cmd.add_argument("markdown", type=Path, help="Deck file to snapshot")
    cache_cmd.add_argument("--output", "-o", type=Path, required=True, help="Destination JSON path")

    diff_cmd = sub.add_parser("diff", help="Compare a deck against a snapshot")
    diff_cmd.add_argument("cache", type=Path, help="Snapshot written by `cache`")
    diff_cmd.add_argument("markdown", type=Path, help="Current deck file")
    diff_cmd.add_argument("--update", action="store_true", help="Rewrite the snapshot after diffing")
    return p


def _read_deck(path: Path) -> str:
    if not path.exists():
        logger.error(f"Markdown file '{path}' not found")
        sys.exit(1)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Markdown file '{path}' could not be read: {e}")
        sys.exit(1)


def _load_cache(path: Path) -> PresentationCache:
    try:
        return PresentationCache.from_dict(json.loads(path.read_text(encoding="utf-8")))
    except FileNotFoundError:
        logger.error(f"Cache file '{path}' not found")
    except OSError as e:
        logger.error(f"Cache file '{path}' could not be read: {e}")
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too
        logger.error(f"Cache file '{path}' is not usable: {e}")
    sys.exit(1)


def _write_cache(cache: PresentationCache, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cache.to_dict(), indent=2), encoding="utf-8")
    logger.info(f"Cache written to {path}")


def run(args: argparse.Namespace) -> int:
    parser = SlideParser(debug=args.debug)

    if args.command == "parse":
        presentation = parser.parse(_read_deck(args.markdown))
        if args.html:
            renderer = SlideRenderer(include_notes=args.notes, debug=args.debug)
            print("\n".join(renderer.render(presentation)))
        else:
            print(json.dumps(presentation.to_dict(), indent=2, ensure_ascii=False))
        return 0

    if args.command == "cache":
        presentation = parser.parse(_read_deck(args.markdown))
        _write_cache(build_presentation_cache(presentation), args.output)
        return 0

    if args.command == "diff":
        old_cache = _load_cache(args.cache)
        presentation = parser.parse(_read_deck(args.markdown))
        diff = diff_presentations(old_cache, presentation)

        result = diff.to_dict()
        result["requires_full_render"] = requires_full_render(diff)
        print(json.dumps(result, indent=2))

        if args.update:
            _write_cache(build_presentation_cache(presentation), args.cache)
        return 0

    return 2


def main(argv=None):
    """Command-line entry point for the slide engine."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s  %(message)s",
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
