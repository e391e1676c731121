"""CLI entry point: python -m wpcontent {normalize,image,post,media} [options]"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError
from rich.console import Console

from wpcontent import settings
from wpcontent.extractors.blocks import normalize_blocks
from wpcontent.extractors.image import ImageNotFoundError, extract_image
from wpcontent.query import (
    fetch_image_from_name,
    fetch_image_from_slug,
    fetch_image_from_url,
    fetch_post_from_slug,
    fetch_post_from_url,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wpcontent",
        description=(
            "Normalize WordPress content into typed JSON.\n"
            "Block trees, image markup, and posts/media from the REST API."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help=f"Logging level (default: {settings.LOG_LEVEL})")
    sub = parser.add_subparsers(dest="command", required=True)

    normalize = sub.add_parser("normalize", help="Normalize a parsed block tree (JSON)")
    normalize.add_argument("file", metavar="FILE",
                           help="JSON file with parsed blocks, or '-' for stdin")
    normalize.add_argument("--full-caption", action="store_true", default=False,
                           help="Keep caption markup instead of cleaned caption text")

    image = sub.add_parser("image", help="Extract the first <img> of an HTML fragment")
    image.add_argument("file", metavar="HTML_FILE",
                       help="HTML file, or '-' for stdin")
    _add_image_flags(image)

    post = sub.add_parser("post", help="Fetch a post summary from the REST API")
    target = post.add_mutually_exclusive_group(required=True)
    target.add_argument("--slug", metavar="SLUG", help="Post slug")
    target.add_argument("--url", metavar="URL", help="Post permalink")
    post.add_argument("--test-site", action="store_true", default=False,
                      help="Query the staging site instead of production")
    post.add_argument("--no-image", action="store_true", default=False,
                      help="Skip the featured image request")
    post.add_argument("--no-cache", action="store_true", default=False,
                      help="Bypass CDN caches with a timestamp parameter")
    _add_retry_flag(post)
    _add_image_flags(post)

    media = sub.add_parser("media", help="Fetch an image attachment from the REST API")
    target = media.add_mutually_exclusive_group(required=True)
    target.add_argument("--slug", metavar="SLUG", help="Attachment slug")
    target.add_argument("--name", metavar="NAME", help="Search term")
    target.add_argument("--url", metavar="URL", help="Attachment page URL")
    media.add_argument("--no-cache", action="store_true", default=False,
                       help="Bypass CDN caches with a timestamp parameter")
    _add_retry_flag(media)
    _add_image_flags(media)
    return parser


def _add_retry_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--retries", type=int, default=None, metavar="N",
                        help="Extra attempts on 429/5xx and network errors "
                             f"(default: {settings.MAX_RETRIES})")


def _add_image_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--full-caption", action="store_true", default=False,
                        help="Keep caption markup instead of cleaned caption text")
    parser.add_argument("--no-lazy-load", action="store_true", default=False,
                        help="Drop loading=\"lazy\" from the image markup")


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _emit(payload: Any) -> None:
    """Write *payload* as JSON to stdout, highlighted when attached to a terminal."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)
    elif isinstance(payload, list):
        payload = [
            item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item
            for item in payload
        ]
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if sys.stdout.isatty():
        Console().print_json(text)
    else:
        print(text)


def _run_normalize(args: argparse.Namespace) -> int:
    try:
        raw = json.loads(_read_input(args.file))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"ERROR: could not read block JSON: {exc}", file=sys.stderr)
        return EXIT_USAGE
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        print(f"ERROR: expected a block list or object, got {type(raw).__name__}",
              file=sys.stderr)
        return EXIT_USAGE
    try:
        blocks = normalize_blocks(raw, full_caption=args.full_caption)
    except ValidationError as exc:
        print(f"ERROR: input is not a parsed block tree:\n{exc}", file=sys.stderr)
        return EXIT_USAGE
    logger.info("Normalized %d top-level blocks", len(blocks))
    _emit(blocks)
    return EXIT_OK


def _run_image(args: argparse.Namespace) -> int:
    try:
        html = _read_input(args.file)
    except OSError as exc:
        print(f"ERROR: could not read HTML: {exc}", file=sys.stderr)
        return EXIT_USAGE
    try:
        image = extract_image(
            html, full_caption=args.full_caption, lazy_load=not args.no_lazy_load,
        )
    except ImageNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_USAGE
    _emit(image)
    return EXIT_OK


def _run_post(args: argparse.Namespace) -> int:
    options: dict[str, Any] = {
        "use_test_site": args.test_site,
        "use_cache": not args.no_cache,
        "get_image": not args.no_image,
        "image_full_caption": args.full_caption,
        "image_lazy_load": not args.no_lazy_load,
        "max_retries": args.retries,
    }
    if args.slug:
        post = fetch_post_from_slug(args.slug, **options)
    else:
        post = fetch_post_from_url(args.url, **options)
    if post is None:
        print("No post found", file=sys.stderr)
        return EXIT_NOT_FOUND
    _emit(post)
    return EXIT_OK


def _run_media(args: argparse.Namespace) -> int:
    options: dict[str, Any] = {
        "full_caption": args.full_caption,
        "use_cache": not args.no_cache,
        "lazy_load": not args.no_lazy_load,
        "max_retries": args.retries,
    }
    if args.slug:
        image = fetch_image_from_slug(args.slug, **options)
    elif args.name:
        image = fetch_image_from_name(args.name, **options)
    else:
        image = fetch_image_from_url(args.url, **options)
    if image is None:
        print("No image found", file=sys.stderr)
        return EXIT_NOT_FOUND
    _emit(image)
    return EXIT_OK


_COMMANDS = {
    "normalize": _run_normalize,
    "image": _run_image,
    "post": _run_post,
    "media": _run_media,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format=settings.LOG_FORMAT)
    return _COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
