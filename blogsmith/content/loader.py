"""ContentLoader: walks a content directory and parses posts."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import Any, Iterator

import yaml

from blogsmith.config.models import ContentConfig, SiteConfig
from blogsmith.content.frontmatter import (
    parse_date,
    parse_tags,
    slug_from_filename,
    slugify,
    split_frontmatter,
)
from blogsmith.content.models import LoadResult, ParseError, Post, SkippedFile

logger = logging.getLogger(__name__)

_RECOGNIZED_KEYS = {"layout", "title", "date", "author", "tags", "slug"}


def _is_hidden(rel: Path) -> bool:
    return any(part.startswith(".") for part in rel.parts)


def _matches_any(rel: str, patterns: list[str]) -> bool:
    return any(fnmatch.fnmatch(rel, pat) for pat in patterns)


def iter_source_files(root: Path, exclude: list[str]) -> Iterator[Path]:
    """Yield every non-hidden, non-excluded file under root, in path order."""
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        rel = path.relative_to(root)
        if _is_hidden(rel) or _matches_any(rel.as_posix(), exclude):
            continue
        yield path


def _text_field(meta: dict[str, Any], key: str, source: str) -> str | None:
    value = meta.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ParseError(source, f"field {key!r} must be text, got {type(value).__name__}")
    return str(value)


def is_draft(meta: dict[str, Any]) -> bool:
    """True for posts marked ``draft: true`` or ``published: false``."""
    return meta.get("draft") is True or meta.get("published") is False


def load_post(
    path: str | Path,
    root: str | Path,
    config: ContentConfig | None = None,
    site: SiteConfig | None = None,
) -> Post:
    """Parse a single content file into a Post.

    Raises ParseError if the file is unreadable or its front-matter is
    missing, malformed, or lacks a title or date.
    """
    config = config or ContentConfig()
    site = site or SiteConfig()
    path = Path(path)
    source = path.relative_to(root).as_posix()

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(source, f"not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ParseError(source, f"cannot read file: {exc}") from exc

    try:
        meta, body = split_frontmatter(content)
    except yaml.YAMLError as exc:
        raise ParseError(source, f"YAML parse error: {exc}") from exc
    except ValueError as exc:
        raise ParseError(source, str(exc)) from exc

    if meta is None:
        raise ParseError(source, "no front-matter found (missing --- markers)")

    title = _text_field(meta, "title", source)
    if title is None or not title.strip():
        raise ParseError(source, "missing required field: title")

    if "date" not in meta or meta["date"] is None:
        raise ParseError(source, "missing required field: date")
    try:
        date = parse_date(meta["date"])
    except ValueError as exc:
        raise ParseError(source, str(exc)) from exc

    try:
        tags = parse_tags(meta.get("tags"))
    except ValueError as exc:
        raise ParseError(source, str(exc)) from exc

    author = _text_field(meta, "author", source) or site.author
    layout = _text_field(meta, "layout", source) or config.default_layout
    explicit_slug = _text_field(meta, "slug", source)
    slug = slugify(explicit_slug) if explicit_slug else slug_from_filename(path.stem)

    extra = {k: v for k, v in meta.items() if k not in _RECOGNIZED_KEYS}

    return Post(
        source_path=source,
        slug=slug,
        title=title,
        date=date,
        author=author,
        tags=tags,
        layout=layout,
        body=body,
        extra=extra,
    )


class ContentLoader:
    """Loads every recognised content file under a directory.

    Malformed files are reported in the result and skipped; they never
    abort the load.
    """

    def __init__(self, config: ContentConfig, site: SiteConfig | None = None) -> None:
        self.config = config
        self.site = site or SiteConfig()
        self._extensions = {ext.lower() for ext in config.extensions}

    def is_content_file(self, path: Path) -> bool:
        return path.suffix.lower() in self._extensions

    def load(self, root: str | Path) -> LoadResult:
        root = Path(root)
        if not root.is_dir():
            raise FileNotFoundError(f"Content directory not found: {root}")

        result = LoadResult()
        seen_slugs: dict[str, str] = {}

        for path in iter_source_files(root, self.config.exclude):
            if not self.is_content_file(path):
                continue
            rel = path.relative_to(root).as_posix()
            try:
                post = load_post(path, root, self.config, self.site)
                if is_draft(post.extra) and not self.config.include_drafts:
                    result.drafts += 1
                    logger.debug("skipping draft %s", rel)
                    continue
                if post.slug in seen_slugs:
                    raise ParseError(
                        rel, f"duplicate slug {post.slug!r} (already used by {seen_slugs[post.slug]})"
                    )
            except ParseError as exc:
                result.skipped.append(SkippedFile(path=exc.path, error=exc.reason))
                logger.warning("skipping %s: %s", exc.path, exc.reason)
                continue

            seen_slugs[post.slug] = rel
            result.posts.append(post)

        logger.info(
            "loaded %d post(s) from %s (%d skipped, %d draft(s))",
            len(result.posts), root, len(result.skipped), result.drafts,
        )
        return result
