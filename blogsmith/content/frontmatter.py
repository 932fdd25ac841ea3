"""Front-matter splitting and field coercion for content files."""

from __future__ import annotations

import datetime as dt
import re
from typing import Any

import yaml

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<fm>.*?)^(?:---|\.\.\.)[ \t]*\r?$\n?",
    re.DOTALL | re.MULTILINE,
)

# Jekyll-style post filenames: 2021-03-04-some-title.md
_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%b %d, %Y",
    "%B %d, %Y",
)


def split_frontmatter(content: str) -> tuple[dict[str, Any] | None, str]:
    """Split a content file into its YAML front-matter mapping and body.

    Returns (None, content) when there is no ``---`` delimited block.
    Raises yaml.YAMLError on invalid YAML and ValueError when the block is
    not a mapping.
    """
    content = content.lstrip("\ufeff")
    match = _FRONTMATTER_RE.match(content)
    if match is None:
        return None, content

    data = yaml.safe_load(match.group("fm"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"front-matter is not a mapping, got {type(data).__name__}")
    body = content[match.end():].lstrip("\r\n")
    return data, body


def parse_date(value: Any) -> dt.date:
    """Coerce a front-matter date value to a calendar date."""
    # datetime is a subclass of date, check it first
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"invalid date: {value!r}")

    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"invalid date: {value!r}")


def parse_tags(value: Any) -> list[str]:
    """Normalize front-matter tags to an ordered list of unique labels.

    Accepts a list of labels or a single string split on commas and
    whitespace.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw = re.split(r"[,\s]+", value)
    elif isinstance(value, list):
        raw = []
        for item in value:
            # bool is an int subclass; `tags: [yes]` is almost certainly a mistake
            if isinstance(item, bool) or not isinstance(item, (str, int)):
                raise ValueError(f"tags must be strings, got {type(item).__name__}")
            raw.append(str(item))
    else:
        raise ValueError(f"tags must be a string or a list, got {type(value).__name__}")

    tags: list[str] = []
    for tag in raw:
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def slugify(text: str) -> str:
    """Make a URL-safe slug: lowercase, dash-separated word characters."""
    slug = text.strip().lower().replace("_", "-")
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s-]+", "-", slug).strip("-")
    return slug or "_unnamed"


def slug_from_filename(stem: str) -> str:
    """Derive a slug from a file stem, dropping a Jekyll date prefix."""
    return slugify(_DATE_PREFIX_RE.sub("", stem))
