"""Content subsystem: loads Markdown posts with YAML front-matter."""

from blogsmith.content.frontmatter import parse_date, parse_tags, slugify, split_frontmatter
from blogsmith.content.loader import ContentLoader, iter_source_files, load_post
from blogsmith.content.models import LoadResult, ParseError, Post, SkippedFile

__all__ = [
    "ContentLoader",
    "LoadResult",
    "ParseError",
    "Post",
    "SkippedFile",
    "iter_source_files",
    "load_post",
    "parse_date",
    "parse_tags",
    "slugify",
    "split_frontmatter",
]
