"""IndexBuilder: feed ordering, tag and author indices for a set of posts."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from blogsmith.content.models import Post


class SiteIndex(BaseModel):
    """Derived navigation data, rebuilt from scratch on every run.

    Every list holds post identities (``Post.source_path``) in feed order.
    """

    feed: list[str] = Field(default_factory=list)
    tags: dict[str, list[str]] = Field(default_factory=dict)
    authors: dict[str, list[str]] = Field(default_factory=dict)


def _feed_key(post: Post) -> tuple[int, str]:
    # Newest first; equal dates fall back to path order
    return (-post.date.toordinal(), post.source_path)


def sort_feed(posts: Sequence[Post]) -> list[Post]:
    """Return posts in reverse-chronological order, tie-broken by identity."""
    return sorted(posts, key=_feed_key)


def paginate(items: Sequence[str], per_page: int) -> list[list[str]]:
    """Split a feed into pages. An empty feed still yields one empty page."""
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    pages = [list(items[i:i + per_page]) for i in range(0, len(items), per_page)]
    return pages or [[]]


class IndexBuilder:
    """Builds a SiteIndex. Pure: no I/O, no state kept between builds."""

    def build(self, posts: Sequence[Post]) -> SiteIndex:
        ids = [p.source_path for p in posts]
        if len(set(ids)) != len(ids):
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            raise ValueError(f"duplicate post identities: {', '.join(dupes)}")

        feed = sort_feed(posts)

        tags: dict[str, list[str]] = {}
        authors: dict[str, list[str]] = {}
        for post in feed:
            for tag in dict.fromkeys(post.tags):
                tags.setdefault(tag, []).append(post.source_path)
            if post.author:
                authors.setdefault(post.author, []).append(post.source_path)

        return SiteIndex(
            feed=[p.source_path for p in feed],
            tags={t: tags[t] for t in sorted(tags, key=lambda t: (t.lower(), t))},
            authors={a: authors[a] for a in sorted(authors, key=lambda a: (a.lower(), a))},
        )
