"""Index subsystem: feed ordering and tag/author indices."""

from blogsmith.index.builder import IndexBuilder, SiteIndex, paginate, sort_feed

__all__ = [
    "IndexBuilder",
    "SiteIndex",
    "paginate",
    "sort_feed",
]
