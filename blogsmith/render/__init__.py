"""Render subsystem: converts post bodies to HTML."""

from blogsmith.render.models import RenderedPost
from blogsmith.render.renderer import PostRenderer, resolve_image_url

__all__ = [
    "PostRenderer",
    "RenderedPost",
    "resolve_image_url",
]
