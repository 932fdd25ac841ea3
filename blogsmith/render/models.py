"""Pydantic models for the render subsystem."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from blogsmith.content.models import Post


class RenderedPost(BaseModel):
    """A post together with its display-ready HTML body."""

    model_config = ConfigDict(frozen=True)

    post: Post
    html: str
    excerpt: str = ""
