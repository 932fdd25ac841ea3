"""Pydantic models and errors for the content subsystem."""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ParseError(Exception):
    """Raised when a content file cannot be turned into a Post."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class Post(BaseModel):
    """A single blog post parsed from a content file.

    ``source_path`` is the identity: the file path relative to the content
    root, with POSIX separators.
    """

    model_config = ConfigDict(frozen=True)

    source_path: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    title: str = Field(min_length=1)
    date: dt.date
    author: str | None = None
    tags: list[str] = Field(default_factory=list)
    layout: str = "post"
    body: str = ""
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title cannot be empty or whitespace")
        return v


class SkippedFile(BaseModel):
    path: str
    error: str


class LoadResult(BaseModel):
    posts: list[Post] = []
    skipped: list[SkippedFile] = []
    drafts: int = 0
