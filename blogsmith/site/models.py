"""Models and errors for site assembly."""

from __future__ import annotations

from pydantic import BaseModel, Field

from blogsmith.content.models import SkippedFile


class AssemblyError(Exception):
    """Fatal failure while assembling the site; nothing is published."""

    def __init__(
        self, message: str, *, template: str | None = None, path: str | None = None
    ) -> None:
        self.template = template
        self.path = path
        super().__init__(message)


class AssemblyResult(BaseModel):
    """Paths written by the assembler, relative to the output directory."""

    pages: list[str] = Field(default_factory=list)
    assets: list[str] = Field(default_factory=list)


class BuildReport(BaseModel):
    posts: int = 0
    drafts: int = 0
    skipped: list[SkippedFile] = []
    pages: int = 0
    assets: int = 0
    output_dir: str = ""
    duration: float = 0.0
