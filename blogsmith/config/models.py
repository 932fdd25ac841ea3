from pydantic import BaseModel, Field, field_validator
from typing import Literal


class SiteConfig(BaseModel):
    title: str = "Blog"
    base_url: str = "/"
    author: str | None = None

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, v: str) -> str:
        # Always ends with exactly one slash so URLs can be joined by concatenation
        return v.rstrip("/") + "/"


class ContentConfig(BaseModel):
    extensions: list[str] = [".md", ".markdown"]
    exclude: list[str] = []
    include_drafts: bool = False
    default_layout: str = "post"


class RenderConfig(BaseModel):
    workers: int = Field(default=4, ge=1)
    plugins: list[str] = ["table", "strikethrough", "footnotes", "url"]
    excerpt_length: int = Field(default=280, ge=0)


class OutputConfig(BaseModel):
    template_dir: str | None = None
    posts_per_page: int = Field(default=10, ge=1)


class BlogsmithConfig(BaseModel):
    site: SiteConfig = Field(default_factory=SiteConfig)
    content: ContentConfig = Field(default_factory=ContentConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
