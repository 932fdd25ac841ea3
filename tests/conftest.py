"""Shared test fixtures for blogsmith."""

import datetime as dt
from pathlib import Path

import pytest

from blogsmith.config.models import BlogsmithConfig
from blogsmith.content.models import Post


def write_post(
    root: Path,
    rel: str,
    *,
    title: str | None = "Hello",
    date: str | None = "2021-03-04",
    author: str | None = None,
    tags: str | None = None,
    extra: str = "",
    body: str = "Some text.\n",
) -> Path:
    """Write a Markdown file with front-matter under root."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if author is not None:
        lines.append(f"author: {author}")
    if tags is not None:
        lines.append(f"tags: {tags}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n\n" + body, encoding="utf-8")
    return path


def make_post(source_path: str, date: str = "2021-01-01", tags=None, **kwargs) -> Post:
    return Post(
        source_path=source_path,
        slug=kwargs.pop("slug", Path(source_path).stem),
        title=kwargs.pop("title", Path(source_path).stem.title()),
        date=dt.date.fromisoformat(date),
        tags=tags or [],
        **kwargs,
    )


@pytest.fixture
def sample_config():
    return BlogsmithConfig()


@pytest.fixture
def content_dir(tmp_path):
    """A small content tree: three posts, one image, one malformed file."""
    root = tmp_path / "content"
    write_post(
        root, "_posts/2021-03-04-first-post.md",
        title="First Post", date="2021-03-04", author="Ada", tags="[python, testing]",
        body="Intro paragraph.\n\n![diagram](../images/diagram.png)\n",
    )
    write_post(
        root, "_posts/2021-05-01-second-post.md",
        title="Second Post", date="2021-05-01", author="Grace", tags="[python]",
        body="```python\nprint('<hi>')\n```\n",
    )
    write_post(
        root, "_posts/2021-05-01-another-post.md",
        title="Another Post", date="2021-05-01", tags="[rust]",
    )
    write_post(root, "_posts/broken.md", title=None)
    (root / "images").mkdir()
    (root / "images" / "diagram.png").write_bytes(b"\x89PNG fake")
    return root
