"""blogsmith - static site builder for Markdown blogs with YAML front-matter."""

from blogsmith.build import build_site
from blogsmith.config import BlogsmithConfig, load_config
from blogsmith.content import ContentLoader, ParseError, Post
from blogsmith.index import IndexBuilder, SiteIndex
from blogsmith.render import PostRenderer, RenderedPost
from blogsmith.site import AssemblyError, BuildReport, SiteAssembler

__version__ = "0.1.0"

__all__ = [
    "AssemblyError",
    "BlogsmithConfig",
    "BuildReport",
    "ContentLoader",
    "IndexBuilder",
    "ParseError",
    "Post",
    "PostRenderer",
    "RenderedPost",
    "SiteAssembler",
    "SiteIndex",
    "build_site",
    "load_config",
]
