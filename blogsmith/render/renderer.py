"""PostRenderer: Markdown body -> HTML with verbatim code and resolved images."""

from __future__ import annotations

import html
import logging
import posixpath
import re
from concurrent.futures import ThreadPoolExecutor

import mistune

from blogsmith.config.models import RenderConfig, SiteConfig
from blogsmith.content.models import Post
from blogsmith.render.models import RenderedPost

logger = logging.getLogger(__name__)

# Jekyll/Liquid site-root placeholders commonly found in image paths
_SITE_PLACEHOLDER_RE = re.compile(r"^\{\{\s*site\.(?:baseurl|url)\s*\}\}")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_FIRST_PARAGRAPH_RE = re.compile(r"<p>(.*?)</p>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


def resolve_image_url(url: str, source_path: str, base_url: str = "/") -> str:
    """Resolve an image reference to a site-relative URL.

    Relative paths are resolved against the directory of ``source_path``
    (the post's path inside the content root). Absolute URLs are returned
    unchanged; a path that climbs out of the content root is left as is.
    """
    url = url.strip()
    if not url:
        return url

    placeholder = _SITE_PLACEHOLDER_RE.match(url)
    if placeholder:
        url = "/" + url[placeholder.end():].lstrip("/")

    if _SCHEME_RE.match(url) or url.startswith(("//", "#")):
        return url
    if url.startswith("/"):
        return base_url + url.lstrip("/")

    base_dir = posixpath.dirname(source_path)
    resolved = posixpath.normpath(posixpath.join(base_dir, url))
    if resolved == ".." or resolved.startswith("../"):
        logger.warning("image %r in %s points outside the content root", url, source_path)
        return url
    return base_url + resolved


class _PostHTMLRenderer(mistune.HTMLRenderer):
    """HTML renderer bound to a single post's location."""

    def __init__(self, source_path: str, base_url: str) -> None:
        # Raw HTML in posts is passed through untouched
        super().__init__(escape=False)
        self._source_path = source_path
        self._base_url = base_url

    def block_code(self, code: str, info: str | None = None) -> str:
        attrs = ""
        if info and info.strip():
            lang = info.strip().split(None, 1)[0]
            attrs = f' class="language-{html.escape(lang)}"'
        return f"<pre><code{attrs}>{html.escape(code, quote=False)}</code></pre>\n"

    def image(self, text: str, url: str, title: str | None = None) -> str:
        resolved = resolve_image_url(url, self._source_path, self._base_url)
        return super().image(text, resolved, title)


class PostRenderer:
    """Renders post bodies to HTML.

    A new parser is built for every body so concurrent renders share no
    state and the output depends only on the input.
    """

    def __init__(self, config: RenderConfig, site: SiteConfig | None = None) -> None:
        self.config = config
        self.site = site or SiteConfig()

    def _parser(self, source_path: str) -> mistune.Markdown:
        renderer = _PostHTMLRenderer(source_path, self.site.base_url)
        return mistune.create_markdown(renderer=renderer, plugins=list(self.config.plugins))

    def render_body(self, body: str, source_path: str = "") -> str:
        return self._parser(source_path)(body)

    def excerpt(self, rendered_html: str) -> str:
        """Plain text of the first paragraph, truncated on a word boundary."""
        match = _FIRST_PARAGRAPH_RE.search(rendered_html)
        if match is None:
            return ""
        text = html.unescape(_TAG_RE.sub("", match.group(1)))
        text = " ".join(text.split())
        limit = self.config.excerpt_length
        if limit == 0:
            return ""
        if len(text) <= limit:
            return text
        cut = text[:limit].rsplit(" ", 1)[0]
        return cut.rstrip(".,;:") + "…"

    def render(self, post: Post) -> RenderedPost:
        body_html = self.render_body(post.body, post.source_path)
        logger.debug("rendered %s (%d chars)", post.source_path, len(body_html))
        return RenderedPost(post=post, html=body_html, excerpt=self.excerpt(body_html))

    def render_all(self, posts: list[Post]) -> list[RenderedPost]:
        """Render every post, in input order."""
        workers = min(self.config.workers, len(posts))
        if workers <= 1:
            return [self.render(p) for p in posts]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="render") as pool:
            return list(pool.map(self.render, posts))
