"""SiteAssembler: combines rendered posts and indices with Jinja2 templates."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)

from blogsmith.config.models import BlogsmithConfig
from blogsmith.content.frontmatter import slugify
from blogsmith.index.builder import SiteIndex, paginate
from blogsmith.render.models import RenderedPost
from blogsmith.site.models import AssemblyError, AssemblyResult
from blogsmith.site.writer import SiteWriter

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Templates needed regardless of which layouts the posts use
INDEX_TEMPLATES = ("index.html", "tag.html", "tags.html")


def _unique_slugs(names: list[str]) -> dict[str, str]:
    """Map each name to a slug, suffixing -2, -3... on collisions."""
    used: set[str] = set()
    slugs: dict[str, str] = {}
    for name in names:
        base = slugify(name)
        slug, n = base, 2
        while slug in used:
            slug = f"{base}-{n}"
            n += 1
        used.add(slug)
        slugs[name] = slug
    return slugs


class SiteAssembler:
    """Writes one document per post plus feed, tag, and tag-list pages.

    Every template the run needs is loaded up front; a missing one aborts
    before any output is written.
    """

    def __init__(self, config: BlogsmithConfig) -> None:
        self.config = config
        self.base_url = config.site.base_url
        if config.output.template_dir:
            self.template_dir = Path(config.output.template_dir)
        else:
            self.template_dir = DEFAULT_TEMPLATE_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )

    # -- URLs ----------------------------------------------------------------

    def post_path(self, slug: str) -> str:
        return f"posts/{slug}/index.html"

    def page_path(self, number: int) -> str:
        return "index.html" if number == 1 else f"page/{number}/index.html"

    def _url(self, output_path: str) -> str:
        return self.base_url + output_path.removesuffix("index.html")

    # -- templates -----------------------------------------------------------

    def required_templates(self, rendered: list[RenderedPost]) -> list[str]:
        layouts = sorted({f"{rp.post.layout}.html" for rp in rendered})
        return layouts + [t for t in INDEX_TEMPLATES if t not in layouts]

    def load_templates(self, names: list[str]) -> dict[str, Template]:
        if not self.template_dir.is_dir():
            raise AssemblyError(f"Template directory not found: {self.template_dir}")
        templates: dict[str, Template] = {}
        for name in names:
            try:
                templates[name] = self.env.get_template(name)
            except TemplateNotFound as exc:
                raise AssemblyError(
                    f"Template not found: {name} (in {self.template_dir})", template=name
                ) from exc
            except TemplateSyntaxError as exc:
                raise AssemblyError(
                    f"Template syntax error in {name}, line {exc.lineno}: {exc.message}",
                    template=name,
                ) from exc
        return templates

    def _render(self, template: Template, context: dict[str, Any]) -> str:
        try:
            return template.render(**context)
        except TemplateError as exc:
            raise AssemblyError(
                f"Failed to render template {template.name}: {exc}", template=template.name
            ) from exc

    # -- public API ----------------------------------------------------------

    def assemble(
        self,
        rendered: list[RenderedPost],
        index: SiteIndex,
        dest: str | Path,
        assets: dict[str, Path] | None = None,
    ) -> AssemblyResult:
        """Build the whole site and publish it to ``dest`` in one step.

        ``assets`` maps output-relative paths to static files to copy.
        Raises AssemblyError on any failure, leaving ``dest`` untouched.
        """
        templates = self.load_templates(self.required_templates(rendered))

        by_id = {rp.post.source_path: rp for rp in rendered}
        missing = [i for i in index.feed if i not in by_id]
        if missing:
            raise AssemblyError(f"Index refers to unrendered posts: {', '.join(missing)}")
        slugs = [by_id[i].post.slug for i in index.feed]
        if len(set(slugs)) != len(slugs):
            raise AssemblyError("Two posts share a slug; their pages would overwrite each other")

        tag_slugs = _unique_slugs(list(index.tags))
        tag_urls = {t: f"{self.base_url}tags/{s}/" for t, s in tag_slugs.items()}
        post_urls = {i: self._url(self.post_path(by_id[i].post.slug)) for i in index.feed}

        def summary(source_path: str) -> dict[str, Any]:
            rp = by_id[source_path]
            return {
                "title": rp.post.title,
                "date": rp.post.date,
                "author": rp.post.author,
                "tags": [{"name": t, "url": tag_urls[t]} for t in rp.post.tags],
                "url": post_urls[source_path],
                "excerpt": rp.excerpt,
                "slug": rp.post.slug,
                "source_path": source_path,
            }

        site = {
            **self.config.site.model_dump(),
            "tags": [
                {"name": t, "url": tag_urls[t], "count": len(ids)} for t, ids in index.tags.items()
            ],
            "tags_url": f"{self.base_url}tags/",
            "authors": [
                {"name": a, "count": len(ids), "posts": [summary(i) for i in ids]}
                for a, ids in index.authors.items()
            ],
        }
        result = AssemblyResult()

        with SiteWriter(dest) as writer:
            # Posts, with links to their neighbours in the feed
            for pos, source_path in enumerate(index.feed):
                rp = by_id[source_path]
                post_ctx = summary(source_path)
                post_ctx.update(content=rp.html, extra=rp.post.extra, layout=rp.post.layout)
                newer = summary(index.feed[pos - 1]) if pos > 0 else None
                older = summary(index.feed[pos + 1]) if pos + 1 < len(index.feed) else None
                out = self.post_path(rp.post.slug)
                writer.write(
                    out,
                    self._render(
                        templates[f"{rp.post.layout}.html"],
                        {"site": site, "post": post_ctx, "newer": newer, "older": older},
                    ),
                )
                result.pages.append(out)

            # Paginated feed
            pages = paginate(index.feed, self.config.output.posts_per_page)
            for number, ids in enumerate(pages, start=1):
                pagination = {
                    "page": number,
                    "total": len(pages),
                    "newer_url": self._url(self.page_path(number - 1)) if number > 1 else None,
                    "older_url": self._url(self.page_path(number + 1)) if number < len(pages) else None,
                }
                out = self.page_path(number)
                writer.write(
                    out,
                    self._render(
                        templates["index.html"],
                        {"site": site, "posts": [summary(i) for i in ids], "pagination": pagination},
                    ),
                )
                result.pages.append(out)

            # Tag pages
            for tag, ids in index.tags.items():
                out = f"tags/{tag_slugs[tag]}/index.html"
                writer.write(
                    out,
                    self._render(
                        templates["tag.html"],
                        {"site": site, "tag": {"name": tag, "url": tag_urls[tag]},
                         "posts": [summary(i) for i in ids]},
                    ),
                )
                result.pages.append(out)

            writer.write("tags/index.html", self._render(templates["tags.html"], {"site": site}))
            result.pages.append("tags/index.html")

            for rel, source in sorted((assets or {}).items()):
                if writer.exists(rel):
                    logger.warning("asset %s collides with a generated page; not copied", rel)
                    continue
                writer.copy(source, rel)
                result.assets.append(rel)

            writer.commit()

        logger.info(
            "assembled %d page(s) and %d asset(s) into %s",
            len(result.pages), len(result.assets), dest,
        )
        return result
