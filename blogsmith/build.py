"""Build pipeline: load -> render -> index -> assemble."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from blogsmith.config.models import BlogsmithConfig
from blogsmith.content.loader import ContentLoader, iter_source_files
from blogsmith.index.builder import IndexBuilder
from blogsmith.render.renderer import PostRenderer
from blogsmith.site.assembler import SiteAssembler
from blogsmith.site.models import AssemblyError, BuildReport

logger = logging.getLogger(__name__)


def _exclude_output(source: Path, dest: Path, exclude: list[str]) -> list[str]:
    """Add the output directory to the exclude list when it lives inside source."""
    try:
        rel = dest.resolve().relative_to(source.resolve()).as_posix()
    except ValueError:
        return exclude
    return [*exclude, rel, f"{rel}/*"]


def check_paths(source: Path, dest: Path) -> None:
    """Refuse a destination that would replace the source tree on publish."""
    src, out = source.resolve(), dest.resolve()
    if src == out or src.is_relative_to(out):
        raise AssemblyError(
            f"Output directory {dest} contains the source directory {source}",
            path=str(dest),
        )


def collect_assets(source: Path, loader: ContentLoader, exclude: list[str]) -> dict[str, Path]:
    """Every non-content file under source, keyed by its relative path."""
    return {
        path.relative_to(source).as_posix(): path
        for path in iter_source_files(source, exclude)
        if not loader.is_content_file(path)
    }


def build_site(source: str | Path, dest: str | Path, config: BlogsmithConfig) -> BuildReport:
    """Run the full pipeline and publish the site to ``dest``.

    Malformed posts are skipped and listed in the report. An AssemblyError
    propagates and leaves ``dest`` as it was.
    """
    start = time.monotonic()
    source, dest = Path(source), Path(dest)
    check_paths(source, dest)

    content_cfg = config.content.model_copy(
        update={"exclude": _exclude_output(source, dest, config.content.exclude)}
    )
    loader = ContentLoader(content_cfg, config.site)
    loaded = loader.load(source)

    rendered = PostRenderer(config.render, config.site).render_all(loaded.posts)
    index = IndexBuilder().build(loaded.posts)
    assets = collect_assets(source, loader, content_cfg.exclude)

    output = SiteAssembler(config).assemble(rendered, index, dest, assets=assets)

    report = BuildReport(
        posts=len(rendered),
        drafts=loaded.drafts,
        skipped=loaded.skipped,
        pages=len(output.pages),
        assets=len(output.assets),
        output_dir=str(dest),
        duration=time.monotonic() - start,
    )
    logger.info("built %d post(s) into %s in %.2fs", report.posts, dest, report.duration)
    return report
