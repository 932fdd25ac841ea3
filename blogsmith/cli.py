"""CLI entry point for blogsmith."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from blogsmith.build import build_site
from blogsmith.config import BlogsmithConfig, load_config
from blogsmith.config.loader import DEFAULT_CONFIG_TEMPLATE
from blogsmith.content import ContentLoader
from blogsmith.content.models import SkippedFile
from blogsmith.site import AssemblyError

app = typer.Typer(
    name="blogsmith",
    help="Build a static blog from Markdown posts with YAML front-matter.",
)

config_app = typer.Typer(help="Manage blogsmith configuration.")
app.add_typer(config_app, name="config")

# Global state
_config_path: str | None = None
_config: BlogsmithConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _configure_logging(cfg: BlogsmithConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(_LOG_LEVELS[cfg.log_level])


def _get_config() -> BlogsmithConfig:
    """Load the config on first use and set up logging from it."""
    global _config
    if _config is None:
        try:
            _config = load_config(_config_path)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)
        _configure_logging(_config)
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to blogsmith.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config_path, _config
    _config_path = config
    _config = None


def _display_skipped(skipped: list[SkippedFile]) -> None:
    for s in skipped:
        rprint(f"  [yellow]skipped:[/yellow] {escape(s.path)}: {escape(s.error)}")


@app.command()
def build(
    source: str = typer.Argument(..., help="Directory containing Markdown posts"),
    dest: str = typer.Argument(..., help="Directory to write the site to"),
    drafts: Annotated[bool, typer.Option("--drafts", help="Include draft posts")] = False,
    workers: Annotated[
        int | None, typer.Option("--workers", "-w", min=1, help="Render worker threads")
    ] = None,
    templates: Annotated[
        str | None, typer.Option("--templates", "-t", help="Override template directory")
    ] = None,
) -> None:
    """Build the site from SOURCE into DEST."""
    cfg = _get_config()
    if drafts:
        cfg = cfg.model_copy(update={"content": cfg.content.model_copy(update={"include_drafts": True})})
    if workers is not None:
        cfg = cfg.model_copy(update={"render": cfg.render.model_copy(update={"workers": workers})})
    if templates:
        cfg = cfg.model_copy(update={"output": cfg.output.model_copy(update={"template_dir": templates})})

    rprint(f"[bold]Building[/bold] {source} -> {dest}...")

    try:
        report = build_site(source, dest, cfg)
    except AssemblyError as e:
        rprint(f"[red]Build failed:[/red] {escape(str(e))}")
        rprint("[dim]No output was published.[/dim]")
        raise typer.Exit(1)
    except FileNotFoundError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title="Build Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Posts", str(report.posts))
    table.add_row("Drafts", str(report.drafts))
    table.add_row("Skipped", str(len(report.skipped)))
    table.add_row("Pages", str(report.pages))
    table.add_row("Assets", str(report.assets))
    table.add_row("Duration", f"{report.duration:.2f}s")
    rprint(table)

    _display_skipped(report.skipped)
    rprint(f"[green]Site written to[/green] {report.output_dir}")


@app.command()
def check(
    source: str = typer.Argument(..., help="Directory containing Markdown posts"),
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: table or json")
    ] = "table",
) -> None:
    """Parse every post without building; exit 1 if any file is malformed."""
    cfg = _get_config()
    try:
        result = ContentLoader(cfg.content, cfg.site).load(source)
    except FileNotFoundError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if format == "json":
        typer.echo(json.dumps(result.model_dump(mode="json", exclude={"posts"}) | {
            "posts": [p.source_path for p in result.posts],
        }, indent=2))
    else:
        table = Table(title=f"Content Check ({len(result.posts) + len(result.skipped)} files)")
        table.add_column("Path", style="cyan")
        table.add_column("Status", justify="center")
        table.add_column("Detail")
        for p in sorted(result.posts, key=lambda p: p.source_path):
            table.add_row(escape(p.source_path), "[green]OK[/green]", escape(f"{p.date} {p.title}"))
        for s in result.skipped:
            table.add_row(escape(s.path), "[red]FAIL[/red]", escape(s.error))
        rprint(table)
        if result.drafts:
            rprint(f"[dim]{result.drafts} draft(s) ignored.[/dim]")

    if result.skipped:
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default blogsmith.yaml in current directory."""
    target = Path("blogsmith.yaml")
    if target.exists() and not force:
        rprint("[yellow]blogsmith.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
