"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import BlogsmithConfig

PROJECT_CONFIG = "blogsmith.yaml"
USER_CONFIG = Path(".blogsmith") / "config.yaml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def config_sources(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest priority first."""
    sources = [Path(PROJECT_CONFIG), Path.home() / USER_CONFIG]
    if cli_path:
        sources.insert(0, Path(cli_path))
    return sources


def _read_mapping(path: Path) -> dict | None:
    """Parse one YAML file. An empty file yields None."""
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping")
    return raw


def load_config(cli_path: str | None = None) -> BlogsmithConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    The first non-empty file wins; files are never merged.
    """
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_sources(cli_path):
        if not path.is_file():
            continue
        raw = _read_mapping(path)
        if raw is None:
            continue
        try:
            return BlogsmithConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return BlogsmithConfig()


def _expand_env_vars(obj: object) -> object:
    """Replace ${VAR} in every string of a parsed YAML tree; unset vars become ''."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return list(map(_expand_env_vars, obj))
    if isinstance(obj, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    return obj


# Default YAML template for `blogsmith config init`
DEFAULT_CONFIG_TEMPLATE = """\
# blogsmith.yaml

# Site metadata (available to templates as `site`)
site:
  title: "My Technical Blog"
  base_url: "/"                # prefix for every generated URL
  # author: "Jane Doe"         # used when a post has no author

# Content discovery
content:
  extensions: [".md", ".markdown"]
  exclude: []                  # glob patterns, relative to the source dir
  include_drafts: false        # build posts marked draft: true / published: false
  default_layout: "post"

# Markdown rendering
render:
  workers: 4                   # 1 renders in-line
  plugins: ["table", "strikethrough", "footnotes", "url"]
  excerpt_length: 280

# Output
output:
  # template_dir: "templates"  # defaults to the bundled templates
  posts_per_page: 10

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
