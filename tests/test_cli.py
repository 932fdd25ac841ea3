"""Tests for the blogsmith CLI (build, check, config)."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from blogsmith.cli import app

from conftest import write_post

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep project/user config files out of CLI runs."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")


# ---------------------------------------------------------------------------
# blogsmith build
# ---------------------------------------------------------------------------


class TestBuildCommand:
    def test_success_exit_zero(self, content_dir, tmp_path):
        dest = tmp_path / "public"
        result = runner.invoke(app, ["build", str(content_dir), str(dest)])
        assert result.exit_code == 0, result.output
        assert "Build Summary" in result.output
        assert "_posts/broken.md" in result.output
        assert (dest / "index.html").is_file()

    def test_missing_template_exit_nonzero(self, content_dir, tmp_path):
        templates = tmp_path / "tpl"
        templates.mkdir()
        dest = tmp_path / "public"
        result = runner.invoke(
            app, ["build", str(content_dir), str(dest), "--templates", str(templates)]
        )
        assert result.exit_code == 1
        assert "Build failed" in result.output
        assert not dest.exists()

    def test_missing_template_keeps_previous_site(self, content_dir, tmp_path):
        dest = tmp_path / "public"
        assert runner.invoke(app, ["build", str(content_dir), str(dest)]).exit_code == 0
        before = sorted(p.relative_to(dest) for p in dest.rglob("*"))

        templates = tmp_path / "tpl"
        templates.mkdir()
        result = runner.invoke(
            app, ["build", str(content_dir), str(dest), "--templates", str(templates)]
        )
        assert result.exit_code == 1
        assert sorted(p.relative_to(dest) for p in dest.rglob("*")) == before

    def test_drafts_flag(self, tmp_path):
        src = tmp_path / "src"
        write_post(src, "draft.md", extra="draft: true")
        dest = tmp_path / "public"
        result = runner.invoke(app, ["build", str(src), str(dest), "--drafts"])
        assert result.exit_code == 0, result.output
        assert (dest / "posts" / "draft" / "index.html").is_file()

    def test_missing_source(self, tmp_path):
        result = runner.invoke(app, ["build", str(tmp_path / "nope"), str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_dest_containing_source_exit_nonzero(self, content_dir):
        result = runner.invoke(app, ["build", str(content_dir), str(content_dir.parent)])
        assert result.exit_code == 1
        assert "Build failed" in result.output
        assert (content_dir / "_posts" / "2021-03-04-first-post.md").is_file()

    def test_bad_config_file(self, content_dir, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("render:\n  workers: zero\n")
        result = runner.invoke(
            app, ["--config", str(bad), "build", str(content_dir), str(tmp_path / "out")]
        )
        assert result.exit_code == 1
        assert "Invalid config" in result.output


# ---------------------------------------------------------------------------
# blogsmith check
# ---------------------------------------------------------------------------


class TestCheckCommand:
    def test_reports_failures_and_exits_one(self, content_dir):
        result = runner.invoke(app, ["check", str(content_dir)])
        assert result.exit_code == 1
        assert "FAIL" in result.output
        assert "broken.md" in result.output

    def test_clean_tree_exits_zero(self, tmp_path):
        src = tmp_path / "src"
        write_post(src, "ok.md")
        result = runner.invoke(app, ["check", str(src)])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output

    def test_json_format(self, content_dir, tmp_path):
        quiet = tmp_path / "quiet.yaml"
        quiet.write_text("log_level: error\n")
        result = runner.invoke(
            app, ["--config", str(quiet), "check", str(content_dir), "--format", "json"]
        )
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["skipped"][0]["path"] == "_posts/broken.md"
        assert len(payload["posts"]) == 3


# ---------------------------------------------------------------------------
# blogsmith config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_init_creates_file(self, tmp_path):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (tmp_path / "cwd" / "blogsmith.yaml").is_file()

    def test_init_refuses_overwrite(self, tmp_path):
        (tmp_path / "cwd" / "blogsmith.yaml").write_text("site:\n  title: Mine\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert (tmp_path / "cwd" / "blogsmith.yaml").read_text() == "site:\n  title: Mine\n"

    def test_init_force(self, tmp_path):
        (tmp_path / "cwd" / "blogsmith.yaml").write_text("old")
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "posts_per_page" in (tmp_path / "cwd" / "blogsmith.yaml").read_text()

    def test_init_force_replaces_invalid_yaml(self, tmp_path):
        target = tmp_path / "cwd" / "blogsmith.yaml"
        target.write_text("site: [unclosed\n")
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0, result.output
        assert "posts_per_page" in target.read_text()

    def test_show_reports_invalid_config(self, tmp_path):
        (tmp_path / "cwd" / "blogsmith.yaml").write_text("site: [unclosed\n")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_show(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "posts_per_page" in result.output
