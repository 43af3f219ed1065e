"""Tests for the notablog CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from notablog.cli import click_app
from notablog.cli.click_app import cli
from tests.helpers import FakeFetcher, make_page, make_site


class _FakeClient(FakeFetcher):
    closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch) -> _FakeClient:
    client = _FakeClient(make_site([make_page("p1"), make_page("broken")]), failing={"broken"})
    monkeypatch.setattr(click_app.NotionClient, "from_env", lambda: client)
    return client


def _write_config(root: Path, theme: str = "default") -> None:
    (root / "config.json").write_text(
        json.dumps({"url": "https://www.notion.so/0123456789abcdef0123456789abcdef", "theme": theme}),
        encoding="utf-8",
    )


def test_build_succeeds_despite_item_failures(site_root: Path, fake_client: _FakeClient, monkeypatch):
    monkeypatch.delenv("NOTABLOG_CONCURRENCY", raising=False)
    _write_config(site_root)

    result = CliRunner().invoke(cli, ["--workdir", str(site_root), "build"])

    assert result.exit_code == 0, result.output
    assert "2 posts, 2 updated, 2 published, 1 rendered, 1 failed" in result.output
    assert (site_root / "public" / "index.html").exists()
    assert (site_root / "public" / "p1.html").exists()
    assert fake_client.closed


def test_missing_theme_exits_nonzero(site_root: Path, fake_client: _FakeClient):
    _write_config(site_root, theme="absent")

    result = CliRunner().invoke(cli, ["--workdir", str(site_root), "build"])

    assert result.exit_code == 1
    assert 'Cannot find "absent"' in result.output
    assert fake_client.page_calls == []


def test_missing_config_exits_nonzero(tmp_path: Path, fake_client: _FakeClient):
    result = CliRunner().invoke(cli, ["--workdir", str(tmp_path), "build"])
    assert result.exit_code == 1
    assert "Config not found" in result.output


def test_help_lists_build():
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "build" in result.output
