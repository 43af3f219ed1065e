"""Test utilities and builders for the notablog test suite.

Usage:
    from tests.helpers import FakeFetcher, make_page, write_theme
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable

from notablog.config import Config
from notablog.errors import FetchError
from notablog.models import PageMetadata, SiteMetadata

INDEX_LAYOUT = """<!DOCTYPE html>
<html><head><title>{{ site_meta.title }}</title></head>
<body>
<h1>{{ site_meta.title }}</h1>
<ul>
{% for page in site_meta.published_pages %}<li><a href="{{ page.output_path }}">{{ page.title }}</a></li>
{% endfor %}</ul>
</body></html>
"""

POST_LAYOUT = """<!DOCTYPE html>
<html><head><title>{{ post.title }} | {{ site_meta.title }}</title></head>
<body><article>{{ post.content_html }}</article></body></html>
"""


# =============================================================================
# SITE LAYOUT
# =============================================================================


def write_theme(root: Path, theme: str = "default", *, layouts: dict[str, str] | None = None) -> Path:
    theme_dir = root / "themes" / theme
    layout_dir = theme_dir / "layout"
    layout_dir.mkdir(parents=True, exist_ok=True)
    for name, source in (layouts or {"index": INDEX_LAYOUT, "post": POST_LAYOUT}).items():
        (layout_dir / f"{name}.html").write_text(source, encoding="utf-8")
    assets = theme_dir / "assets" / "css"
    assets.mkdir(parents=True, exist_ok=True)
    (assets / "theme.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    return theme_dir


def make_config(root: Path, theme: str = "default", **overrides: Any) -> Config:
    return Config(
        url=overrides.pop("url", "https://www.notion.so/blog-0123456789abcdef0123456789abcdef"),
        theme=theme,
        path=root / "config.json",
        **overrides,
    )


def set_mtime_ms(path: Path, ms: int) -> None:
    ns = ms * 1_000_000
    os.utime(path, ns=(ns, ns))


# =============================================================================
# METADATA BUILDERS
# =============================================================================


def paragraph(text: str) -> dict[str, Any]:
    return {
        "type": "paragraph",
        "paragraph": {"rich_text": [{"plain_text": text, "annotations": {}}]},
    }


def make_page(page_id: str = "page1", **overrides: Any) -> PageMetadata:
    data: dict[str, Any] = {
        "id": page_id,
        "last_modified_time": 1000,
        "publish": True,
        "output_path": f"{page_id}.html",
        "template_name": "post",
        "title": f"Title {page_id}",
    }
    data.update(overrides)
    return PageMetadata(**data)


def make_site(pages: Iterable[PageMetadata], *, theme: str = "default") -> SiteMetadata:
    return SiteMetadata(
        url="https://www.notion.so/blog-0123456789abcdef0123456789abcdef",
        theme=theme,
        title="Test Blog",
        pages=tuple(pages),
    )


# =============================================================================
# FETCHER DOUBLE
# =============================================================================


class FakeFetcher:
    """In-memory PageFetcher that records every page fetch."""

    def __init__(
        self,
        site_meta: SiteMetadata,
        *,
        trees: dict[str, Any] | None = None,
        failing: Iterable[str] = (),
    ) -> None:
        self.site_meta = site_meta
        self.trees = trees or {}
        self.failing = set(failing)
        self.page_calls: list[str] = []

    async def fetch_site_metadata(self, url: str, theme: str) -> SiteMetadata:
        return self.site_meta

    async def fetch_page(self, page_id: str) -> dict[str, Any]:
        self.page_calls.append(page_id)
        if page_id in self.failing:
            raise FetchError(f"cannot fetch {page_id}")
        return self.trees.get(page_id, {"id": page_id, "children": [paragraph(f"Hello from {page_id}")]})
