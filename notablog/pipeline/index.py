"""Render the site index page."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..errors import IndexRenderError
from ..lib.log import get_logger
from ..models import SiteMetadata
from ..paths import BuildPaths
from ..plugins import IndexContext, PluginRegistry
from ..templates import TemplateProvider

logger = get_logger(__name__)

INDEX_TEMPLATE = "index"


def render_index(
    site_meta: SiteMetadata,
    *,
    templates: TemplateProvider,
    paths: BuildPaths,
    plugins: Optional[PluginRegistry] = None,
    enable_plugin_hooks: bool = True,
) -> Path:
    """Render ``index`` to public/index.html.

    The index is a required artifact: any failure is raised as
    IndexRenderError and ends the build.
    """
    if enable_plugin_hooks and plugins is not None:
        logger.debug("Run beforeRender plugins on index")
        plugins.run(IndexContext(site_meta=site_meta))

    try:
        html = templates.render(INDEX_TEMPLATE, site_meta=site_meta)
        paths.index_path.parent.mkdir(parents=True, exist_ok=True)
        paths.index_path.write_text(html, encoding="utf-8")
    except Exception as exc:
        raise IndexRenderError(f"Failed to render index: {exc}") from exc
    return paths.index_path


__all__ = ["INDEX_TEMPLATE", "render_index"]
