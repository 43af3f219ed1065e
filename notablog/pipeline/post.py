"""Fetch-or-reuse, hook, render and write a single page."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import aiofiles

from ..cache import CacheHit
from ..lib.log import get_logger, log_context
from ..notion.html import render_page
from ..plugins import PostContext
from .tasks import RenderTask

logger = get_logger(__name__)


@dataclass(frozen=True)
class PostResult:
    page_id: str
    fetched: bool
    rendered: bool
    output: Optional[Path] = None
    cached: bool = True


async def _fetch_and_cache(task: RenderTask) -> tuple[Any, bool]:
    post = task.post
    logger.info("Fetch page")
    tree = await task.fetcher.fetch_page(post.id)
    write = await task.cache.aset(post.cache_uri, tree)
    if not write.ok:
        logger.warning("Page fetched but not cached", reason=write.reason and write.reason.value)
    return tree, write.ok


async def _acquire(task: RenderTask) -> tuple[Any, bool, bool]:
    """Return (tree, fetched, cached)."""
    post = task.post
    if task.operations.do_fetch_page:
        tree, cached = await _fetch_and_cache(task)
        return tree, True, cached

    logger.info("Read page cache")
    lookup = await task.cache.aget(post.cache_uri)
    if isinstance(lookup, CacheHit):
        return lookup.value, False, True

    # The entry was fresh when tasks were built but is now unusable
    logger.warning(
        "Cached page unusable, fetching instead",
        reason=lookup.reason.value,
        detail=lookup.detail,
    )
    tree, cached = await _fetch_and_cache(task)
    return tree, True, cached


async def _write_output(path: Path, html: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(html)


async def render_post(task: RenderTask) -> PostResult:
    with log_context(page_id=task.post.id):
        return await _render_post(task)


async def _render_post(task: RenderTask) -> PostResult:
    post = task.post
    tree, fetched, cached = await _acquire(task)

    if task.operations.enable_plugin_hooks:
        logger.debug("Run beforeRender plugins")
        task.plugins.run(PostContext(site_meta=task.site_meta, post=post))

    if not post.publish:
        logger.info("Skip rendering of unpublished page")
        return PostResult(post.id, fetched=fetched, rendered=False, cached=cached)

    logger.info("Render page")
    html = task.templates.render(
        post.template_name,
        site_meta=task.site_meta,
        post={**post.model_dump(), "content_html": render_page(tree)},
    )
    output = task.paths.output_path_for(post.output_path)
    await _write_output(output, html)
    return PostResult(post.id, fetched=fetched, rendered=True, output=output, cached=cached)


__all__ = ["PostResult", "render_post"]
