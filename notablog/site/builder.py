"""Static site builder for a Notion-backed blog.

Produces, under ``public/``:
- the theme's assets, copied verbatim
- index.html, rendered from the ``index`` layout on every build
- one page per published database row, rendered from its layout

Page trees are cached under ``source/`` and refetched only when Notion
reports an edit newer than the cached copy.
"""

from __future__ import annotations

import shutil
import time
from dataclasses import dataclass, field
from typing import Optional

from notablog.cache import CacheStore
from notablog.config import Config
from notablog.lib.log import get_logger
from notablog.notion.client import PageFetcher
from notablog.paths import BuildPaths
from notablog.pipeline import (
    BuildCounts,
    TaskOutcome,
    build_render_tasks,
    render_index,
    render_post,
    run_bounded,
)
from notablog.plugins import PluginRegistry
from notablog.templates import TemplateProvider

logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildSummary:
    counts: BuildCounts
    rendered: int
    failures: list[TaskOutcome] = field(default_factory=list)
    elapsed_s: float = 0.0

    @property
    def failed(self) -> int:
        return len(self.failures)


class SiteBuilder:
    """Run one build of the site rooted at ``paths.root``."""

    def __init__(
        self,
        paths: BuildPaths,
        config: Config,
        fetcher: PageFetcher,
        *,
        plugins: Optional[PluginRegistry] = None,
        enable_plugin_hooks: bool = True,
    ) -> None:
        self.paths = paths
        self.config = config
        self.fetcher = fetcher
        self.plugins = plugins if plugins is not None else PluginRegistry()
        self.enable_plugin_hooks = enable_plugin_hooks

    def copy_theme_assets(self) -> bool:
        if not self.paths.assets_dir.is_dir():
            logger.warning("Theme has no assets directory", theme=self.paths.theme)
            return False
        shutil.copytree(self.paths.assets_dir, self.paths.output_dir, dirs_exist_ok=True)
        return True

    async def build(self) -> BuildSummary:
        started = time.monotonic()
        self.paths.prepare()

        logger.info("Copy theme assets")
        self.copy_theme_assets()

        logger.info("Fetch site metadata", url=self.config.url)
        site_meta = await self.fetcher.fetch_site_metadata(self.config.url, self.config.theme)

        templates = TemplateProvider(self.paths.layout_dir)
        cache = CacheStore(self.paths.cache_dir)

        logger.info("Render index")
        render_index(
            site_meta,
            templates=templates,
            paths=self.paths,
            plugins=self.plugins,
            enable_plugin_hooks=self.enable_plugin_hooks,
        )

        tasks, counts = build_render_tasks(
            site_meta,
            cache=cache,
            templates=templates,
            fetcher=self.fetcher,
            paths=self.paths,
            plugins=self.plugins,
            enable_plugin_hooks=self.enable_plugin_hooks,
        )
        logger.info(f"{counts.updated} of {counts.total} posts have been updated")
        logger.info(f"{counts.published} of {counts.total} posts are published")

        logger.info("Fetch and render posts", workers=self.config.concurrency)
        batch = await run_bounded(
            tasks,
            render_post,
            max_workers=self.config.concurrency,
            key=lambda task: task.post.id,
            task_timeout=self.config.task_timeout,
        )

        rendered = sum(1 for outcome in batch.succeeded if outcome.value is not None and outcome.value.rendered)
        if batch.failed:
            logger.warning("Some posts failed to build", failed=len(batch.failed))

        summary = BuildSummary(
            counts=counts,
            rendered=rendered,
            failures=batch.failed,
            elapsed_s=time.monotonic() - started,
        )
        logger.info(
            f"Build complete in {summary.elapsed_s:.2f}s",
            rendered=rendered,
            failed=summary.failed,
        )
        return summary


__all__ = ["BuildSummary", "SiteBuilder"]
