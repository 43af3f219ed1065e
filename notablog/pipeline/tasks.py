"""Per-page render tasks and the fetch-or-reuse decision."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..cache import NOTION_NAMESPACE, CacheStore
from ..models import PageMetadata, PostMetadata, SiteMetadata
from ..notion.client import PageFetcher
from ..paths import BuildPaths
from ..plugins import PluginRegistry
from ..templates import TemplateProvider


@dataclass(frozen=True)
class PostOperations:
    do_fetch_page: bool
    enable_plugin_hooks: bool = False


@dataclass(frozen=True)
class RenderTask:
    """Everything one page needs to render. Built once, only read afterwards."""

    site_meta: SiteMetadata
    post: PostMetadata
    operations: PostOperations
    templates: TemplateProvider
    cache: CacheStore
    fetcher: PageFetcher
    paths: BuildPaths
    plugins: PluginRegistry = field(default_factory=PluginRegistry)


@dataclass(frozen=True)
class BuildCounts:
    total: int = 0
    updated: int = 0
    published: int = 0


def cache_uri_for(page: PageMetadata) -> str:
    return f"{NOTION_NAMESPACE}://{page.id}"


def needs_fetch(post: PostMetadata, cache: CacheStore) -> bool:
    """A page is refetched unless its cache entry was written strictly after its last edit."""
    return not cache.is_fresher_than(post.cache_uri, post.last_modified_time)


def build_render_tasks(
    site_meta: SiteMetadata,
    *,
    cache: CacheStore,
    templates: TemplateProvider,
    fetcher: PageFetcher,
    paths: BuildPaths,
    plugins: Optional[PluginRegistry] = None,
    enable_plugin_hooks: bool = False,
) -> tuple[list[RenderTask], BuildCounts]:
    registry = plugins if plugins is not None else PluginRegistry()
    tasks: list[RenderTask] = []
    updated = 0
    for page in site_meta.pages:
        post = PostMetadata.from_page(page, cache_uri_for(page))
        do_fetch = needs_fetch(post, cache)
        updated += do_fetch
        tasks.append(
            RenderTask(
                site_meta=site_meta,
                post=post,
                operations=PostOperations(do_fetch_page=do_fetch, enable_plugin_hooks=enable_plugin_hooks),
                templates=templates,
                cache=cache,
                fetcher=fetcher,
                paths=paths,
                plugins=registry,
            )
        )
    counts = BuildCounts(
        total=len(tasks),
        updated=updated,
        published=sum(1 for page in site_meta.pages if page.publish),
    )
    return tasks, counts


__all__ = [
    "BuildCounts",
    "PostOperations",
    "RenderTask",
    "build_render_tasks",
    "cache_uri_for",
    "needs_fetch",
]
