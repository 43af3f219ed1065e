"""notablog - a static blog generator backed by a Notion database.

Example:
    import asyncio
    from pathlib import Path

    from notablog import BuildPaths, NotionClient, SiteBuilder, load_config

    root = Path("my-blog")
    config = load_config(root)

    async def main():
        async with NotionClient.from_env() as client:
            builder = SiteBuilder(BuildPaths(root, config.theme), config, client)
            summary = await builder.build()
            print(f"{summary.counts.published} published")

    asyncio.run(main())
"""

from notablog.cache import CacheHit, CacheMiss, CacheStore
from notablog.config import Config, load_config
from notablog.models import PageMetadata, SiteMetadata
from notablog.notion import NotionClient
from notablog.paths import BuildPaths
from notablog.plugins import FunctionHook, Plugin, PluginRegistry
from notablog.site import BuildSummary, SiteBuilder

__all__ = [
    "BuildPaths",
    "BuildSummary",
    "CacheHit",
    "CacheMiss",
    "CacheStore",
    "Config",
    "FunctionHook",
    "NotionClient",
    "PageMetadata",
    "Plugin",
    "PluginRegistry",
    "SiteBuilder",
    "SiteMetadata",
    "load_config",
]
