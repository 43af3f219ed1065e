"""Notion as the remote content source."""

from .client import NotionClient, PageFetcher, extract_database_id
from .html import render_blocks, render_page
from .table import parse_site_metadata

__all__ = [
    "NotionClient",
    "PageFetcher",
    "extract_database_id",
    "parse_site_metadata",
    "render_blocks",
    "render_page",
]
