"""Tests for the staleness decision and task construction."""

from __future__ import annotations

import pytest

from notablog.cache import CacheStore
from notablog.models import PostMetadata
from notablog.paths import BuildPaths
from notablog.pipeline.tasks import build_render_tasks, cache_uri_for, needs_fetch
from notablog.plugins import PluginRegistry
from notablog.templates import TemplateProvider
from tests.helpers import FakeFetcher, make_page, make_site, set_mtime_ms

WRITE_MS = 1_700_000_000_000


def _post(page_id: str = "page1", modified: float = 1000) -> PostMetadata:
    page = make_page(page_id, last_modified_time=modified)
    return PostMetadata.from_page(page, cache_uri_for(page))


def test_cache_uri_is_derived_from_page_id():
    assert cache_uri_for(make_page("abc123")) == "notion://abc123"


def test_no_cache_entry_forces_fetch(cache: CacheStore):
    assert needs_fetch(_post(), cache) is True


@pytest.mark.parametrize(
    "modified,expected",
    [
        (WRITE_MS - 1, False),
        (WRITE_MS - 60_000, False),
        (WRITE_MS, True),  # equal timestamps count as stale
        (WRITE_MS + 1, True),
    ],
)
def test_staleness_decision(cache: CacheStore, modified: float, expected: bool):
    post = _post(modified=modified)
    write = cache.set(post.cache_uri, {"id": post.id})
    assert write.path is not None
    set_mtime_ms(write.path, WRITE_MS)

    assert needs_fetch(post, cache) is expected


def test_build_render_tasks_counts(cache: CacheStore, paths: BuildPaths, templates: TemplateProvider):
    fresh = make_page("fresh", last_modified_time=WRITE_MS - 10)
    stale = make_page("stale", last_modified_time=WRITE_MS + 10, publish=False)
    never_cached = make_page("new", last_modified_time=10)
    site = make_site([fresh, stale, never_cached])

    for page in (fresh, stale):
        write = cache.set(cache_uri_for(page), {"id": page.id})
        set_mtime_ms(write.path, WRITE_MS)

    registry = PluginRegistry()
    tasks, counts = build_render_tasks(
        site,
        cache=cache,
        templates=templates,
        fetcher=FakeFetcher(site),
        paths=paths,
        plugins=registry,
        enable_plugin_hooks=True,
    )

    assert [task.post.id for task in tasks] == ["fresh", "stale", "new"]
    assert [task.operations.do_fetch_page for task in tasks] == [False, True, True]
    assert all(task.operations.enable_plugin_hooks for task in tasks)
    assert all(task.plugins is registry and task.site_meta is site for task in tasks)
    assert tasks[0].post.cache_uri == "notion://fresh"
    assert (counts.total, counts.updated, counts.published) == (3, 2, 2)


def test_build_render_tasks_writes_nothing(cache: CacheStore, paths: BuildPaths, templates: TemplateProvider):
    site = make_site([make_page("a"), make_page("b")])
    build_render_tasks(site, cache=cache, templates=templates, fetcher=FakeFetcher(site), paths=paths)
    assert not (cache.cache_dir / "notion").exists()


def test_tasks_are_immutable(cache: CacheStore, paths: BuildPaths, templates: TemplateProvider):
    site = make_site([make_page("a")])
    tasks, _ = build_render_tasks(site, cache=cache, templates=templates, fetcher=FakeFetcher(site), paths=paths)
    with pytest.raises(AttributeError):
        tasks[0].operations.do_fetch_page = False  # type: ignore[misc]
