"""Tests for plugin registration and hook invocation."""

from __future__ import annotations

import pytest

from notablog.models import PostMetadata
from notablog.plugins import FunctionHook, Hook, IndexContext, Plugin, PluginRegistry, PostContext
from tests.helpers import make_page, make_site


class CountingHook:
    def __init__(self, log: list, label: str) -> None:
        self.log = log
        self.label = label

    def invoke(self, context, options):
        self.log.append((self.label, context.page_type, dict(options)))
        return "ignored"


def test_hooks_run_in_registration_order():
    log: list = []
    registry = PluginRegistry(
        [
            Plugin("first", CountingHook(log, "first"), {"n": 1}),
            Plugin("second", CountingHook(log, "second")),
        ]
    )
    registry.run(IndexContext(site_meta=make_site([])))
    assert log == [("first", "index", {"n": 1}), ("second", "index", {})]


@pytest.mark.parametrize("bad_hook", [None, "not a hook", object(), 42])
def test_invalid_entries_are_filtered_at_registration(bad_hook):
    registry = PluginRegistry()
    assert registry.register(Plugin("bad", bad_hook)) is False  # type: ignore[arg-type]
    assert len(registry) == 0


def test_failing_hook_does_not_stop_later_hooks():
    log: list = []

    def explode(context, options):
        raise RuntimeError("plugin bug")

    registry = PluginRegistry([Plugin("explode", FunctionHook(explode)), Plugin("after", CountingHook(log, "after"))])
    registry.run(IndexContext(site_meta=make_site([])))
    assert log == [("after", "index", {})]


def test_post_context_carries_site_and_post():
    page = make_page("p1")
    site = make_site([page])
    post = PostMetadata.from_page(page, "notion://p1")
    received = []

    registry = PluginRegistry([Plugin("grab", FunctionHook(lambda context, options: received.append(context)))])
    registry.run(PostContext(site_meta=site, post=post))

    (context,) = received
    assert context.page_type == "post"
    assert context.site_meta is site and context.post.id == "p1"


def test_function_hook_satisfies_protocol():
    assert isinstance(FunctionHook(lambda c, o: None), Hook)
    assert isinstance(CountingHook([], "x"), Hook)
