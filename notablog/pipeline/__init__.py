"""Incremental build pipeline: decide, schedule, render."""

from .index import render_index
from .post import PostResult, render_post
from .scheduler import BatchResult, TaskOutcome, run_bounded
from .tasks import BuildCounts, PostOperations, RenderTask, build_render_tasks, cache_uri_for, needs_fetch

__all__ = [
    "BatchResult",
    "BuildCounts",
    "PostOperations",
    "PostResult",
    "RenderTask",
    "TaskOutcome",
    "build_render_tasks",
    "cache_uri_for",
    "needs_fetch",
    "render_index",
    "render_post",
    "run_bounded",
]
