"""Plugin hooks run before a page is rendered.

A hook receives a context tagged with the page type and the options it was
registered with. Hooks act only through side effects; return values are
discarded. Entries without a callable ``invoke`` are dropped at registration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Literal, Mapping, Protocol, Union, runtime_checkable

from .lib.log import get_logger
from .models import PostMetadata, SiteMetadata

logger = get_logger(__name__)


@dataclass(frozen=True)
class IndexContext:
    site_meta: SiteMetadata
    page_type: Literal["index"] = "index"


@dataclass(frozen=True)
class PostContext:
    site_meta: SiteMetadata
    post: PostMetadata
    page_type: Literal["post"] = "post"


HookContext = Union[IndexContext, PostContext]


@runtime_checkable
class Hook(Protocol):
    def invoke(self, context: HookContext, options: Mapping[str, Any]) -> object:
        ...


@dataclass(frozen=True)
class FunctionHook:
    """Adapt a plain ``func(context, options)`` to the Hook protocol."""

    func: Callable[[HookContext, Mapping[str, Any]], object]

    def invoke(self, context: HookContext, options: Mapping[str, Any]) -> object:
        return self.func(context, options)


@dataclass(frozen=True)
class Plugin:
    name: str
    hook: Hook
    options: Mapping[str, Any] = field(default_factory=dict)


def _is_invocable(plugin: object) -> bool:
    hook = getattr(plugin, "hook", None)
    return callable(getattr(hook, "invoke", None))


class PluginRegistry:
    """Registered plugins, in invocation order."""

    def __init__(self, plugins: Iterable[Plugin] = ()) -> None:
        self._plugins: list[Plugin] = []
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: Plugin) -> bool:
        if not _is_invocable(plugin):
            logger.warning("Plugin is in wrong format, skipped", plugin=getattr(plugin, "name", repr(plugin)))
            return False
        self._plugins.append(plugin)
        return True

    def __iter__(self) -> Iterator[Plugin]:
        return iter(tuple(self._plugins))

    def __len__(self) -> int:
        return len(self._plugins)

    def run(self, context: HookContext) -> None:
        """Invoke every hook in registration order.

        A failing hook is logged and does not stop the ones after it.
        """
        for plugin in self._plugins:
            try:
                plugin.hook.invoke(context, plugin.options)
            except Exception as exc:
                logger.warning(
                    "Plugin hook failed",
                    plugin=plugin.name,
                    page_type=context.page_type,
                    error=str(exc),
                )


__all__ = [
    "FunctionHook",
    "Hook",
    "HookContext",
    "IndexContext",
    "Plugin",
    "PluginRegistry",
    "PostContext",
]
