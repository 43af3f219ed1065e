"""notablog error hierarchy.

All project exceptions inherit from NotablogError, enabling:
- ``except NotablogError`` at the CLI boundary
- Fine-grained catches deeper in the stack (``except NotionNotFoundError``)

Hierarchy:
    NotablogError
    ├── ConfigError
    │   └── ThemeNotFoundError
    ├── FetchError
    │   ├── NotionApiError
    │   └── NotionNotFoundError
    ├── TemplateNotFoundError
    └── IndexRenderError

Cache failures are not exceptions; see ``notablog.cache``.
"""

from __future__ import annotations


class NotablogError(Exception):
    """Base class for all notablog errors."""


class ConfigError(NotablogError):
    """config.json is missing, malformed, or names something that does not exist."""


class ThemeNotFoundError(ConfigError):
    """The configured theme has no directory under themes/."""


class FetchError(NotablogError):
    """Remote content could not be fetched."""


class NotionApiError(FetchError):
    def __init__(self, message: str, status: int, payload: dict | None = None):
        super().__init__(message)
        self.status = status
        self.payload = payload or {}


class NotionNotFoundError(NotionApiError):
    """The page or database does not exist or is not shared with the integration."""


class TemplateNotFoundError(NotablogError):
    """The theme has no layout with the requested name."""


class IndexRenderError(NotablogError):
    """The site index could not be rendered. Always fatal to the build."""


__all__ = [
    "NotablogError",
    "ConfigError",
    "ThemeNotFoundError",
    "FetchError",
    "NotionApiError",
    "NotionNotFoundError",
    "TemplateNotFoundError",
    "IndexRenderError",
]
