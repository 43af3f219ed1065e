"""Site and page metadata shared read-only by every build task."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PageMetadata(BaseModel):
    """One row of the Notion database backing the site."""

    model_config = ConfigDict(frozen=True)

    id: str
    last_modified_time: float = Field(description="Epoch milliseconds of the last remote edit")
    publish: bool = False
    output_path: str
    template_name: str = "post"
    title: str = ""
    tags: tuple[str, ...] = ()
    description: str = ""
    date: str | None = None
    created_time: float | None = None
    in_menu: bool = False
    in_list: bool = False


class PostMetadata(PageMetadata):
    """PageMetadata plus the cache URI the page is stored under."""

    cache_uri: str

    @classmethod
    def from_page(cls, page: PageMetadata, cache_uri: str) -> "PostMetadata":
        return cls(**page.model_dump(), cache_uri=cache_uri)


class SiteMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    theme: str
    title: str = ""
    description: str = ""
    icon: str | None = None
    cover: str | None = None
    pages: tuple[PageMetadata, ...] = ()

    @property
    def published_pages(self) -> tuple[PageMetadata, ...]:
        return tuple(page for page in self.pages if page.publish)


__all__ = ["PageMetadata", "PostMetadata", "SiteMetadata"]
