"""Turn a Notion database and its rows into SiteMetadata."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..lib.log import get_logger
from ..models import PageMetadata, SiteMetadata

logger = get_logger(__name__)

DEFAULT_TEMPLATE = "post"


def parse_iso_ms(raw: Optional[str]) -> Optional[float]:
    """Convert a Notion ISO-8601 timestamp to epoch milliseconds."""
    if not raw:
        return None
    try:
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        return datetime.fromisoformat(raw).timestamp() * 1000
    except ValueError:
        return None


def plain_text(rich_text: Iterable[Mapping[str, Any]] | None) -> str:
    return "".join(str(part.get("plain_text", "")) for part in rich_text or ())


def _file_url(obj: Mapping[str, Any] | None) -> Optional[str]:
    if not obj:
        return None
    kind = obj.get("type")
    if kind == "emoji":
        return obj.get("emoji")
    if kind in {"external", "file"}:
        return (obj.get(kind) or {}).get("url")
    return None


def _properties(row: Mapping[str, Any]) -> dict[str, Mapping[str, Any]]:
    # Column names are matched case-insensitively
    return {name.lower(): prop for name, prop in (row.get("properties") or {}).items()}


def _prop_value(prop: Mapping[str, Any] | None) -> Any:
    if not prop:
        return None
    kind = prop.get("type")
    value = prop.get(kind) if kind else None
    if kind in {"title", "rich_text"}:
        return plain_text(value)
    if kind == "checkbox":
        return bool(value)
    if kind == "select":
        return (value or {}).get("name")
    if kind == "multi_select":
        return tuple(option.get("name", "") for option in value or ())
    if kind == "date":
        return (value or {}).get("start")
    if kind == "url":
        return value
    return None


def _title_of(props: Mapping[str, Mapping[str, Any]]) -> str:
    for prop in props.values():
        if prop.get("type") == "title":
            return plain_text(prop.get("title"))
    return ""


def parse_page(row: Mapping[str, Any]) -> Optional[PageMetadata]:
    page_id = row.get("id")
    last_edited = parse_iso_ms(row.get("last_edited_time"))
    if not page_id or last_edited is None:
        logger.warning("Skipping database row without id or edit time", row_id=page_id)
        return None

    props = _properties(row)
    page_id = str(page_id).replace("-", "")
    output_path = _prop_value(props.get("url")) or f"{page_id}.html"
    return PageMetadata(
        id=page_id,
        last_modified_time=last_edited,
        publish=bool(_prop_value(props.get("publish"))),
        output_path=output_path,
        template_name=_prop_value(props.get("template")) or DEFAULT_TEMPLATE,
        title=_title_of(props),
        tags=_prop_value(props.get("tags")) or (),
        description=_prop_value(props.get("description")) or "",
        date=_prop_value(props.get("date")),
        created_time=parse_iso_ms(row.get("created_time")),
        in_menu=bool(_prop_value(props.get("inmenu"))),
        in_list=bool(_prop_value(props.get("inlist"))),
    )


def parse_site_metadata(
    url: str,
    theme: str,
    database: Mapping[str, Any],
    rows: Iterable[Mapping[str, Any]],
) -> SiteMetadata:
    pages = tuple(page for page in (parse_page(row) for row in rows) if page is not None)
    return SiteMetadata(
        url=url,
        theme=theme,
        title=plain_text(database.get("title")),
        description=plain_text(database.get("description")),
        icon=_file_url(database.get("icon")),
        cover=_file_url(database.get("cover")),
        pages=pages,
    )


__all__ = ["parse_iso_ms", "parse_page", "parse_site_metadata", "plain_text"]
