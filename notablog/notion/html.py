"""Render a fetched Notion block tree to an HTML fragment."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from markupsafe import Markup, escape

_LIST_TAGS = {
    "bulleted_list_item": "ul",
    "numbered_list_item": "ol",
}

_HEADINGS = {
    "heading_1": "h1",
    "heading_2": "h2",
    "heading_3": "h3",
}


def render_rich_text(parts: Iterable[Mapping[str, Any]] | None) -> str:
    out: list[str] = []
    for part in parts or ():
        text = str(escape(part.get("plain_text", "")))
        annotations = part.get("annotations") or {}
        if annotations.get("code"):
            text = f"<code>{text}</code>"
        if annotations.get("bold"):
            text = f"<strong>{text}</strong>"
        if annotations.get("italic"):
            text = f"<em>{text}</em>"
        if annotations.get("strikethrough"):
            text = f"<del>{text}</del>"
        if annotations.get("underline"):
            text = f"<u>{text}</u>"
        href = part.get("href")
        if href:
            text = f'<a href="{escape(href)}">{text}</a>'
        out.append(text)
    return "".join(out)


def _media_url(data: Mapping[str, Any]) -> str:
    kind = data.get("type")
    return str((data.get(kind) or {}).get("url", "")) if kind else ""


def _render_block(block: Mapping[str, Any]) -> str:
    kind = block.get("type", "")
    data = block.get(kind) or {}
    text = render_rich_text(data.get("rich_text"))
    children = render_blocks(block.get("children") or ())

    if kind == "paragraph":
        return f"<p>{text}</p>{children}"
    if kind in _HEADINGS:
        tag = _HEADINGS[kind]
        return f"<{tag}>{text}</{tag}>{children}"
    if kind in _LIST_TAGS:
        return f"<li>{text}{children}</li>"
    if kind == "to_do":
        checked = " checked" if data.get("checked") else ""
        return f'<div class="to-do"><input type="checkbox" disabled{checked}> {text}</div>{children}'
    if kind == "quote":
        return f"<blockquote>{text}{children}</blockquote>"
    if kind == "callout":
        icon = escape((data.get("icon") or {}).get("emoji", ""))
        return f'<div class="callout"><span class="callout-icon">{icon}</span><div>{text}{children}</div></div>'
    if kind == "toggle":
        return f"<details><summary>{text}</summary>{children}</details>"
    if kind == "code":
        language = escape(data.get("language", ""))
        return f'<pre><code class="language-{language}">{text}</code></pre>'
    if kind == "divider":
        return "<hr>"
    if kind == "image":
        caption = render_rich_text(data.get("caption"))
        src = escape(_media_url(data))
        figcaption = f"<figcaption>{caption}</figcaption>" if caption else ""
        return f'<figure><img src="{src}" alt="">{figcaption}</figure>'
    if kind == "bookmark":
        url = escape(data.get("url", ""))
        return f'<p class="bookmark"><a href="{url}">{url}</a></p>'
    if kind == "child_page":
        return f'<p class="child-page">{escape(data.get("title", ""))}</p>'
    # Unknown block types still contribute their nested content
    return children


def render_blocks(blocks: Iterable[Mapping[str, Any]]) -> Markup:
    """Render sibling blocks, grouping consecutive list items into one list."""
    out: list[str] = []
    open_list: str | None = None
    for block in blocks:
        list_tag = _LIST_TAGS.get(block.get("type", ""))
        if list_tag != open_list:
            if open_list:
                out.append(f"</{open_list}>")
            if list_tag:
                out.append(f"<{list_tag}>")
            open_list = list_tag
        out.append(_render_block(block))
    if open_list:
        out.append(f"</{open_list}>")
    return Markup("".join(out))


def render_page(tree: Mapping[str, Any] | None) -> Markup:
    """Render a tree from ``NotionClient.fetch_page``; None renders empty."""
    if not tree:
        return Markup("")
    return render_blocks(tree.get("children") or ())


__all__ = ["render_blocks", "render_page", "render_rich_text"]
