"""Theme layout lookup and Jinja2 rendering."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from .errors import TemplateNotFoundError
from .lib.log import get_logger

logger = get_logger(__name__)

TEMPLATE_SUFFIX = ".html"


@dataclass(frozen=True)
class TemplateSource:
    source: str
    filename: Path


class TemplateProvider:
    """Resolve layout names to ``<layout_dir>/<name>.html`` and render them.

    Rendered values are autoescaped; pass pre-rendered HTML as
    ``markupsafe.Markup`` to keep it verbatim.
    """

    def __init__(self, layout_dir: Path) -> None:
        self.layout_dir = Path(layout_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.layout_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def _filename(self, name: str) -> str:
        return name if name.endswith(TEMPLATE_SUFFIX) else f"{name}{TEMPLATE_SUFFIX}"

    def get(self, name: str) -> TemplateSource:
        path = self.layout_dir / self._filename(name)
        try:
            source = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise TemplateNotFoundError(f"Template '{name}' not found in {self.layout_dir}") from exc
        return TemplateSource(source=source, filename=path)

    def render(self, name: str, **context: Any) -> str:
        try:
            template = self.env.get_template(self._filename(name))
        except TemplateNotFound as exc:
            raise TemplateNotFoundError(f"Template '{name}' not found in {self.layout_dir}") from exc
        logger.debug("Render template", template=name)
        return template.render(**context)


__all__ = ["TemplateProvider", "TemplateSource"]
