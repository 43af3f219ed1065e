"""Directory layout of a notablog site."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ThemeNotFoundError

CACHE_DIR_NAME = "source"
OUTPUT_DIR_NAME = "public"
TAG_DIR_NAME = "tag"
THEMES_DIR_NAME = "themes"
LAYOUT_DIR_NAME = "layout"
ASSETS_DIR_NAME = "assets"
INDEX_FILE_NAME = "index.html"


@dataclass(frozen=True)
class BuildPaths:
    """Every directory a build reads or writes, resolved once from the site root."""

    root: Path
    theme: str

    @property
    def theme_dir(self) -> Path:
        return self.root / THEMES_DIR_NAME / self.theme

    @property
    def layout_dir(self) -> Path:
        return self.theme_dir / LAYOUT_DIR_NAME

    @property
    def assets_dir(self) -> Path:
        return self.theme_dir / ASSETS_DIR_NAME

    @property
    def cache_dir(self) -> Path:
        return self.root / CACHE_DIR_NAME

    @property
    def output_dir(self) -> Path:
        return self.root / OUTPUT_DIR_NAME

    @property
    def tag_dir(self) -> Path:
        return self.output_dir / TAG_DIR_NAME

    @property
    def index_path(self) -> Path:
        return self.output_dir / INDEX_FILE_NAME

    def output_path_for(self, relative: str) -> Path:
        """Resolve a page's configured output path inside public/."""
        target = (self.output_dir / relative.lstrip("/\\")).resolve(strict=False)
        if not is_within_root(target, self.output_dir):
            raise ValueError(f"Output path escapes {self.output_dir}: {relative!r}")
        return target

    def prepare(self) -> None:
        """Create output and cache roots; fail if the theme is missing."""
        if not self.theme_dir.is_dir():
            raise ThemeNotFoundError(f'Cannot find "{self.theme}" in {THEMES_DIR_NAME}/ folder')
        for directory in (self.cache_dir, self.output_dir, self.tag_dir):
            directory.mkdir(parents=True, exist_ok=True)


def is_within_root(path: Path, root: Path) -> bool:
    """Return True if path resolves within root."""
    try:
        path.resolve(strict=False).relative_to(root.resolve(strict=False))
    except ValueError:
        return False
    return True


__all__ = ["BuildPaths", "is_within_root"]
