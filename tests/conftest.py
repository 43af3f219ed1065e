from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from notablog.cache import CacheStore
from notablog.lib.log import configure_logging
from notablog.paths import BuildPaths
from notablog.templates import TemplateProvider
from tests.helpers import write_theme

configure_logging(verbose=True)


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A site root with a default theme and no cache or output yet."""
    write_theme(tmp_path)
    return tmp_path


@pytest.fixture
def paths(site_root: Path) -> BuildPaths:
    build_paths = BuildPaths(root=site_root, theme="default")
    build_paths.prepare()
    return build_paths


@pytest.fixture
def cache(tmp_path: Path) -> CacheStore:
    return CacheStore(tmp_path / "source")


@pytest.fixture
def templates(paths: BuildPaths) -> TemplateProvider:
    return TemplateProvider(paths.layout_dir)
