"""URI-addressed on-disk cache for fetched page trees.

A cache URI has the form ``<protocol>://<key>``. Each recognized protocol is a
namespace directory under the cache root; the key, with every ``/`` and ``\\``
removed, is the file name. The file's mtime is the entry's stored-at time.

Nothing in this module raises on cache trouble. Lookups return a
:class:`CacheHit` or a :class:`CacheMiss` carrying the cause, writes return a
:class:`CacheWrite`.
"""

from __future__ import annotations

import asyncio
import os
import re
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from .lib import json as jsonlib
from .lib.log import get_logger

logger = get_logger(__name__)

NOTION_NAMESPACE = "notion"
CACHE_NAMESPACES = frozenset({NOTION_NAMESPACE})

# Greedy protocol: "notion://a://b" has protocol "notion://a", which is unknown
_URI_RE = re.compile(r"^(.+)://(.+)$", re.DOTALL)
_SEPARATORS_RE = re.compile(r"[/\\]")


class MissReason(str, Enum):
    UNRESOLVED = "unresolved"
    ABSENT = "absent"
    IO_ERROR = "io_error"
    CORRUPT = "corrupt"


class WriteFailure(str, Enum):
    UNRESOLVED = "unresolved"
    ENCODE_ERROR = "encode_error"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class CacheHit:
    value: Any
    path: Path


@dataclass(frozen=True)
class CacheMiss:
    reason: MissReason
    detail: str = ""


CacheLookup = Union[CacheHit, CacheMiss]


@dataclass(frozen=True)
class CacheWrite:
    ok: bool
    path: Optional[Path] = None
    reason: Optional[WriteFailure] = None
    detail: str = ""

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class CacheUri:
    protocol: str
    key: str


def parse_cache_uri(uri: str) -> Optional[CacheUri]:
    """Split ``<protocol>://<key>``; None when either part is empty."""
    match = _URI_RE.match(uri or "")
    if match is None:
        return None
    protocol, key = match.group(1), match.group(2)
    if not protocol or not key:
        return None
    return CacheUri(protocol=protocol, key=key)


def sanitize_key(key: str) -> str:
    return _SEPARATORS_RE.sub("", key)


def resolve_cache_path(cache_dir: Path, uri: str) -> Optional[Path]:
    """Map a cache URI to its file under ``cache_dir``.

    Returns None for malformed URIs, unknown protocols, and keys that are
    empty once separators are stripped.
    """
    parsed = parse_cache_uri(uri)
    if parsed is None or parsed.protocol not in CACHE_NAMESPACES:
        return None
    filename = sanitize_key(parsed.key)
    if not filename or filename in {".", ".."}:
        return None
    return cache_dir / parsed.protocol / filename


class CacheStore:
    """Persist JSON-serializable blobs keyed by cache URI."""

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)

    def path_for(self, uri: str) -> Optional[Path]:
        return resolve_cache_path(self.cache_dir, uri)

    def get(self, uri: str) -> CacheLookup:
        logger.debug("Get cache", uri=uri)
        path = self.path_for(uri)
        if path is None:
            logger.debug("Unsupported cache uri", uri=uri)
            return CacheMiss(MissReason.UNRESOLVED, uri)

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Cache entry missing", path=str(path))
            return CacheMiss(MissReason.ABSENT, str(path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read cache", path=str(path), error=str(exc))
            return CacheMiss(MissReason.IO_ERROR, str(exc))

        try:
            value = jsonlib.loads(content)
        except jsonlib.JSONDecodeError as exc:
            logger.error("Failed to parse cache JSON", path=str(path), error=str(exc))
            return CacheMiss(MissReason.CORRUPT, str(exc))

        return CacheHit(value=value, path=path)

    def set(self, uri: str, value: Any) -> CacheWrite:
        logger.debug("Set cache", uri=uri)
        path = self.path_for(uri)
        if path is None:
            logger.debug("Unsupported cache uri", uri=uri)
            return CacheWrite(ok=False, reason=WriteFailure.UNRESOLVED, detail=uri)

        try:
            payload = jsonlib.dumps(value)
        except TypeError as exc:
            logger.error("Failed to encode cache entry", uri=uri, error=str(exc))
            return CacheWrite(ok=False, path=path, reason=WriteFailure.ENCODE_ERROR, detail=str(exc))

        try:
            # exist_ok: several workers may create the namespace at once
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write cache", path=str(path), error=str(exc))
            return CacheWrite(ok=False, path=path, reason=WriteFailure.IO_ERROR, detail=str(exc))

        return CacheWrite(ok=True, path=path)

    def stored_time(self, uri: str) -> Optional[float]:
        """Entry mtime in epoch milliseconds, or None if there is no readable entry."""
        path = self.path_for(uri)
        if path is None:
            return None
        try:
            info = path.stat()
        except OSError:
            return None
        # Must agree with get(): an entry get() cannot read is not fresh
        if not stat.S_ISREG(info.st_mode) or not os.access(path, os.R_OK):
            return None
        return info.st_mtime_ns / 1_000_000

    def is_fresher_than(self, uri: str, timestamp: float) -> bool:
        """True iff an entry exists and was written strictly after ``timestamp`` (ms)."""
        stored = self.stored_time(uri)
        if stored is None:
            return False
        return stored > timestamp

    async def aget(self, uri: str) -> CacheLookup:
        return await asyncio.to_thread(self.get, uri)

    async def aset(self, uri: str, value: Any) -> CacheWrite:
        return await asyncio.to_thread(self.set, uri, value)


__all__ = [
    "CACHE_NAMESPACES",
    "NOTION_NAMESPACE",
    "CacheHit",
    "CacheLookup",
    "CacheMiss",
    "CacheStore",
    "CacheUri",
    "CacheWrite",
    "MissReason",
    "WriteFailure",
    "parse_cache_uri",
    "resolve_cache_path",
    "sanitize_key",
]
