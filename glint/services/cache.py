from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import orjson
from pydantic import ValidationError

from ..errors import CacheError
from ..models.article import CacheEntry

logger = logging.getLogger(__name__)

FRESHNESS_WINDOW = 6 * 60 * 60
RETENTION_WINDOW = 24 * 60 * 60


@dataclass(slots=True)
class ArticleCache:
    """File-per-URL store of scraped article text.

    Entries younger than ``freshness`` seconds are served by :meth:`get`.
    Entries older than ``retention`` seconds are deleted by :meth:`cleanup`.
    Anything in between stays on disk but reads as a miss. No public method
    raises: read and write problems behave like an empty cache.
    """

    root: Path
    freshness: float = FRESHNESS_WINDOW
    retention: float = RETENTION_WINDOW
    clock: Callable[[], float] = field(default=time.time)

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser()

    def path_for(self, url: str) -> Path:
        return self.root / f"{_hash(url)}.json"

    async def get(self, url: str) -> CacheEntry | None:
        try:
            entry = await asyncio.to_thread(self._read, self.path_for(url))
        except CacheError as exc:
            logger.debug("Cache miss for %s: %s", url, exc)
            return None
        if self.clock() - entry.timestamp < self.freshness:
            return entry
        return None

    async def set(self, url: str, text: str) -> None:
        entry = CacheEntry(text=text, timestamp=self.clock())
        try:
            await asyncio.to_thread(self._write, self.path_for(url), entry)
        except CacheError as exc:
            logger.debug("Could not cache %s: %s", url, exc)

    async def cleanup(self) -> int:
        try:
            return await asyncio.to_thread(self._cleanup)
        except CacheError as exc:
            logger.debug("Cache cleanup skipped: %s", exc)
            return 0

    def _read(self, path: Path) -> CacheEntry:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise CacheError(str(exc)) from exc
        try:
            return CacheEntry.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as exc:
            raise CacheError(f"corrupt entry {path.name}") from exc

    def _write(self, path: Path, entry: CacheEntry) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(orjson.dumps(entry.model_dump()))
        except OSError as exc:
            raise CacheError(str(exc)) from exc

    def _cleanup(self) -> int:
        try:
            paths = sorted(self.root.glob("*.json"))
        except OSError as exc:
            raise CacheError(str(exc)) from exc

        now = self.clock()
        removed = 0
        for path in paths:
            try:
                entry = self._read(path)
            except CacheError:
                continue
            if now - entry.timestamp > self.retention:
                try:
                    path.unlink()
                except OSError:
                    continue
                removed += 1
        return removed


def _hash(url: str) -> str:
    return hashlib.md5(url.encode("utf-8")).hexdigest()
