import time

import orjson
import pytest

from glint.services.cache import ArticleCache

HOUR = 60 * 60


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_set_then_get_returns_fresh_entry(tmp_path) -> None:
    cache = ArticleCache(root=tmp_path / "cache")

    await cache.set("https://example.com/a", "Some article text")
    entry = await cache.get("https://example.com/a")

    assert entry is not None
    assert entry.text == "Some article text"
    assert time.time() - entry.timestamp < 6 * HOUR


@pytest.mark.asyncio
async def test_get_missing_entry_and_missing_directory(tmp_path) -> None:
    cache = ArticleCache(root=tmp_path / "does-not-exist")

    assert await cache.get("https://example.com/a") is None


@pytest.mark.asyncio
async def test_stale_entry_is_not_served_but_stays_on_disk(tmp_path) -> None:
    clock = FakeClock()
    cache = ArticleCache(root=tmp_path, clock=clock)
    url = "https://example.com/old"

    await cache.set(url, "old text")
    clock.now += 7 * HOUR

    assert await cache.get(url) is None
    assert cache.path_for(url).exists()


@pytest.mark.asyncio
async def test_corrupt_entry_is_a_miss(tmp_path) -> None:
    cache = ArticleCache(root=tmp_path)
    url = "https://example.com/corrupt"
    cache.path_for(url).write_text("{not json")

    assert await cache.get(url) is None

    cache.path_for(url).write_bytes(orjson.dumps({"text": "no timestamp"}))
    assert await cache.get(url) is None


@pytest.mark.asyncio
async def test_set_swallows_write_errors(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the cache directory should be")
    cache = ArticleCache(root=blocker / "cache")

    await cache.set("https://example.com/a", "text")

    assert await cache.get("https://example.com/a") is None


@pytest.mark.asyncio
async def test_cleanup_removes_only_entries_past_retention(tmp_path) -> None:
    clock = FakeClock()
    cache = ArticleCache(root=tmp_path, clock=clock)

    await cache.set("https://example.com/ancient", "ancient")
    clock.now += 20 * HOUR
    await cache.set("https://example.com/stale", "stale")
    clock.now += 5 * HOUR
    await cache.set("https://example.com/fresh", "fresh")
    (tmp_path / "garbage.json").write_text("nope")

    removed = await cache.cleanup()

    assert removed == 1
    assert not cache.path_for("https://example.com/ancient").exists()
    assert cache.path_for("https://example.com/stale").exists()
    assert cache.path_for("https://example.com/fresh").exists()
    assert (tmp_path / "garbage.json").exists()


@pytest.mark.asyncio
async def test_cleanup_is_idempotent(tmp_path) -> None:
    clock = FakeClock()
    cache = ArticleCache(root=tmp_path, clock=clock)
    await cache.set("https://example.com/a", "a")
    await cache.set("https://example.com/b", "b")
    clock.now += 25 * HOUR
    await cache.set("https://example.com/c", "c")

    assert await cache.cleanup() == 2
    remaining = sorted(path.name for path in tmp_path.iterdir())
    assert await cache.cleanup() == 0
    assert sorted(path.name for path in tmp_path.iterdir()) == remaining


@pytest.mark.asyncio
async def test_cleanup_without_directory_is_noop(tmp_path) -> None:
    cache = ArticleCache(root=tmp_path / "missing")

    assert await cache.cleanup() == 0
