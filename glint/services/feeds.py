from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from dateutil import parser as date_parser

from ..concurrency import parallel_limit
from ..config import Settings, get_settings
from ..errors import InvalidSource
from ..http_client import get_http_client
from ..models.article import ArticleRef, FeedItem, FeedResult

logger = logging.getLogger(__name__)

_FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8"


@dataclass(slots=True)
class FeedService:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def fetch_feed_items(self, url: str, limit: int = 5) -> list[FeedItem]:
        client = self.client or await get_http_client()
        try:
            response = await client.get(url, headers={"Accept": _FEED_ACCEPT})
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise InvalidSource(url, str(exc)) from exc

        return await asyncio.to_thread(parse_feed, url, response.content, limit)

    async def fetch_all(
        self, urls: Sequence[str], limit: int | None = None
    ) -> list[FeedResult]:
        item_limit = limit if limit is not None else self.settings.feed_item_limit

        async def fetch_feed(url: str) -> FeedResult:
            try:
                items = await self.fetch_feed_items(url, item_limit)
            except InvalidSource as exc:
                logger.warning("Failed to fetch %s: %s", url, exc)
                return FeedResult(url=url, items=[])
            logger.info("Fetched %d items from %s", len(items), url)
            return FeedResult(url=url, items=items)

        return await parallel_limit(urls, fetch_feed, self.settings.feed_concurrency)


def collect_article_refs(results: Sequence[FeedResult]) -> list[ArticleRef]:
    refs: list[ArticleRef] = []
    for result in results:
        for item in result.items:
            if not item.title or not item.link:
                continue
            refs.append(ArticleRef(url=item.link, title=item.title, feed_url=result.url))
    return refs


def parse_feed(url: str, content: bytes, limit: int) -> list[FeedItem]:
    try:
        soup = BeautifulSoup(content, "xml")
    except ParserRejectedMarkup as exc:
        raise InvalidSource(url, str(exc)) from exc
    if soup.find(["rss", "feed", "RDF"]) is None:
        raise InvalidSource(url, "not an RSS or Atom document")

    entries = soup.find_all("item") or soup.find_all("entry")
    return [_parse_entry(entry) for entry in entries[:limit]]


def _parse_entry(entry: Any) -> FeedItem:
    title_tag = entry.find("title")
    title = title_tag.get_text(strip=True) if title_tag else None

    link = None
    link_tag = entry.find("link")
    if link_tag is not None:
        # Atom puts the URL in href; prefer the alternate link when several are present
        if link_tag.get("href"):
            alternate = entry.find("link", rel="alternate", href=True)
            link = (alternate or link_tag).get("href")
        else:
            link = link_tag.get_text(strip=True)
    if not link:
        guid_tag = entry.find("guid")
        if guid_tag is not None and guid_tag.get("isPermaLink") != "false":
            guid = guid_tag.get_text(strip=True)
            if guid.startswith("http"):
                link = guid

    published = _parse_datetime(_first_text(entry, "pubDate", "published", "updated", "dc:date"))
    content = _first_text(entry, "content:encoded", "content", "description", "summary")

    return FeedItem(
        title=title or None,
        link=link or None,
        published_at=published,
        content=content,
    )


def _first_text(entry: Any, *names: str) -> str | None:
    for name in names:
        for tag in entry.find_all(name):
            text = tag.get_text(strip=True)
            if text:
                return text
    return None


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
