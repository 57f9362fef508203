from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

from ..concurrency import parallel_limit
from ..config import Settings, get_settings
from ..errors import FetchFailed
from ..http_client import get_http_client
from .cache import ArticleCache

logger = logging.getLogger(__name__)

MAX_ARTICLE_CHARS = 8000

# Tried in order; the first region with any text wins.
CONTENT_REGIONS: tuple[str, ...] = ("article", "main", "body")
_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]
_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str, limit: int = MAX_ARTICLE_CHARS) -> str:
    return _WHITESPACE.sub(" ", text).strip()[:limit]


def extract_text(html: str | bytes) -> str:
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(_NON_CONTENT_TAGS):
        tag.decompose()

    for region in CONTENT_REGIONS:
        text = clean_text(" ".join(node.get_text(" ") for node in soup.find_all(region)))
        if text:
            return text
    return ""


@dataclass(slots=True)
class ArticleScraper:
    cache: ArticleCache
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def fetch_article_text(self, url: str) -> str:
        cached = await self.cache.get(url)
        if cached is not None:
            return cached.text

        client = self.client or await get_http_client()
        try:
            response = await client.get(
                url,
                headers={"User-Agent": self.settings.http_user_agent},
                timeout=self.settings.http_timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchFailed(url, str(exc) or type(exc).__name__) from exc
        if not response.is_success:
            raise FetchFailed(url, f"HTTP {response.status_code}")

        text = await asyncio.to_thread(extract_text, response.content)
        await self.cache.set(url, text)
        return text

    async def fetch_all(self, urls: Sequence[str]) -> list[tuple[str, str]]:
        async def fetch_article(url: str) -> tuple[str, str]:
            try:
                return url, await self.fetch_article_text(url)
            except FetchFailed as exc:
                logger.warning("Failed to scrape %s: %s", url, exc)
                return url, ""

        return await parallel_limit(urls, fetch_article, self.settings.article_concurrency)
