from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    title: str | None = Field(default=None, description="Item headline")
    link: str | None = Field(default=None, description="Link to the full article")
    published_at: datetime | None = Field(
        default=None, description="Publication timestamp in UTC if available"
    )
    content: str | None = Field(default=None, description="Inline content or teaser")


class FeedResult(BaseModel):
    url: str = Field(description="Feed URL as configured")
    items: list[FeedItem] = Field(default_factory=list)


class ArticleRef(BaseModel):
    url: str = Field(description="Article URL")
    title: str = Field(description="Article headline")
    feed_url: str = Field(description="Feed the article was discovered in")


class ScrapedArticle(BaseModel):
    url: str
    title: str
    feed_url: str
    text: str = Field(default="", description="Cleaned article text, empty on failure")


class CacheEntry(BaseModel):
    text: str
    timestamp: float = Field(description="Unix time (seconds) the text was cached")
