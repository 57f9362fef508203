from __future__ import annotations

from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from .article import ScrapedArticle


class SourceGroup(BaseModel):
    feed_url: str = Field(description="Feed all articles in the group came from")
    articles: list[ScrapedArticle] = Field(default_factory=list)


class SourceSummary(BaseModel):
    feed_url: str
    articles: list[ScrapedArticle] = Field(default_factory=list)
    summary: str = Field(description="Markdown summary of the source")


class OutputFile(BaseModel):
    path: Path
    content: str


class DigestReport(BaseModel):
    day: date = Field(description="Day the digest was produced for")
    output_dir: Path = Field(description="Dated directory the digest was written to")
    feeds: int = Field(0, description="Number of configured feeds")
    articles_found: int = Field(0, description="Feed items with a title and link")
    articles_scraped: int = Field(0, description="Articles with non-empty text")
    sources: int = Field(0, description="Sources summarized")
    files: list[Path] = Field(default_factory=list)
