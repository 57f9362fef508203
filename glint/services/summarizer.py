from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from urllib.parse import urlparse

from ..concurrency import parallel_limit
from ..errors import SummarizationFailed
from ..models.article import ScrapedArticle
from ..models.digest import SourceGroup, SourceSummary
from .generation import TextGenerator

logger = logging.getLogger(__name__)

MAX_SOURCE_ARTICLE_CHARS = 6000
SECTION_SEPARATOR = "\n\n---\n\n"

SOURCE_PROMPT = (
    "GLINT source summary for {hostname}. {count} articles from this source.\n\n"
    "Summarize the key themes and information from these articles. "
    "Use headings/bullets. Include article links in format [Article Title](article_url). "
    "Keep key facts/names/quotes. Neutral tone. GitHub Markdown only. "
    "Write output in {language}."
)

GLOBAL_PROMPT = (
    "GLINT global summary for {date}. {total} articles from {sources} sources.\n\n"
    "Summarize the main themes and important news across all sources. "
    "Use headings/bullets. Reference sources by domain name. "
    "Keep key facts/names/quotes. Neutral tone. GitHub Markdown only. "
    "Write output in {language}."
)


@dataclass(frozen=True, slots=True)
class SummaryOptions:
    language: str = "English"
    source_prompt: str = SOURCE_PROMPT
    global_prompt: str = GLOBAL_PROMPT
    max_article_chars: int = MAX_SOURCE_ARTICLE_CHARS


def source_hostname(feed_url: str) -> str:
    return urlparse(feed_url).hostname or feed_url


def group_by_source(articles: Iterable[ScrapedArticle]) -> list[SourceGroup]:
    """Bucket non-empty articles by feed, keeping discovery order."""
    groups: dict[str, SourceGroup] = {}
    for article in articles:
        if not article.text:
            continue
        group = groups.get(article.feed_url)
        if group is None:
            group = groups[article.feed_url] = SourceGroup(feed_url=article.feed_url)
        group.articles.append(article)
    return list(groups.values())


@dataclass(slots=True)
class Summarizer:
    generator: TextGenerator
    options: SummaryOptions = SummaryOptions()
    concurrency: int = 6

    def source_instruction(self, group: SourceGroup) -> str:
        return self.options.source_prompt.format(
            hostname=source_hostname(group.feed_url),
            count=len(group.articles),
            language=self.options.language,
        )

    def source_body(self, group: SourceGroup) -> str:
        return SECTION_SEPARATOR.join(
            f"Title: {article.title}\nURL: {article.url}\n"
            f"Content:\n{article.text[: self.options.max_article_chars]}"
            for article in group.articles
        )

    def global_instruction(self, summaries: Sequence[SourceSummary], day: date) -> str:
        return self.options.global_prompt.format(
            date=day.isoformat(),
            total=sum(len(summary.articles) for summary in summaries),
            sources=len(summaries),
            language=self.options.language,
        )

    def global_body(self, summaries: Sequence[SourceSummary]) -> str:
        return SECTION_SEPARATOR.join(
            f"Source: {source_hostname(summary.feed_url)} "
            f"({len(summary.articles)} articles)\nSummary:\n{summary.summary}"
            for summary in summaries
        )

    async def summarize_source(self, group: SourceGroup) -> SourceSummary:
        summary = await self._generate(
            "source",
            group.feed_url,
            self.source_instruction(group),
            self.source_body(group),
        )
        logger.info(
            "Summarized %s (%d articles)",
            source_hostname(group.feed_url),
            len(group.articles),
        )
        return SourceSummary(feed_url=group.feed_url, articles=group.articles, summary=summary)

    async def summarize_sources(self, groups: Sequence[SourceGroup]) -> list[SourceSummary]:
        return await parallel_limit(groups, self.summarize_source, self.concurrency)

    async def summarize_global(self, summaries: Sequence[SourceSummary], day: date) -> str:
        return await self._generate(
            "global",
            day.isoformat(),
            self.global_instruction(summaries, day),
            self.global_body(summaries),
        )

    async def _generate(self, stage: str, subject: str, instruction: str, body: str) -> str:
        try:
            return await self.generator.generate(instruction, body)
        except Exception as exc:
            raise SummarizationFailed(stage, subject, exc) from exc
