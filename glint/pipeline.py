"""End-to-end digest run: feeds -> articles -> per-source summaries -> global summary -> files.

Each stage finishes completely before the next one starts. Feed and article
failures are absorbed by their stage; summarization failures propagate.
"""

from __future__ import annotations

import logging
from datetime import date

from .config import DigestConfig, Settings, resolve_output_dir
from .models.article import ScrapedArticle
from .models.digest import DigestReport
from .services.cache import ArticleCache
from .services.feeds import FeedService, collect_article_refs
from .services.output import build_output_files, dated_output_dir, ensure_directory, write_files
from .services.scraper import ArticleScraper
from .services.summarizer import Summarizer, group_by_source

logger = logging.getLogger(__name__)


async def run_digest(
    config: DigestConfig,
    settings: Settings,
    *,
    feeds: FeedService,
    scraper: ArticleScraper,
    summarizer: Summarizer,
    cache: ArticleCache,
    today: date | None = None,
) -> DigestReport:
    day = today or date.today()
    directory = dated_output_dir(resolve_output_dir(config), day)
    report = DigestReport(day=day, output_dir=directory, feeds=len(config.feeds))

    removed = await cache.cleanup()
    if removed:
        logger.info("Removed %d expired cache entries", removed)

    await ensure_directory(directory)

    logger.info("Fetching %d feeds", len(config.feeds))
    feed_results = await feeds.fetch_all(config.feeds, settings.feed_item_limit)
    refs = collect_article_refs(feed_results)
    report.articles_found = len(refs)
    logger.info("Found %d articles", len(refs))
    if not refs:
        logger.info("No articles found, nothing to summarize")
        return report

    scraped = await scraper.fetch_all([ref.url for ref in refs])
    articles = [
        ScrapedArticle(url=ref.url, title=ref.title, feed_url=ref.feed_url, text=text)
        for ref, (_, text) in zip(refs, scraped, strict=True)
    ]
    groups = group_by_source(articles)
    report.articles_scraped = sum(len(group.articles) for group in groups)
    logger.info("Scraped %d/%d articles", report.articles_scraped, len(refs))
    if not groups:
        logger.info("No article text could be scraped, nothing to summarize")
        return report

    summaries = await summarizer.summarize_sources(groups)
    report.sources = len(summaries)
    logger.info("Summarized %d sources", len(summaries))

    global_summary = await summarizer.summarize_global(summaries, day)
    logger.info("Generated global summary")

    files = build_output_files(directory, summaries, global_summary)
    report.files = await write_files(files, settings.write_concurrency)
    logger.info("Wrote %d files to %s", len(report.files), directory)
    return report
