"""Command line entry point: ``glint [run|cleanup-cache]``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from openai import OpenAIError

from . import __version__
from .config import DigestConfig, Settings, get_settings, load_digest_config
from .errors import ConfigError, SummarizationFailed
from .http_client import get_http_client, shutdown_http_client
from .pipeline import run_digest
from .services.cache import ArticleCache
from .services.feeds import FeedService
from .services.generation import OpenAIGenerator
from .services.scraper import ArticleScraper
from .services.summarizer import Summarizer, SummaryOptions

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glint",
        description="Fetch RSS feeds, scrape articles and write AI-generated Markdown digests.",
    )
    parser.add_argument("--version", action="version", version=f"glint {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="Config file (default: ~/glint.yml)"
    )

    subparsers = parser.add_subparsers(dest="command")
    run = subparsers.add_parser("run", help="Build today's digest (default)")
    run.add_argument("-o", "--output-dir", default=None, help="Override output directory")
    run.add_argument("-l", "--language", default=None, help="Override digest language")
    subparsers.add_parser("cleanup-cache", help="Delete cached articles older than 24 hours")
    return parser


async def _run(config: DigestConfig, settings: Settings) -> int:
    cache = ArticleCache(root=settings.cache_dir)
    try:
        generator = OpenAIGenerator(settings=settings)
    except OpenAIError as exc:
        logger.error("Cannot create OpenAI client: %s", exc)
        return 2

    try:
        client = await get_http_client()
        report = await run_digest(
            config,
            settings,
            feeds=FeedService(settings=settings, client=client),
            scraper=ArticleScraper(cache=cache, settings=settings, client=client),
            summarizer=Summarizer(
                generator=generator,
                options=SummaryOptions(language=config.language),
                concurrency=settings.summary_concurrency,
            ),
            cache=cache,
        )
    except SummarizationFailed as exc:
        logger.error("Summarization stopped: %s", exc)
        return 1
    finally:
        await generator.close()
        await shutdown_http_client()

    if report.files:
        logger.info("Review created at: %s", report.output_dir)
    return 0


async def _cleanup(settings: Settings) -> int:
    removed = await ArticleCache(root=settings.cache_dir).cleanup()
    logger.info("Removed %d cache entries from %s", removed, settings.cache_dir)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    settings = get_settings()

    if args.command == "cleanup-cache":
        return asyncio.run(_cleanup(settings))

    try:
        config = load_digest_config(args.config or settings.config_path)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2

    overrides = {}
    if getattr(args, "output_dir", None):
        overrides["output_dir"] = args.output_dir
    if getattr(args, "language", None):
        overrides["language"] = args.language
    if overrides:
        config = config.model_copy(update=overrides)

    return asyncio.run(_run(config, settings))


if __name__ == "__main__":
    sys.exit(main())
