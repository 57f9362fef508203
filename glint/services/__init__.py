from .cache import ArticleCache
from .feeds import FeedService
from .generation import OpenAIGenerator, TextGenerator
from .scraper import ArticleScraper
from .summarizer import Summarizer, SummaryOptions

__all__ = [
    "ArticleCache",
    "ArticleScraper",
    "FeedService",
    "OpenAIGenerator",
    "Summarizer",
    "SummaryOptions",
    "TextGenerator",
]
