class GlintError(Exception):
    """Base class for errors raised by glint."""


class ConfigError(GlintError):
    pass


class InvalidSource(GlintError):
    """A feed could not be fetched or parsed."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"Invalid RSS source: {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class FetchFailed(GlintError):
    """An article page could not be retrieved."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"Failed to fetch article: {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class CacheError(GlintError):
    """Raised inside the article cache; never leaves ArticleCache's public methods."""


class SummarizationFailed(GlintError):
    """The text-generation service failed while building a digest."""

    def __init__(self, stage: str, subject: str, cause: BaseException) -> None:
        self.stage = stage
        self.subject = subject
        super().__init__(f"{stage} summary failed for {subject}: {cause}")
