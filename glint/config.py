from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    http_timeout: float = Field(10.0, gt=0, alias="HTTP_TIMEOUT")
    http_max_connections: int = Field(50, ge=1, alias="HTTP_MAX_CONNECTIONS")
    http_max_keepalive: int = Field(20, ge=1, alias="HTTP_MAX_KEEPALIVE")
    http_user_agent: str = Field("Glint/1.0", alias="HTTP_USER_AGENT")

    config_path: Path = Field(Path("~/glint.yml"), alias="GLINT_CONFIG")
    cache_dir: Path = Field(Path("~/.glint-cache"), alias="GLINT_CACHE_DIR")

    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    openai_temperature: float = Field(0.3, ge=0, le=2, alias="OPENAI_TEMPERATURE")

    feed_item_limit: int = Field(5, ge=1, alias="GLINT_FEED_ITEM_LIMIT")
    feed_concurrency: int = Field(10, ge=1, alias="GLINT_FEED_CONCURRENCY")
    article_concurrency: int = Field(25, ge=1, alias="GLINT_ARTICLE_CONCURRENCY")
    summary_concurrency: int = Field(6, ge=1, alias="GLINT_SUMMARY_CONCURRENCY")
    write_concurrency: int = Field(20, ge=1, alias="GLINT_WRITE_CONCURRENCY")


class DigestConfig(BaseModel):
    """User-facing digest configuration, read from ``~/glint.yml``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    feeds: list[str] = Field(min_length=1, description="RSS/Atom feed URLs")
    output_dir: str = Field(
        "~/glint", alias="outputDir", description="Root directory for digests"
    )
    language: str = Field("English", description="Language the digest is written in")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_digest_config(path: Path | str) -> DigestConfig:
    config_path = Path(path).expanduser()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    try:
        return DigestConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc


def resolve_output_dir(config: DigestConfig) -> Path:
    return Path(config.output_dir).expanduser().resolve()
