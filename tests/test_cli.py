import time

import orjson
import pytest

from glint import cli
from glint.config import get_settings
from glint.services.cache import ArticleCache


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("GLINT_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("GLINT_CONFIG", str(tmp_path / "glint.yml"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_cleanup_cache_command(tmp_path) -> None:
    cache = ArticleCache(root=tmp_path / "cache")
    cache.root.mkdir()
    old = cache.path_for("https://example.com/old")
    old.write_bytes(orjson.dumps({"text": "old", "timestamp": time.time() - 30 * 60 * 60}))
    new = cache.path_for("https://example.com/new")
    new.write_bytes(orjson.dumps({"text": "new", "timestamp": time.time()}))

    assert cli.main(["cleanup-cache"]) == 0

    assert not old.exists()
    assert new.exists()


def test_missing_config_exits_with_error(tmp_path) -> None:
    assert cli.main(["run"]) == 2


def test_summarization_failure_exits_non_zero(tmp_path, monkeypatch) -> None:
    (tmp_path / "glint.yml").write_text("feeds:\n  - https://example.com/rss\n")
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    seen = {}

    async def failing_run_digest(config, settings, **kwargs):
        from glint.errors import SummarizationFailed

        seen["config"] = config
        raise SummarizationFailed("source", "https://example.com/rss", RuntimeError("down"))

    monkeypatch.setattr(cli, "run_digest", failing_run_digest)

    assert cli.main(["run", "--language", "Spanish", "-o", str(tmp_path / "out")]) == 1
    assert seen["config"].language == "Spanish"
    assert seen["config"].output_dir == str(tmp_path / "out")


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    assert "glint" in capsys.readouterr().out
