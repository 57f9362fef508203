from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from ..concurrency import parallel_limit
from ..models.digest import OutputFile, SourceSummary
from .summarizer import source_hostname

GLOBAL_SUMMARY_FILENAME = "global_summary.md"
_UNSAFE_CHARS = re.compile(r"[^a-z0-9.-]+")


def source_filename(feed_url: str) -> str:
    """``https://www.Example.com/rss`` -> ``www.example.com_summary.md``."""
    stem = _UNSAFE_CHARS.sub("_", source_hostname(feed_url).lower()).strip("_.")
    return f"{stem or 'source'}_summary.md"


def dated_output_dir(root: Path, day: date) -> Path:
    return root / day.isoformat()


def build_output_files(
    directory: Path, summaries: Sequence[SourceSummary], global_summary: str
) -> list[OutputFile]:
    files: list[OutputFile] = []
    taken: set[str] = {GLOBAL_SUMMARY_FILENAME}
    for summary in summaries:
        name = source_filename(summary.feed_url)
        if name in taken:
            stem = name.removesuffix("_summary.md")
            counter = 2
            while f"{stem}_{counter}_summary.md" in taken:
                counter += 1
            name = f"{stem}_{counter}_summary.md"
        taken.add(name)
        files.append(OutputFile(path=directory / name, content=summary.summary))
    files.append(OutputFile(path=directory / GLOBAL_SUMMARY_FILENAME, content=global_summary))
    return files


async def ensure_directory(path: Path) -> None:
    await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)


async def write_files(files: Sequence[OutputFile], limit: int = 20) -> list[Path]:
    async def write(file: OutputFile) -> Path:
        await asyncio.to_thread(file.path.write_text, file.content, encoding="utf-8")
        return file.path

    return await parallel_limit(files, write, limit)
