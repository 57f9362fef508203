from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from openai import AsyncOpenAI

from ..config import Settings, get_settings


class TextGenerator(Protocol):
    async def generate(self, instruction: str, text: str) -> str: ...


@dataclass(slots=True)
class OpenAIGenerator:
    """Chat-completion backed generator: system instruction plus one user message."""

    settings: Settings | None = None
    client: AsyncOpenAI | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()
        if self.client is None:
            self.client = AsyncOpenAI()

    async def generate(self, instruction: str, text: str) -> str:
        completion = await self.client.chat.completions.create(
            model=self.settings.openai_model,
            temperature=self.settings.openai_temperature,
            messages=[
                {"role": "system", "content": instruction},
                {"role": "user", "content": text},
            ],
        )
        return completion.choices[0].message.content or ""

    async def close(self) -> None:
        await self.client.close()
