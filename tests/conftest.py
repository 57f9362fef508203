from __future__ import annotations

import pytest


class FakeGenerator:
    """Records every call and answers with canned text."""

    def __init__(self, source_reply: str = "source summary", global_reply: str = "global summary") -> None:
        self.source_reply = source_reply
        self.global_reply = global_reply
        self.calls: list[tuple[str, str]] = []
        self.fail_for: set[str] = set()

    async def generate(self, instruction: str, text: str) -> str:
        self.calls.append((instruction, text))
        for marker in self.fail_for:
            if marker in instruction:
                raise RuntimeError(f"generation unavailable for {marker}")
        if "global summary" in instruction:
            return self.global_reply
        return self.source_reply


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()
