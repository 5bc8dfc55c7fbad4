import asyncio
from collections.abc import Sequence

import pytest

from sliding_rewrite.errors import DecodeError, TransformationError


class CharTokenizer:
    """One token per character. decode(encode(x)) == x for every slice."""

    def __init__(self, undecodable: set[int] | None = None) -> None:
        self.undecodable = undecodable or set()

    def encode(self, text: str) -> list[int]:
        return [ord(c) for c in text]

    def decode(self, tokens: Sequence[int]) -> str:
        bad = self.undecodable.intersection(tokens)
        if bad:
            raise DecodeError(f"cannot decode {sorted(bad)}")
        return "".join(chr(t) for t in tokens)


class RecordingTransformer:
    """Identity transform that records calls and can fail or delay per content."""

    def __init__(
        self,
        *,
        fail_on: set[str] | None = None,
        delays: dict[str, float] | None = None,
        upper: bool = False,
    ) -> None:
        self.fail_on = fail_on or set()
        self.delays = delays or {}
        self.upper = upper
        self.calls: list[tuple[str, str, str]] = []
        self.completed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def transform(self, context: str, content: str, suffix: str) -> str:
        self.calls.append((context, content, suffix))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(content, 0))
            if content in self.fail_on:
                raise TransformationError(f"refused {content!r}")
        finally:
            self.in_flight -= 1
        self.completed.append(content)
        return content.upper() if self.upper else content


@pytest.fixture
def tokenizer() -> CharTokenizer:
    return CharTokenizer()


@pytest.fixture
def transformer() -> RecordingTransformer:
    return RecordingTransformer()


@pytest.fixture
def make_tokenizer() -> type[CharTokenizer]:
    return CharTokenizer


@pytest.fixture
def make_transformer() -> type[RecordingTransformer]:
    return RecordingTransformer
