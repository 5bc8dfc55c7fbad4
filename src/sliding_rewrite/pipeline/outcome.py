# src/sliding_rewrite/pipeline/outcome.py

from dataclasses import dataclass


@dataclass(frozen=True)
class ChunkOutcome:
    """Terminal state of one dispatched chunk.

    Exactly one of `text` and `error` is set.
    """

    index: int
    text: str | None
    error: str | None = None
    latency_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.text is not None

    @classmethod
    def success(cls, index: int, text: str, latency_ms: float = 0.0) -> "ChunkOutcome":
        return cls(index=index, text=text, latency_ms=latency_ms)

    @classmethod
    def failure(
        cls, index: int, error: str, latency_ms: float = 0.0
    ) -> "ChunkOutcome":
        return cls(index=index, text=None, error=error, latency_ms=latency_ms)
