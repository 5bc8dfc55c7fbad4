# src/sliding_rewrite/windowing/planner.py

from collections.abc import Sequence
from dataclasses import dataclass
from time import monotonic

from sliding_rewrite.errors import ConfigurationError
from sliding_rewrite.observability import names
from sliding_rewrite.observability.base import MetricsHook, NoOpMetricsHook

from .config import WindowConfig


@dataclass(frozen=True)
class TokenRange:
    """Half-open range [start, end) over a token sequence."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end == self.start

    def slice(self, tokens: Sequence[int]) -> Sequence[int]:
        return tokens[self.start : self.end]


@dataclass(frozen=True)
class ChunkDescriptor:
    """One unit of work: the content to rewrite plus its flanking windows.

    `context` ends where `content` starts and `suffix` starts where `content`
    ends. Both flanks may overlap the neighbouring chunks' content.
    """

    index: int
    content: TokenRange
    context: TokenRange
    suffix: TokenRange


def count_chunks(token_count: int, config: WindowConfig) -> int:
    if token_count < 0:
        raise ConfigurationError("token_count must be >= 0")
    # ceil division without floats
    return -(-token_count // config.chunk_size)


def plan_chunks(
    token_count: int,
    config: WindowConfig,
    *,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> list[ChunkDescriptor]:
    """Split [0, token_count) into consecutive content ranges of chunk_size.

    Content ranges partition the input exactly. Each chunk also carries up to
    overlap_margin tokens of leading context and trailing suffix, clamped to
    the sequence bounds. Zero tokens yields zero chunks.

    Args:
        token_count: Length of the token sequence.
        config: Window parameters.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        Descriptors in ascending index order.

    Raises:
        ConfigurationError: If token_count is negative.
    """
    started = monotonic()
    total_chunks = count_chunks(token_count, config)
    chunk_size = config.chunk_size
    margin = config.overlap_margin

    descriptors = []
    for index in range(total_chunks):
        start = index * chunk_size
        end = min(start + chunk_size, token_count)
        context_start = max(0, start - margin)
        suffix_end = min(token_count, end + margin)

        descriptors.append(
            ChunkDescriptor(
                index=index,
                content=TokenRange(start, end),
                context=TokenRange(context_start, start),
                suffix=TokenRange(end, suffix_end),
            )
        )

    elapsed_ms = 1000 * (monotonic() - started)
    metrics_hook.record_latency(names.PLANNING_DURATION, elapsed_ms)
    metrics_hook.increment(names.PLANNING_CHUNKS_PLANNED, len(descriptors))
    return descriptors
