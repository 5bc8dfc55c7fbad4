# src/sliding_rewrite/pipeline/dispatcher.py

import asyncio
import contextlib
import logging
from collections.abc import Sequence
from time import monotonic

from sliding_rewrite.observability import names
from sliding_rewrite.observability.base import MetricsHook, NoOpMetricsHook
from sliding_rewrite.tokenizers.base import Tokenizer
from sliding_rewrite.transform.base import Transformer
from sliding_rewrite.windowing.planner import ChunkDescriptor

from .outcome import ChunkOutcome

logger = logging.getLogger(__name__)


class Dispatcher:
    """Fans chunks out to the transformer concurrently.

    One task per descriptor. Every task reaches a terminal outcome; a failing
    chunk never cancels its siblings. Outcomes come back in index order no
    matter which task finishes first.

    Args:
        tokenizer: Used to decode the three windows of each chunk.
        transformer: The rewrite backend.
        max_concurrency: Upper bound on in-flight transform calls.
            None dispatches everything at once.
        metrics_hook: Optional metrics hook for observability.
    """

    def __init__(
        self,
        tokenizer: Tokenizer,
        transformer: Transformer,
        *,
        max_concurrency: int | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        if max_concurrency is not None and max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0")
        self._tokenizer = tokenizer
        self._transformer = transformer
        self._max_concurrency = max_concurrency
        self.metrics_hook = metrics_hook

    async def run(
        self,
        descriptors: Sequence[ChunkDescriptor],
        tokens: Sequence[int],
    ) -> list[ChunkOutcome]:
        if not descriptors:
            logger.debug("No chunks to dispatch")
            return []

        start = monotonic()
        concurrency = self._max_concurrency or len(descriptors)
        # Created per run so it binds to the running loop
        limiter = (
            asyncio.Semaphore(self._max_concurrency)
            if self._max_concurrency is not None
            else None
        )
        self.metrics_hook.record_gauge(names.DISPATCH_CONCURRENCY, concurrency)
        logger.info(
            "Dispatching %d chunks (concurrency=%d)", len(descriptors), concurrency
        )

        results = await asyncio.gather(
            *[self._run_chunk(d, tokens, limiter) for d in descriptors]
        )
        outcomes = sorted(results, key=lambda o: o.index)

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.DISPATCH_DURATION, elapsed_ms)
        failed = sum(1 for o in outcomes if not o.ok)
        logger.info(
            "Dispatch finished: %d succeeded, %d failed, latency=%.0fms",
            len(outcomes) - failed,
            failed,
            elapsed_ms,
        )
        return outcomes

    async def _run_chunk(
        self,
        descriptor: ChunkDescriptor,
        tokens: Sequence[int],
        limiter: asyncio.Semaphore | None,
    ) -> ChunkOutcome:
        index = descriptor.index
        start = monotonic()
        try:
            context = self._tokenizer.decode(descriptor.context.slice(tokens))
            content = self._tokenizer.decode(descriptor.content.slice(tokens))
            suffix = self._tokenizer.decode(descriptor.suffix.slice(tokens))

            logger.debug(
                "Chunk %d: content=[%d, %d), context=%d tokens, suffix=%d tokens",
                index,
                descriptor.content.start,
                descriptor.content.end,
                len(descriptor.context),
                len(descriptor.suffix),
            )
            async with limiter if limiter is not None else contextlib.nullcontext():
                text = await self._transformer.transform(context, content, suffix)
        except Exception as e:
            # Scoped to this chunk: recorded as a failed outcome, never re-raised
            elapsed_ms = 1000 * (monotonic() - start)
            logger.warning(
                "Chunk %d failed (%s): %s", index, type(e).__name__, e
            )
            self.metrics_hook.increment(
                names.CHUNKS_FAILED_TOTAL, labels={"error": type(e).__name__}
            )
            return ChunkOutcome.failure(
                index, f"{type(e).__name__}: {e}", latency_ms=elapsed_ms
            )

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.CHUNK_TRANSFORM_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.CHUNKS_SUCCEEDED_TOTAL)
        logger.debug("Chunk %d done in %.0fms", index, elapsed_ms)
        return ChunkOutcome.success(index, text, latency_ms=elapsed_ms)
