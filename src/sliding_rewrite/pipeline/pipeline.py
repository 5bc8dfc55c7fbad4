# src/sliding_rewrite/pipeline/pipeline.py

import logging
from dataclasses import dataclass, field
from pathlib import Path
from time import monotonic

from sliding_rewrite.errors import IncompleteDocumentError
from sliding_rewrite.llms.config import LLMConfig
from sliding_rewrite.llms.factory import create_llm_client
from sliding_rewrite.observability.base import MetricsHook, NoOpMetricsHook
from sliding_rewrite.prompts.prompt import Prompt
from sliding_rewrite.prompts.prompts_library import default_prompt
from sliding_rewrite.tokenizers.base import Tokenizer
from sliding_rewrite.tokenizers.tiktoken import TiktokenTokenizer
from sliding_rewrite.transform.base import Transformer
from sliding_rewrite.transform.llm import LLMTransformer
from sliding_rewrite.windowing.config import WindowConfig
from sliding_rewrite.windowing.planner import plan_chunks

from .dispatcher import Dispatcher
from .outcome import ChunkOutcome
from .reassembler import assemble

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteConfig:
    """Everything a pipeline run needs. Immutable. Passed in, never read from env."""

    window: WindowConfig
    llm: LLMConfig
    max_concurrency: int | None = None
    encoding: str = "o200k_base"
    strict_decode: bool = True
    prompt_inputs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RewriteResult:
    text: str
    outcomes: list[ChunkOutcome]
    token_count: int

    @property
    def total_chunks(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed_indices(self) -> list[int]:
        return [o.index for o in self.outcomes if not o.ok]

    @property
    def is_complete(self) -> bool:
        return not self.failed_indices

    def require_complete(self) -> "RewriteResult":
        """Return self, or raise IncompleteDocumentError if any chunk failed."""
        failed = self.failed_indices
        if failed:
            raise IncompleteDocumentError(failed, self.total_chunks)
        return self


class RewritePipeline:
    """encode -> plan -> dispatch -> assemble.

    The window config is validated when it is built, so a pipeline that exists
    can always start. Once dispatch begins no error escapes; failures are
    reported through RewriteResult.
    """

    def __init__(
        self,
        tokenizer: Tokenizer,
        transformer: Transformer,
        window: WindowConfig,
        *,
        max_concurrency: int | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._tokenizer = tokenizer
        self._window = window
        self.metrics_hook = metrics_hook
        self._dispatcher = Dispatcher(
            tokenizer,
            transformer,
            max_concurrency=max_concurrency,
            metrics_hook=metrics_hook,
        )

    async def rewrite(self, text: str) -> RewriteResult:
        start = monotonic()
        tokens = self._tokenizer.encode(text)
        logger.info("Input has %d tokens", len(tokens))

        descriptors = plan_chunks(
            len(tokens), self._window, metrics_hook=self.metrics_hook
        )
        logger.info(
            "Planned %d chunks (chunk_size=%d, overlap_margin=%d)",
            len(descriptors),
            self._window.chunk_size,
            self._window.overlap_margin,
        )

        outcomes = await self._dispatcher.run(descriptors, tokens)
        result = RewriteResult(
            text=assemble(outcomes), outcomes=outcomes, token_count=len(tokens)
        )

        elapsed_ms = 1000 * (monotonic() - start)
        if result.is_complete:
            logger.info(
                "Rewrite finished: %d chunks, %d chars, latency=%.0fms",
                result.total_chunks,
                len(result.text),
                elapsed_ms,
            )
        else:
            logger.warning(
                "Rewrite finished with gaps: %d of %d chunks failed %s",
                len(result.failed_indices),
                result.total_chunks,
                result.failed_indices,
            )
        return result


def build_pipeline(
    config: RewriteConfig,
    *,
    prompt: Prompt | None = None,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> RewritePipeline:
    """Wire tokenizer, LLM client and transformer from a RewriteConfig."""
    tokenizer = TiktokenTokenizer(
        config.encoding, strict=config.strict_decode, metrics_hook=metrics_hook
    )
    client = create_llm_client(config.llm, metrics_hook=metrics_hook)
    transformer = LLMTransformer(
        client,
        prompt or default_prompt(),
        prompt_inputs=config.prompt_inputs,
    )
    return RewritePipeline(
        tokenizer,
        transformer,
        config.window,
        max_concurrency=config.max_concurrency,
        metrics_hook=metrics_hook,
    )


async def rewrite_file(
    input_path: str | Path,
    output_path: str | Path,
    pipeline: RewritePipeline,
) -> RewriteResult:
    """Rewrite a UTF-8 text file into `output_path`."""
    source = Path(input_path).read_text(encoding="utf-8")
    logger.info("Read %d chars from %s", len(source), input_path)

    result = await pipeline.rewrite(source)

    Path(output_path).write_text(result.text, encoding="utf-8")
    logger.info("Wrote %d chars to %s", len(result.text), output_path)
    return result
