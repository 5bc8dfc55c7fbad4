from pathlib import Path
from unittest.mock import patch

import pytest

from sliding_rewrite.errors import IncompleteDocumentError
from sliding_rewrite.llms.config import LLMConfig
from sliding_rewrite.observability.base import InMemoryMetricsHook
from sliding_rewrite.pipeline.pipeline import (
    RewriteConfig,
    RewritePipeline,
    RewriteResult,
    build_pipeline,
    rewrite_file,
)
from sliding_rewrite.tokenizers.tiktoken import TiktokenTokenizer
from sliding_rewrite.transform.llm import LLMTransformer
from sliding_rewrite.windowing.config import WindowConfig

TEXT = "abcdefghijklmnopqrstuvw"
WINDOW = WindowConfig(context_limit=10, overlap_margin=2)


@pytest.mark.asyncio
async def test_identity_transform_reconstructs_input(tokenizer, transformer) -> None:
    pipeline = RewritePipeline(tokenizer, transformer, WINDOW)

    result = await pipeline.rewrite(TEXT)

    assert result.text == TEXT
    assert result.token_count == 23
    assert result.total_chunks == 3
    assert result.is_complete


@pytest.mark.asyncio
async def test_order_preserved_under_reversed_completion(
    tokenizer, make_transformer
) -> None:
    text = "the quick brown fox jumps over the lazy dog" * 3
    transformer = make_transformer(upper=True)
    # Make earlier chunks slower than later ones
    chunk_size = WINDOW.chunk_size
    contents = [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)]
    transformer.delays = {
        c: 0.002 * (len(contents) - i) for i, c in enumerate(contents)
    }
    pipeline = RewritePipeline(tokenizer, transformer, WINDOW)

    result = await pipeline.rewrite(text)

    assert result.text == text.upper()


@pytest.mark.asyncio
async def test_single_failure_leaves_gap(tokenizer, make_transformer) -> None:
    transformer = make_transformer(fail_on={"ijklmnop"})
    pipeline = RewritePipeline(tokenizer, transformer, WINDOW)

    result = await pipeline.rewrite(TEXT)

    assert result.text == "abcdefgh" + "qrstuvw"
    assert result.succeeded == 2
    assert result.failed_indices == [1]
    assert not result.is_complete


@pytest.mark.asyncio
async def test_require_complete_raises_on_gap(tokenizer, make_transformer) -> None:
    transformer = make_transformer(fail_on={"qrstuvw"})
    pipeline = RewritePipeline(tokenizer, transformer, WINDOW)

    result = await pipeline.rewrite(TEXT)

    with pytest.raises(IncompleteDocumentError, match="1 of 3 chunks failed") as exc:
        result.require_complete()
    assert exc.value.failed_indices == [2]


@pytest.mark.asyncio
async def test_empty_input_dispatches_nothing(tokenizer, transformer) -> None:
    pipeline = RewritePipeline(tokenizer, transformer, WINDOW)

    result = await pipeline.rewrite("")

    assert result.text == ""
    assert result.outcomes == []
    assert result.is_complete
    assert transformer.calls == []


@pytest.mark.asyncio
async def test_every_chunk_failing_gives_empty_document(
    tokenizer, make_transformer
) -> None:
    transformer = make_transformer(fail_on={"abcdefgh", "ijklmnop", "qrstuvw"})
    pipeline = RewritePipeline(tokenizer, transformer, WINDOW)

    result = await pipeline.rewrite(TEXT)

    assert result.text == ""
    assert result.failed_indices == [0, 1, 2]


@pytest.mark.asyncio
async def test_metrics_flow_through_pipeline(tokenizer, transformer) -> None:
    metrics_hook = InMemoryMetricsHook()
    pipeline = RewritePipeline(
        tokenizer, transformer, WINDOW, metrics_hook=metrics_hook
    )

    await pipeline.rewrite(TEXT)

    assert metrics_hook.counters["planning_chunks_planned"] == 3
    assert metrics_hook.counters["chunks_succeeded_total"] == 3
    assert len(metrics_hook.latencies["dispatch_duration"]) == 1


@pytest.mark.asyncio
async def test_rewrite_file_round_trip(tmp_path: Path, tokenizer, transformer) -> None:
    source = tmp_path / "bee.txt"
    target = tmp_path / "out.txt"
    source.write_text("Ya like jazz? ✨", encoding="utf-8")
    pipeline = RewritePipeline(tokenizer, transformer, WINDOW)

    result = await rewrite_file(source, target, pipeline)

    assert target.read_text(encoding="utf-8") == "Ya like jazz? ✨"
    assert result.total_chunks == 2


def test_result_without_outcomes_is_complete() -> None:
    result = RewriteResult(text="", outcomes=[], token_count=0)

    assert result.require_complete() is result


def test_build_pipeline_wires_components() -> None:
    config = RewriteConfig(
        window=WINDOW,
        llm=LLMConfig(provider="openai", model="gpt-4o", api_key="test"),
        max_concurrency=4,
        encoding="cl100k_base",
        strict_decode=False,
    )
    with (
        patch("sliding_rewrite.tokenizers.tiktoken.tiktoken.get_encoding") as get_enc,
        patch("sliding_rewrite.llms.openai.AsyncOpenAI"),
    ):
        pipeline = build_pipeline(config)

    get_enc.assert_called_once_with("cl100k_base")
    assert isinstance(pipeline._tokenizer, TiktokenTokenizer)
    assert pipeline._tokenizer._strict is False
    assert isinstance(pipeline._dispatcher._transformer, LLMTransformer)
    assert pipeline._dispatcher._max_concurrency == 4
