# src/sliding_rewrite/cli.py

import asyncio
import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from sliding_rewrite.errors import ConfigurationError, IncompleteDocumentError
from sliding_rewrite.llms.config import LLMConfig
from sliding_rewrite.observability import names
from sliding_rewrite.observability.base import InMemoryMetricsHook
from sliding_rewrite.pipeline.pipeline import RewriteConfig, build_pipeline, rewrite_file
from sliding_rewrite.prompts.prompts_library import (
    BUILTIN_PROMPTS_DIR,
    DEFAULT_PROMPT_NAME,
    DEFAULT_PROMPT_VERSION,
    PromptsLibrary,
)
from sliding_rewrite.windowing.config import WindowConfig

app = typer.Typer(help="Rewrite a long document chunk by chunk with a sliding window")

# Read when the provider SDK's own variable is not set
API_KEY_ENV = {"openai": "OPENAI_KEY", "anthropic": "ANTHROPIC_KEY"}


def _parse_inputs(values: list[str]) -> dict[str, str]:
    inputs = {}
    for value in values:
        key, sep, rest = value.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {value!r}")
        inputs[key] = rest
    return inputs


@app.command()
def rewrite(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    output_path: Path = typer.Argument(..., dir_okay=False),
    context_limit: int = typer.Option(500, help="Model capacity in tokens"),
    overlap_margin: int = typer.Option(50, help="Context/suffix padding in tokens"),
    provider: str = typer.Option("openai", help="openai or anthropic"),
    model: str = typer.Option("gpt-4o"),
    timeout: float = typer.Option(30.0, help="Per-request timeout in seconds"),
    encoding: str = typer.Option("o200k_base", help="tiktoken encoding name"),
    max_concurrency: Optional[int] = typer.Option(
        None, help="Cap on in-flight requests (default: unbounded)"
    ),
    lenient_decode: bool = typer.Option(
        False, help="Replace undecodable bytes instead of failing the chunk"
    ),
    prompt_dir: Path = typer.Option(BUILTIN_PROMPTS_DIR, file_okay=False),
    prompt_name: str = typer.Option(DEFAULT_PROMPT_NAME),
    prompt_version: str = typer.Option(DEFAULT_PROMPT_VERSION),
    prompt_input: Optional[List[str]] = typer.Option(
        None, "--prompt-input", help="Prompt input as KEY=VALUE, repeatable"
    ),
    strict: bool = typer.Option(False, help="Exit 1 if any chunk failed"),
    log_level: str = typer.Option("INFO"),
) -> None:
    """Rewrite INPUT_PATH and write the reassembled text to OUTPUT_PATH."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()

    if provider not in API_KEY_ENV:
        raise typer.BadParameter(f"unknown provider {provider!r}", param_hint="--provider")

    try:
        window = WindowConfig(context_limit=context_limit, overlap_margin=overlap_margin)
    except ConfigurationError as e:
        typer.echo(f"Invalid window configuration: {e}", err=True)
        raise typer.Exit(code=1)

    config = RewriteConfig(
        window=window,
        llm=LLMConfig(
            provider=provider,  # type: ignore[arg-type]
            model=model,
            api_key=os.environ.get(API_KEY_ENV[provider]),
            timeout=timeout,
        ),
        max_concurrency=max_concurrency,
        encoding=encoding,
        strict_decode=not lenient_decode,
        prompt_inputs=_parse_inputs(prompt_input or []),
    )
    try:
        prompt = PromptsLibrary(prompt_dir).get(prompt_name, prompt_version)
    except KeyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    metrics = InMemoryMetricsHook()
    pipeline = build_pipeline(config, prompt=prompt, metrics_hook=metrics)

    result = asyncio.run(rewrite_file(input_path, output_path, pipeline))

    typer.echo(f"There are {result.token_count} tokens")
    typer.echo(
        f"Rewrote {result.succeeded}/{result.total_chunks} chunks "
        f"({metrics.counters[names.LLM_TOKENS_TOTAL]} LLM tokens) -> {output_path}"
    )
    if strict:
        try:
            result.require_complete()
        except IncompleteDocumentError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(code=1)


def main() -> None:  # pragma: no cover - CLI entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
