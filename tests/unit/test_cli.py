from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sliding_rewrite.cli import app
from sliding_rewrite.pipeline.pipeline import RewritePipeline

runner = CliRunner()

TEXT = "abcdefghijklmnopqrstuvw"


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "bee.txt"
    path.write_text(TEXT, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_dotenv():
    with patch("sliding_rewrite.cli.load_dotenv"):
        yield


def _fake_build(tokenizer, transformer):
    def build(config, *, prompt=None, metrics_hook=None):
        return RewritePipeline(
            tokenizer,
            transformer,
            config.window,
            max_concurrency=config.max_concurrency,
            metrics_hook=metrics_hook,
        )

    return build


def test_rewrites_file(source: Path, tmp_path: Path, tokenizer, make_transformer) -> None:
    target = tmp_path / "out.txt"
    transformer = make_transformer(upper=True)

    with patch("sliding_rewrite.cli.build_pipeline", _fake_build(tokenizer, transformer)):
        result = runner.invoke(
            app,
            [str(source), str(target), "--context-limit", "10", "--overlap-margin", "2"],
        )

    assert result.exit_code == 0, result.output
    assert target.read_text(encoding="utf-8") == TEXT.upper()
    assert "There are 23 tokens" in result.output
    assert "Rewrote 3/3 chunks" in result.output


def test_passes_config_through(source: Path, tmp_path: Path, tokenizer, transformer) -> None:
    seen = {}
    build = _fake_build(tokenizer, transformer)

    def capture(config, *, prompt=None, metrics_hook=None):
        seen["config"] = config
        seen["prompt"] = prompt
        return build(config, prompt=prompt, metrics_hook=metrics_hook)

    with (
        patch("sliding_rewrite.cli.build_pipeline", capture),
        patch.dict("os.environ", {"OPENAI_KEY": "sk-from-env"}),
    ):
        result = runner.invoke(
            app,
            [
                str(source),
                str(tmp_path / "out.txt"),
                "--max-concurrency",
                "4",
                "--lenient-decode",
                "--prompt-version",
                "1.1",
                "--prompt-input",
                "style=plain English",
            ],
        )

    assert result.exit_code == 0, result.output
    config = seen["config"]
    assert config.window.context_limit == 500
    assert config.window.overlap_margin == 50
    assert config.llm.api_key == "sk-from-env"
    assert config.llm.model == "gpt-4o"
    assert config.max_concurrency == 4
    assert config.strict_decode is False
    assert config.prompt_inputs == {"style": "plain English"}
    assert seen["prompt"].version == "1.1"


def test_degenerate_window_exits_before_any_work(
    source: Path, tmp_path: Path
) -> None:
    with patch("sliding_rewrite.cli.build_pipeline") as build:
        result = runner.invoke(
            app,
            [
                str(source),
                str(tmp_path / "out.txt"),
                "--context-limit",
                "50",
                "--overlap-margin",
                "50",
            ],
        )

    assert result.exit_code == 1
    assert "overlap_margin must be < context_limit" in result.output
    build.assert_not_called()
    assert not (tmp_path / "out.txt").exists()


def test_unknown_prompt_exits(source: Path, tmp_path: Path) -> None:
    with patch("sliding_rewrite.cli.build_pipeline") as build:
        result = runner.invoke(
            app,
            [str(source), str(tmp_path / "out.txt"), "--prompt-name", "nope"],
        )

    assert result.exit_code == 1
    build.assert_not_called()


def test_partial_failure_succeeds_without_strict(
    source: Path, tmp_path: Path, tokenizer, make_transformer
) -> None:
    target = tmp_path / "out.txt"
    transformer = make_transformer(fail_on={"ijklmnop"})

    with patch("sliding_rewrite.cli.build_pipeline", _fake_build(tokenizer, transformer)):
        result = runner.invoke(
            app,
            [str(source), str(target), "--context-limit", "10", "--overlap-margin", "2"],
        )

    assert result.exit_code == 0, result.output
    assert target.read_text(encoding="utf-8") == "abcdefghqrstuvw"
    assert "Rewrote 2/3 chunks" in result.output


def test_strict_exits_on_partial_failure(
    source: Path, tmp_path: Path, tokenizer, make_transformer
) -> None:
    target = tmp_path / "out.txt"
    transformer = make_transformer(fail_on={"ijklmnop"})

    with patch("sliding_rewrite.cli.build_pipeline", _fake_build(tokenizer, transformer)):
        result = runner.invoke(
            app,
            [
                str(source),
                str(target),
                "--context-limit",
                "10",
                "--overlap-margin",
                "2",
                "--strict",
            ],
        )

    assert result.exit_code == 1
    assert "1 of 3 chunks failed: [1]" in result.output
    # Partial document is still written
    assert target.read_text(encoding="utf-8") == "abcdefghqrstuvw"
