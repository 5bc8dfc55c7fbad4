# src/sliding_rewrite/llms/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["openai", "anthropic"]


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for LLM clients.

    Immutable. Explicit. No magic defaults from environment.
    """

    provider: Provider
    model: str
    api_key: str | None = None  # Falls back to provider's env var
    timeout: float = 30.0
    max_retries: int = 0  # Transport retries per call; the pipeline never retries
