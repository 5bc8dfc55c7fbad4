# src/sliding_rewrite/transform/llm.py

import logging

from anthropic import APIError
from openai import OpenAIError

from sliding_rewrite.errors import TransformationError
from sliding_rewrite.llms.base import LLMClient, Message, Role
from sliding_rewrite.prompts.prompt import Prompt

from .base import Transformer

logger = logging.getLogger(__name__)


def frame_windows(context: str, content: str, suffix: str) -> list[Message]:
    """Wrap the three windows in explicit START/END markers, one message each."""
    return [
        Message(
            role=Role.USER,
            content=f"START CONTEXT CONTENT {context} END CONTEXT CONTENT",
        ),
        Message(role=Role.USER, content=f"START CONTENT {content} END CONTENT"),
        Message(
            role=Role.USER,
            content=f"START SUFFIX CONTENT {suffix} END SUFFIX CONTENT",
        ),
    ]


class LLMTransformer(Transformer):
    """Transformer that asks a chat model to rewrite the content window.

    The prompt template becomes the system message. Provider errors and empty
    replies surface as TransformationError; nothing is retried here.
    """

    def __init__(
        self,
        client: LLMClient,
        prompt: Prompt,
        *,
        prompt_inputs: dict[str, str] | None = None,
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self._system = prompt.render(**(prompt_inputs or {}))
        self._temperature = temperature
        self._max_tokens = max_tokens
        logger.info(
            "Initialized LLMTransformer with prompt=%s v%s, temperature=%s",
            prompt.name,
            prompt.version,
            temperature,
        )

    async def transform(self, context: str, content: str, suffix: str) -> str:
        messages = [
            Message(role=Role.SYSTEM, content=self._system),
            *frame_windows(context, content, suffix),
        ]
        try:
            response = await self._client.complete(
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except (OpenAIError, APIError) as e:
            raise TransformationError(f"Transformation request failed: {e}") from e

        if not response.content:
            raise TransformationError(
                f"Empty response from model (finish_reason={response.finish_reason})"
            )
        if response.finish_reason == "length":
            logger.warning("Model output truncated at max_tokens")
        return response.content
