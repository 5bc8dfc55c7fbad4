# src/sliding_rewrite/tokenizers/tiktoken.py

import logging
from collections.abc import Sequence

import tiktoken

from sliding_rewrite.errors import DecodeError
from sliding_rewrite.observability import names
from sliding_rewrite.observability.base import MetricsHook, NoOpMetricsHook

from .base import Tokenizer

logger = logging.getLogger(__name__)


class TiktokenTokenizer(Tokenizer):
    """Tokenizer backed by a tiktoken encoding.

    Strict mode decodes the raw bytes of a slice as UTF-8 and raises
    DecodeError when a cut lands inside a multi-byte character. Non-strict
    mode lets tiktoken substitute U+FFFD instead.
    """

    def __init__(
        self,
        encoding_name: str = "o200k_base",
        strict: bool = True,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._encoding = tiktoken.get_encoding(encoding_name)
        self._strict = strict
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized TiktokenTokenizer with encoding=%s, strict=%s",
            encoding_name,
            strict,
        )

    def encode(self, text: str) -> list[int]:
        # Special-token text in the input is treated as plain text
        tokens = self._encoding.encode_ordinary(text)
        self.metrics_hook.increment(names.TOKENIZER_TOKENS_ENCODED, len(tokens))
        return tokens

    def decode(self, tokens: Sequence[int]) -> str:
        if not tokens:
            return ""
        try:
            if not self._strict:
                return self._encoding.decode(list(tokens), errors="replace")
            return self._encoding.decode_bytes(list(tokens)).decode("utf-8")
        except (KeyError, ValueError) as e:
            raise DecodeError(f"Cannot decode {len(tokens)} tokens: {e}") from e
