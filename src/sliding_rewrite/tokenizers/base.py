# src/sliding_rewrite/tokenizers/base.py

from collections.abc import Sequence
from typing import Protocol


class Tokenizer(Protocol):
    """Protocol for text <-> token adapters.

    Both operations are pure. `decode` raises DecodeError when a token slice
    does not map back to valid text.
    """

    def encode(self, text: str) -> list[int]: ...

    def decode(self, tokens: Sequence[int]) -> str: ...
