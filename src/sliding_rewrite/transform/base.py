# src/sliding_rewrite/transform/base.py

from typing import Protocol


class Transformer(Protocol):
    async def transform(self, context: str, content: str, suffix: str) -> str:
        """Rewrite `content`, using `context` and `suffix` for continuity only.

        Raises:
            TransformationError: On any failure, including an empty response.
        """
        ...
