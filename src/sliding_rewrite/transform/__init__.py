from .base import Transformer
from .llm import LLMTransformer, frame_windows

__all__ = [
    "LLMTransformer",
    "Transformer",
    "frame_windows",
]
