from .base import Tokenizer
from .tiktoken import TiktokenTokenizer

__all__ = [
    "TiktokenTokenizer",
    "Tokenizer",
]
