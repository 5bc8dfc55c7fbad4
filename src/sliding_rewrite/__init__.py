# Errors
from .errors import (
    ConfigurationError,
    DecodeError,
    IncompleteDocumentError,
    SlidingRewriteError,
    TransformationError,
)

# LLMs
from .llms import LLMConfig, create_llm_client

# Observability
from .observability import InMemoryMetricsHook, MetricsHook, NoOpMetricsHook

# Pipeline
from .pipeline import (
    ChunkOutcome,
    Dispatcher,
    RewriteConfig,
    RewritePipeline,
    RewriteResult,
    assemble,
    build_pipeline,
    rewrite_file,
)

# Prompts
from .prompts import Prompt, PromptsLibrary

# Tokenizers
from .tokenizers import TiktokenTokenizer, Tokenizer

# Transform
from .transform import LLMTransformer, Transformer

# Windowing
from .windowing import ChunkDescriptor, TokenRange, WindowConfig, plan_chunks

__all__ = [
    # Errors
    "ConfigurationError",
    "DecodeError",
    "IncompleteDocumentError",
    "SlidingRewriteError",
    "TransformationError",
    # LLMs
    "LLMConfig",
    "create_llm_client",
    # Observability
    "InMemoryMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Pipeline
    "ChunkOutcome",
    "Dispatcher",
    "RewriteConfig",
    "RewritePipeline",
    "RewriteResult",
    "assemble",
    "build_pipeline",
    "rewrite_file",
    # Prompts
    "Prompt",
    "PromptsLibrary",
    # Tokenizers
    "TiktokenTokenizer",
    "Tokenizer",
    # Transform
    "LLMTransformer",
    "Transformer",
    # Windowing
    "ChunkDescriptor",
    "TokenRange",
    "WindowConfig",
    "plan_chunks",
]
