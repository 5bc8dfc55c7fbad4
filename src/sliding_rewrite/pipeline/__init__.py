from .dispatcher import Dispatcher
from .outcome import ChunkOutcome
from .pipeline import (
    RewriteConfig,
    RewritePipeline,
    RewriteResult,
    build_pipeline,
    rewrite_file,
)
from .reassembler import assemble

__all__ = [
    "ChunkOutcome",
    "Dispatcher",
    "RewriteConfig",
    "RewritePipeline",
    "RewriteResult",
    "assemble",
    "build_pipeline",
    "rewrite_file",
]
