from .config import WindowConfig
from .planner import ChunkDescriptor, TokenRange, count_chunks, plan_chunks

__all__ = [
    "ChunkDescriptor",
    "TokenRange",
    "WindowConfig",
    "count_chunks",
    "plan_chunks",
]
