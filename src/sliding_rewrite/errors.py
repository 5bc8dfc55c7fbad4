# src/sliding_rewrite/errors.py

"""Exception hierarchy for sliding-rewrite.

Configuration errors are raised before any work starts. Decode and
transformation errors are scoped to a single chunk and are absorbed by the
dispatcher into a failed ChunkOutcome.
"""


class SlidingRewriteError(Exception):
    """Base class for all sliding-rewrite errors."""


class ConfigurationError(SlidingRewriteError, ValueError):
    """Invalid window configuration or planning input. Fatal, raised up front."""


class DecodeError(SlidingRewriteError):
    """A token slice could not be decoded to text."""


class TransformationError(SlidingRewriteError):
    """The transformation service failed or returned nothing usable."""


class IncompleteDocumentError(SlidingRewriteError):
    """Raised on request when one or more chunks failed."""

    def __init__(self, failed_indices: list[int], total_chunks: int) -> None:
        self.failed_indices = failed_indices
        self.total_chunks = total_chunks
        super().__init__(
            f"{len(failed_indices)} of {total_chunks} chunks failed: {failed_indices}"
        )
