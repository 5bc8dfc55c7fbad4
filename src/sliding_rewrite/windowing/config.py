# src/sliding_rewrite/windowing/config.py

from dataclasses import dataclass

from sliding_rewrite.errors import ConfigurationError


@dataclass(frozen=True)
class WindowConfig:
    """Sliding window parameters, measured in tokens.

    Immutable. Validated on construction: a config that exists is usable.

    Attributes:
        context_limit: Tokens the transformation backend accepts in one call.
        overlap_margin: Tokens of context/suffix padding on each side of a chunk.
    """

    context_limit: int
    overlap_margin: int

    def __post_init__(self) -> None:
        for field_name in ("context_limit", "overlap_margin"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"{field_name} must be an int, got {type(value).__name__}"
                )
        if self.context_limit <= 0:
            raise ConfigurationError("context_limit must be > 0")
        if self.overlap_margin < 0:
            raise ConfigurationError("overlap_margin must be >= 0")
        if self.overlap_margin >= self.context_limit:
            raise ConfigurationError(
                "overlap_margin must be < context_limit "
                f"(got overlap_margin={self.overlap_margin}, "
                f"context_limit={self.context_limit})"
            )

    @property
    def chunk_size(self) -> int:
        return self.context_limit - self.overlap_margin
