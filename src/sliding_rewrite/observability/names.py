# src/sliding_rewrite/observability/names.py

"""Standard metric names for sliding-rewrite observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
Units are handled by the metrics backend (e.g., converted to seconds in Prometheus).
"""

# ============================================================================
# LLM Metrics
# ============================================================================

# Duration
LLM_COMPLETION_DURATION = "llm_completion_duration"

# Counters
LLM_REQUESTS_TOTAL = "llm_requests_total"

# Counters (token usage - monotonic over time for cost/rate tracking)
LLM_TOKENS_PROMPT = "llm_tokens_prompt"
LLM_TOKENS_COMPLETION = "llm_tokens_completion"
LLM_TOKENS_TOTAL = "llm_tokens_total"


# ============================================================================
# Tokenizer Metrics
# ============================================================================

# Counters
TOKENIZER_TOKENS_ENCODED = "tokenizer_tokens_encoded"


# ============================================================================
# Planning Metrics
# ============================================================================

# Duration
PLANNING_DURATION = "planning_duration"

# Counters
PLANNING_CHUNKS_PLANNED = "planning_chunks_planned"


# ============================================================================
# Dispatch Metrics
# ============================================================================

# Duration
DISPATCH_DURATION = "dispatch_duration"
CHUNK_TRANSFORM_DURATION = "chunk_transform_duration"

# Counters
CHUNKS_SUCCEEDED_TOTAL = "chunks_succeeded_total"
CHUNKS_FAILED_TOTAL = "chunks_failed_total"

# Gauges
DISPATCH_CONCURRENCY = "dispatch_concurrency"
