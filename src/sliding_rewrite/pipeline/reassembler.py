# src/sliding_rewrite/pipeline/reassembler.py

import logging
from collections.abc import Iterable

from .outcome import ChunkOutcome

logger = logging.getLogger(__name__)


def assemble(outcomes: Iterable[ChunkOutcome]) -> str:
    """Concatenate successful outcomes in index order.

    No separator is inserted. Failed chunks are skipped, so the result may be
    shorter than the input; callers that need completeness should inspect the
    outcomes (see RewriteResult.require_complete).
    """
    parts = []
    for outcome in sorted(outcomes, key=lambda o: o.index):
        if outcome.text is None:
            logger.debug("Skipping failed chunk %d", outcome.index)
            continue
        parts.append(outcome.text)
    return "".join(parts)
