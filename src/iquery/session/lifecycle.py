"""Engine lifetime: open once, always release."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from iquery.engine.base import QueryEngine
from iquery.errors import IndexCloseError

logger = logging.getLogger(__name__)


@contextmanager
def engine_session(engine: QueryEngine) -> Iterator[QueryEngine]:
    """Yield the engine and close it on exit; close failures are logged."""
    try:
        yield engine
    finally:
        try:
            engine.close()
        except IndexCloseError:
            logger.warning("Problem closing index", exc_info=True)
