"""Process queries given on the command line."""

from __future__ import annotations

import logging

from iquery.arguments.schemas import RunConfig
from iquery.pipeline.driver import PipelineDriver

logger = logging.getLogger(__name__)

CMDLINE_QUERY_ID = "CMDLINE"


def run_batch(driver: PipelineDriver, config: RunConfig) -> int:
    """Retrieve or count every query in ``config``.

    Retrieve takes precedence when both ``-r`` and ``-C`` were given.

    Returns:
        Number of queries dispatched.
    """
    dispatched = 0
    for query in config.queries:
        logger.info("query : %s", query)
        if config.retrieving:
            driver.process_query(CMDLINE_QUERY_ID, query, config.tuning_parameter)
        elif config.counting:
            driver.count_query(CMDLINE_QUERY_ID, query, config.tuning_parameter)
        else:
            continue
        dispatched += 1
    return dispatched
