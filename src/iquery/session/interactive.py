"""Interactive loop: read queries from standard input until told to stop."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from rich.console import Console

from iquery.pipeline.driver import PipelineDriver

logger = logging.getLogger(__name__)

PROMPT = "Please enter your query: "
STOP_WORDS = frozenset({"quit", "exit"})


class InteractiveSession:
    """Dispatch one query per input line to the pipeline driver."""

    def __init__(
        self,
        driver: PipelineDriver,
        verbose: bool = True,
        lowercase: bool = True,
        stream: TextIO | None = None,
        console: Console | None = None,
    ):
        self.driver = driver
        self.verbose = verbose
        self.lowercase = lowercase
        self._stream = stream
        self._console = console

    def _prompt(self) -> None:
        if not self.verbose:
            return
        console = self._console or Console(file=sys.stdout, highlight=False)
        console.print(PROMPT, end="", markup=False)

    def run(self, c: float = 1.0) -> int:
        """Read and process queries until a blank line, quit/exit or EOF.

        Returns:
            Number of queries dispatched.
        """
        stream = self._stream if self._stream is not None else sys.stdin
        qid = 1
        try:
            self._prompt()
            for line in iter(stream.readline, ""):
                query = line.rstrip("\r\n")
                if not query or query.lower() in STOP_WORDS:
                    break
                if self.lowercase:
                    query = query.lower()
                self.driver.process_query(str(qid), query, c)
                qid += 1
                self._prompt()
        except (OSError, UnicodeDecodeError):
            logger.exception("Input/Output exception while performing the matching")
        return qid - 1
