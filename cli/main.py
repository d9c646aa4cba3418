"""CLI entry point — Typer app for interactive querying.

Usage:
    iquery                                   # interactive, with prompt
    iquery --noverbose                       # interactive, no prompt
    iquery -r information retrieval, search engines
    iquery -C search engines -c 2.5
    iquery -Dinteractive.model=BM25 -Dterrier.index.path=corpus.jsonl -r query

Raw tokens are handed to ``iquery.arguments.parse_args``; the grammar
(``-D<key>=<value>``, ``-c2.5``, multi-word queries) is not Click's.
"""

from __future__ import annotations

import logging
import sys

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

app = typer.Typer(
    name="iquery",
    help="Retrieve or count documents from the command line, or query interactively.",
    add_completion=False,
)

err_console = Console(stderr=True)
logger = logging.getLogger("iquery.cli")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def main(ctx: typer.Context) -> None:
    """Retrieve (-r), count (-C) or query interactively.

    \b
    -D<key>=<value>           set a property
    -r|--retrieve <query...>  retrieve comma-separated queries
    -C|--count <query...>     count comma-separated queries
    -c<value> | -c <value>    tuning parameter (default 1.0)
    --noverbose               interactive mode without prompt
    --nonverbose              no prompt, error-level logging only
    """
    from iquery.arguments.parser import parse_args
    from iquery.arguments.schemas import RunMode
    from iquery.config import apply_properties, load_settings
    from iquery.engine.factory import get_query_engine
    from iquery.errors import EngineLoadFailure
    from iquery.pipeline.driver import PipelineDriver
    from iquery.session.batch import run_batch
    from iquery.session.interactive import InteractiveSession
    from iquery.session.lifecycle import engine_session

    _configure_logging()
    config = parse_args(ctx.args)
    logging.getLogger("iquery").setLevel(logging.ERROR if config.quiet_logging else logging.NOTSET)

    try:
        settings = apply_properties(load_settings(), config.property_overrides)
    except ValidationError as exc:
        err_console.print(f"[bold red]Invalid property:[/] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    try:
        engine = get_query_engine(
            settings.index.engine,
            index_path=settings.index.path,
            retrieved_set_size=settings.querying.retrieved_set_size,
            embedded_meta_keys=settings.index.embedded_meta_keys,
            stopwords=settings.querying.stopwords,
        )
    except (EngineLoadFailure, ValueError) as exc:
        logger.critical("Failed to load index. Perhaps index files are missing: %s", exc)
        raise typer.Exit(code=1) from exc

    with engine_session(engine):
        driver = PipelineDriver(engine, settings=settings, sink=sys.stdout)
        if config.mode is RunMode.INTERACTIVE:
            session = InteractiveSession(
                driver,
                verbose=config.verbose,
                lowercase=settings.querying.lowercase,
            )
            session.run(config.tuning_parameter)
        else:
            run_batch(driver, config)


if __name__ == "__main__":
    app()
