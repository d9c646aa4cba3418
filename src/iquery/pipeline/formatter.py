"""Result formatting — resolve metadata and write the results listing.

Output layout::

    <blank>
    OUTPUT - Displaying 1-<size> results
    <position> <meta_1> ... <meta_k> <docid> <score>
    ...
    <blank>
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import TextIO

from iquery.engine.schemas import RankedResultSet
from iquery.errors import FormattingIOError
from iquery.pipeline.schemas import MetadataTable, OutputRow

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 1000

MetadataLookup = Callable[[str, list[int]], list[str]]


def resolve_metadata(
    result_set: RankedResultSet,
    meta_keys: Sequence[str],
    lookup: MetadataLookup | None = None,
) -> MetadataTable:
    """Collect metadata for every key, preferring values embedded in the result set.

    Raises:
        LookupError: if a key is neither embedded nor resolvable via ``lookup``.
    """
    table = MetadataTable()
    for key in meta_keys:
        if result_set.has_meta(key):
            table.rows[key] = result_set.get_meta(key)
        elif lookup is not None:
            table.rows[key] = lookup(key, result_set.doc_ids)
        else:
            raise LookupError(f"No metadata source for key '{key}'")
    return table


def iter_rows(
    result_set: RankedResultSet,
    table: MetadataTable,
    max_rows: int = DEFAULT_MAX_ROWS,
) -> Iterator[OutputRow]:
    """Yield rows for the first ``max_rows`` positions with a positive score."""
    minimum = min(max_rows, result_set.size)
    for i in range(minimum):
        score = result_set.scores[i]
        # also drops NaN
        if not score > 0.0:
            continue
        yield OutputRow(
            position=i,
            metadata_values=tuple(table.values_at(i)),
            doc_id=result_set.doc_ids[i],
            score=score,
        )


def header_line(result_set: RankedResultSet) -> str:
    if result_set.size > 0:
        return f"\nOUTPUT - Displaying 1-{result_set.size} results\n"
    return "\nOUTPUT - No results\n"


def print_results(
    sink: TextIO,
    result_set: RankedResultSet,
    meta_keys: Sequence[str] = ("docno",),
    max_rows: int = DEFAULT_MAX_ROWS,
    lookup: MetadataLookup | None = None,
) -> int:
    """Write the results listing for one query.

    Args:
        sink: Output stream.
        result_set: Ranked documents, displayed in position order.
        meta_keys: Metadata columns shown before the docid.
        max_rows: Maximum number of positions considered.
        lookup: External metadata source for keys not embedded in the set.

    Returns:
        Number of rows written.

    Raises:
        FormattingIOError: if writing to the sink fails.
    """
    if result_set.size == 0:
        table = MetadataTable()
    else:
        table = resolve_metadata(result_set, meta_keys, lookup)
    lines = [row.render() + "\n" for row in iter_rows(result_set, table, max_rows)]

    try:
        sink.write(header_line(result_set))
        sink.write("".join(lines))
        sink.write("\n")
        sink.flush()
    except OSError as exc:
        raise FormattingIOError(f"Problem displaying results: {exc}") from exc

    return len(lines)
