"""Tests for result formatting."""

from __future__ import annotations

import io

import pytest

from iquery.engine.schemas import RankedResultSet
from iquery.errors import FormattingIOError
from iquery.pipeline.formatter import header_line, iter_rows, print_results, resolve_metadata
from iquery.pipeline.schemas import MetadataTable, OutputRow


class BrokenSink(io.StringIO):
    def write(self, s: str) -> int:
        raise OSError("disk full")


class TestOutputRow:
    def test_render(self):
        row = OutputRow(position=1, metadata_values=("d20", "Title"), doc_id=20, score=5.2)
        assert row.render() == "1 d20 Title 20 5.2"

    def test_render_without_metadata(self):
        assert OutputRow(0, (), 7, 1.0).render() == "0 7 1.0"

    def test_render_small_score_uses_float_repr(self):
        assert OutputRow(3, (), 7, 0.00001).render() == "3 7 1e-05"


class TestResolveMetadata:
    def test_embedded_preferred(self, sample_result_set: RankedResultSet):
        calls = []

        def lookup(key, ids):
            calls.append(key)
            return ["x"] * len(ids)

        table = resolve_metadata(sample_result_set, ["docno", "title"], lookup)
        assert table.rows["docno"] == ["d10", "d20", "d30"]
        assert table.rows["title"] == ["x", "x", "x"]
        assert calls == ["title"]

    def test_lookup_gets_full_docid_list(self):
        rs = RankedResultSet(doc_ids=list(range(5)), scores=[1.0] * 5)
        seen = []

        def lookup(key, ids):
            seen.append(list(ids))
            return [str(i) for i in ids]

        print_results(io.StringIO(), rs, ["docno"], max_rows=2, lookup=lookup)
        assert seen == [[0, 1, 2, 3, 4]]

    def test_no_source(self, sample_result_set: RankedResultSet):
        with pytest.raises(LookupError):
            resolve_metadata(sample_result_set, ["title"])

    def test_values_at(self):
        table = MetadataTable(rows={"a": ["1", "2"], "b": ["x", "y"]})
        assert table.values_at(1) == ["2", "y"]


class TestPrintResults:
    def test_documented_example(self, sample_result_set: RankedResultSet):
        sink = io.StringIO()
        written = print_results(sink, sample_result_set, ["docno"], max_rows=1000)
        assert written == 2
        assert sink.getvalue() == (
            "\nOUTPUT - Displaying 1-3 results\n"
            "1 d20 20 5.2\n"
            "2 d30 30 3.1\n"
            "\n"
        )

    def test_no_results(self):
        sink = io.StringIO()
        print_results(sink, RankedResultSet(), ["docno"])
        assert sink.getvalue() == "\nOUTPUT - No results\n\n"

    def test_header_uses_full_size(self):
        rs = RankedResultSet(doc_ids=[1, 2, 3], scores=[3.0, 2.0, 1.0])
        assert header_line(rs) == "\nOUTPUT - Displaying 1-3 results\n"

    def test_max_rows_bound(self):
        rs = RankedResultSet(doc_ids=list(range(10)), scores=[float(10 - i) for i in range(10)])
        sink = io.StringIO()
        written = print_results(sink, rs, [], max_rows=4)
        assert written == 4
        body = sink.getvalue().strip().splitlines()[1:]
        assert [int(line.split()[0]) for line in body] == [0, 1, 2, 3]

    def test_rows_positive_increasing(self):
        scores = [2.0, -1.0, 0.5, 0.0, 4.0, 1.5]
        rs = RankedResultSet(doc_ids=list(range(6)), scores=scores)
        table = MetadataTable()
        rows = list(iter_rows(rs, table, max_rows=5))
        positions = [r.position for r in rows]
        assert positions == [0, 2, 4]
        assert all(r.score > 0 for r in rows)
        assert max(positions) <= min(rs.size, 5) - 1

    def test_structural_order_not_sorted(self):
        rs = RankedResultSet(doc_ids=[5, 6], scores=[1.0, 9.0])
        rows = list(iter_rows(rs, MetadataTable(), max_rows=10))
        assert [r.doc_id for r in rows] == [5, 6]

    def test_multiple_meta_keys(self):
        rs = RankedResultSet(
            doc_ids=[1],
            scores=[2.5],
            embedded_metadata={"docno": ["D1"], "title": ["T1"]},
        )
        sink = io.StringIO()
        print_results(sink, rs, ["title", "docno"])
        assert "0 T1 D1 1 2.5\n" in sink.getvalue()

    def test_write_failure(self, sample_result_set: RankedResultSet):
        with pytest.raises(FormattingIOError):
            print_results(BrokenSink(), sample_result_set, ["docno"])

    def test_nan_scores_skipped(self):
        rs = RankedResultSet(doc_ids=[0, 1, 2], scores=[float("nan"), 1.5, float("nan")])
        rows = list(iter_rows(rs, MetadataTable()))
        assert [r.position for r in rows] == [1]

    def test_empty_listing_resolves_no_metadata(self):
        def lookup(key, ids):
            raise LookupError(key)

        sink = io.StringIO()
        assert print_results(sink, RankedResultSet(), ["docno"], lookup=lookup) == 0
        assert sink.getvalue() == "\nOUTPUT - No results\n\n"
