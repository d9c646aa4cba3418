"""Data models exchanged with a query engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RankedResultSet:
    """Documents returned by the pipeline, in structural position order.

    Position 0 is not necessarily the top score; consumers must not
    re-sort. ``exact_size`` counts every matching document, including
    those cropped away by the retrieved set size.
    """

    doc_ids: list[int] = field(default_factory=list)
    scores: list[float] = field(default_factory=list)
    embedded_metadata: dict[str, list[str]] = field(default_factory=dict)
    exact_size: int = 0

    def __post_init__(self) -> None:
        if len(self.doc_ids) != len(self.scores):
            raise ValueError(
                f"doc_ids and scores differ in length "
                f"({len(self.doc_ids)} != {len(self.scores)})"
            )

    @property
    def size(self) -> int:
        return len(self.doc_ids)

    def has_meta(self, key: str) -> bool:
        return key in self.embedded_metadata

    def get_meta(self, key: str) -> list[str]:
        return self.embedded_metadata[key]

    def crop(self, start: int, end: int) -> RankedResultSet:
        """Keep positions ``start`` to ``end`` (exclusive)."""
        return RankedResultSet(
            doc_ids=self.doc_ids[start:end],
            scores=self.scores[start:end],
            embedded_metadata={k: v[start:end] for k, v in self.embedded_metadata.items()},
            exact_size=self.exact_size,
        )


@dataclass
class QueryContext:
    """A single query travelling through the pipeline."""

    query_id: str
    raw_text: str
    controls: dict[str, str] = field(default_factory=dict)
    matching_model_name: str = ""
    weighting_model_name: str = ""
    # Populated by the engine stages
    terms: dict[str, int] = field(default_factory=dict)
    result_set: RankedResultSet | None = None

    @property
    def tuning_parameter(self) -> float:
        return float(self.controls.get("c", 1.0))


@dataclass(frozen=True)
class CollectionStatistics:
    """Global statistics of an indexed collection."""

    number_of_documents: int = 0
    number_of_tokens: int = 0
    number_of_unique_terms: int = 0

    @property
    def average_document_length(self) -> float:
        if self.number_of_documents == 0:
            return 0.0
        return self.number_of_tokens / self.number_of_documents
