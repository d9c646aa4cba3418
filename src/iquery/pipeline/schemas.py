"""Data models for result formatting."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class MetadataTable:
    """Metadata values per key, aligned with result-set positions."""

    rows: dict[str, list[str]] = field(default_factory=dict)

    def values_at(self, position: int) -> list[str]:
        return [values[position] for values in self.rows.values()]


@dataclass(frozen=True)
class OutputRow:
    """One displayed result line."""

    position: int
    metadata_values: tuple[str, ...]
    doc_id: int
    score: float

    def render(self) -> str:
        return " ".join([str(self.position), *self.metadata_values, str(self.doc_id), repr(self.score)])
