"""In-memory inverted index built from a JSON-Lines corpus.

Each line of the corpus is one document: a JSON object with a ``text``
field and any number of metadata fields (``docno``, ``title``, ...).
Documents receive integer ids in file order, starting at 0.
"""

from __future__ import annotations

import json
import logging
import re
from collections import Counter, defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from iquery.engine.schemas import CollectionStatistics
from iquery.errors import EngineLoadFailure

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"[a-z0-9]+")
TEXT_FIELD = "text"


def tokenize(text: str) -> list[str]:
    """Lower-case and split text into alphanumeric tokens."""
    return TOKEN_RE.findall(text.lower())


@dataclass(frozen=True)
class PostingList:
    """Documents containing a term, with in-document frequencies."""

    doc_ids: np.ndarray
    frequencies: np.ndarray

    @property
    def document_frequency(self) -> int:
        return int(self.doc_ids.size)

    @property
    def term_frequency(self) -> int:
        return int(self.frequencies.sum())


def iter_documents(path: str | Path) -> Iterator[dict[str, Any]]:
    """Yield corpus documents, skipping blank lines.

    Raises:
        EngineLoadFailure: if the file is missing or a line is not a JSON object.
    """
    p = Path(path)
    try:
        with open(p, encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                if not line.strip():
                    continue
                try:
                    doc = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise EngineLoadFailure(f"{p}:{lineno}: invalid JSON ({exc.msg})") from exc
                if not isinstance(doc, dict):
                    raise EngineLoadFailure(f"{p}:{lineno}: expected a JSON object")
                yield doc
    except OSError as exc:
        raise EngineLoadFailure(f"Cannot read corpus {p}: {exc}") from exc


def read_statistics(path: str | Path) -> CollectionStatistics:
    """Read collection statistics without building postings or metadata."""
    num_docs = 0
    num_tokens = 0
    vocabulary: set[str] = set()
    for doc in iter_documents(path):
        tokens = tokenize(str(doc.get(TEXT_FIELD, "")))
        num_docs += 1
        num_tokens += len(tokens)
        vocabulary.update(tokens)
    return CollectionStatistics(
        number_of_documents=num_docs,
        number_of_tokens=num_tokens,
        number_of_unique_terms=len(vocabulary),
    )


class InvertedIndex:
    """Postings, document lengths and a metadata table held in memory."""

    def __init__(
        self,
        postings: dict[str, PostingList],
        doc_lengths: np.ndarray,
        meta: dict[str, list[str]],
    ):
        self._postings = postings
        self.doc_lengths = doc_lengths
        self._meta = meta
        self.statistics = CollectionStatistics(
            number_of_documents=int(doc_lengths.size),
            number_of_tokens=int(doc_lengths.sum()),
            number_of_unique_terms=len(postings),
        )

    @classmethod
    def from_documents(cls, documents: Iterable[dict[str, Any]]) -> InvertedIndex:
        """Index an iterable of document dicts."""
        raw_postings: dict[str, tuple[list[int], list[int]]] = defaultdict(lambda: ([], []))
        lengths: list[int] = []
        rows: list[dict[str, str]] = []

        for doc_id, doc in enumerate(documents):
            tokens = tokenize(str(doc.get(TEXT_FIELD, "")))
            lengths.append(len(tokens))
            for term, tf in Counter(tokens).items():
                ids, tfs = raw_postings[term]
                ids.append(doc_id)
                tfs.append(tf)
            rows.append({k: str(v) for k, v in doc.items() if k != TEXT_FIELD})

        keys = sorted({k for row in rows for k in row})
        meta = {key: [row.get(key, "") for row in rows] for key in keys}
        postings = {
            term: PostingList(
                doc_ids=np.array(ids, dtype=np.int64),
                frequencies=np.array(tfs, dtype=np.int64),
            )
            for term, (ids, tfs) in raw_postings.items()
        }
        return cls(postings, np.array(lengths, dtype=np.int64), meta)

    @classmethod
    def load(cls, path: str | Path) -> InvertedIndex:
        """Build the index from a JSON-Lines corpus file.

        Raises:
            EngineLoadFailure: if the corpus cannot be read.
        """
        index = cls.from_documents(iter_documents(path))
        logger.info(
            "Indexed %s: %d documents, %d terms",
            path,
            index.statistics.number_of_documents,
            index.statistics.number_of_unique_terms,
        )
        return index

    def get_postings(self, term: str) -> PostingList | None:
        return self._postings.get(term)

    def meta_keys(self) -> list[str]:
        return list(self._meta)

    def get_items(self, key: str, doc_ids: Iterable[int]) -> list[str]:
        """Return the ``key`` metadata value of each document.

        Raises:
            KeyError: if no document carries ``key``.
        """
        column = self._meta[key]
        return [column[d] for d in doc_ids]

    def close(self) -> None:
        self._postings.clear()
        self._meta.clear()
