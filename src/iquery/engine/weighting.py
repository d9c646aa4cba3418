"""Weighting models for the in-memory engine.

Each model scores one query term against its posting list, vectorised over
the documents containing it. The ``c`` control is the model's single free
parameter.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np

from iquery.engine.schemas import CollectionStatistics
from iquery.errors import PipelineError

LOG2_E = 1.0 / math.log(2.0)


class WeightingModel(ABC):
    """Interface for term-document scoring functions."""

    default_c: float = 1.0

    def __init__(self, c: float | None = None):
        self.c = self.default_c if c is None else c

    @abstractmethod
    def score(
        self,
        tf: np.ndarray,
        doc_length: np.ndarray,
        document_frequency: int,
        term_frequency: int,
        key_frequency: float,
        statistics: CollectionStatistics,
    ) -> np.ndarray:
        """Score every posting of one term.

        Args:
            tf: In-document frequency per posting.
            doc_length: Length of each posting's document.
            document_frequency: Number of documents containing the term.
            term_frequency: Occurrences of the term in the collection.
            key_frequency: Occurrences of the term in the query.
            statistics: Collection statistics.

        Returns:
            One score per posting.
        """

    @classmethod
    def model_name(cls) -> str:
        return cls.__name__


class PL2(WeightingModel):
    """Poisson model with Laplace after-effect and normalisation 2."""

    def score(self, tf, doc_length, document_frequency, term_frequency, key_frequency, statistics):
        # normalisation 2 is undefined unless 0 < c < inf
        if not 0.0 < self.c < math.inf:
            return np.zeros(len(tf), dtype=np.float64)
        avg = statistics.average_document_length
        tfn =tf * np.log2(1.0 + (self.c * avg) / doc_length)
        norm = 1.0 / (tfn + 1.0)
        f = term_frequency / statistics.number_of_documents
        return norm * key_frequency * (
            tfn * math.log2(1.0 / f)
            + f * LOG2_E
            + 0.5 * np.log2(2.0 * math.pi * tfn)
            + tfn * (np.log2(tfn) - LOG2_E)
        )


class BM25(WeightingModel):
    """Okapi BM25; ``c`` is the length normalisation ``b``."""

    default_c = 0.75
    k1 = 1.2
    k3 = 8.0

    def score(self, tf, doc_length, document_frequency, term_frequency, key_frequency, statistics):
        avg = statistics.average_document_length
        n = statistics.number_of_documents
        big_k = self.k1 * ((1.0 - self.c) + self.c * doc_length / avg)
        idf = math.log2((n - document_frequency + 0.5) / (document_frequency + 0.5))
        qtw = ((self.k3 + 1.0) * key_frequency) / (self.k3 + key_frequency)
        return ((self.k1 + 1.0) * tf / (big_k + tf)) * qtw * idf


class TF_IDF(WeightingModel):  # noqa: N801
    """Robertson tf times idf; ``c`` is the length normalisation ``b``."""

    default_c = 0.75
    k1 = 1.2

    def score(self, tf, doc_length, document_frequency, term_frequency, key_frequency, statistics):
        avg = statistics.average_document_length
        n = statistics.number_of_documents
        robertson_tf = self.k1 * tf / (tf + self.k1 * (1.0 - self.c + self.c * doc_length / avg))
        idf = math.log2(n / document_frequency + 1.0)
        return key_frequency * robertson_tf * idf


_MODELS: dict[str, type[WeightingModel]] = {
    "PL2": PL2,
    "BM25": BM25,
    "TF_IDF": TF_IDF,
}


def get_weighting_model(name: str, c: float | None = None) -> WeightingModel:
    """Instantiate a weighting model by name.

    Fully qualified names (``org.terrier.matching.models.PL2``) resolve by
    their last segment.

    Raises:
        PipelineError: if the name is not a known model.
    """
    short = name.rsplit(".", 1)[-1]
    try:
        cls = _MODELS[short]
    except KeyError:
        raise PipelineError(
            f"Unknown weighting model '{name}'. Available: {sorted(_MODELS)}"
        ) from None
    return cls(c)


def available_models() -> list[str]:
    return list(_MODELS)
