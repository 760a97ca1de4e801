"""BM25 scoring over a corpus of plain-text documents."""

from __future__ import annotations

import math
import string
from collections import Counter
from typing import Any, Iterable

__all__ = ["Corpus"]

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _divide(numerator: float, denominator: float) -> float:
    """IEEE-style division: zero denominators give inf or nan instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


class Corpus:
    """Corpus statistics used to compute the BM25 score of a document.

    For query terms q_i the score of document D is the sum over i of
    IDF(q_i) * f(q_i, D) * (K1 + 1) / (f(q_i, D) + K1 * (1 - B + B * |D| / avgdl)).
    """

    K1 = 1.6
    B = 0.75

    def __init__(self, docs: Iterable[str]) -> None:
        self.docs = list(docs)
        num_docs = len(self.docs)
        total_length = sum(len(doc.split()) for doc in self.docs)
        self.avgdl = _divide(float(total_length), float(num_docs))

        document_frequency = Counter(
            term
            for doc in self.docs
            for term in {token.translate(_ASCII_LOWER) for token in doc.split()}
        )
        self.idf = {
            term: math.log((num_docs - count + 0.5 / (count + 0.5)) + 1.0)
            for term, count in document_frequency.items()
        }

    def score(self, query: str, document: str) -> float:
        """BM25 score of ``document`` for ``query``."""
        tokens = document.split()
        ratio = _divide(float(len(tokens)), self.avgdl)
        norm = self.K1 * (1.0 - self.B + self.B * ratio)
        frequencies = Counter(tokens)
        total = 0.0
        for term in query.split():
            frequency = float(frequencies.get(term, 0))
            idf = self.idf.get(term, 0.0)
            total += idf * _divide(frequency * (self.K1 + 1.0), frequency + norm)
        return total

    def to_dict(self) -> dict[str, Any]:
        return {"docs": list(self.docs), "avgdl": self.avgdl, "idf": dict(self.idf)}