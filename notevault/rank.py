"""PageRank over the links between documents."""

from __future__ import annotations

import os
from typing import Sequence

from notevault.document import Document

__all__ = ["rank"]

DAMPING = 0.85


def rank(
    docs: Sequence[Document], base_path: os.PathLike | str, num_iter: int, tol: float
) -> list[float]:
    """PageRank score of each document, in the order given.

    PR(A) = (1 - d) / N + d * (sum of PR(T) / C(T) over pages T linking to A),
    with the mass of pages without outgoing links spread evenly over all pages.
    Iteration stops after ``num_iter`` rounds or once the total change is below ``tol``.
    """
    docs = list(docs)
    num_docs = len(docs)
    if num_docs == 0:
        return []

    teleport = (1.0 - DAMPING) / num_docs
    index = {doc.path: i for i, doc in enumerate(docs)}
    inbound: list[list[int]] = [[] for _ in docs]
    outdeg = [0] * num_docs

    for src, doc in enumerate(docs):
        for link in doc.links:
            target = link.to_markdown_path(base_path)
            dst = index.get(target) if target is not None else None
            if dst is not None:
                inbound[dst].append(src)
                outdeg[src] += 1

    scores = [1.0 / num_docs] * num_docs
    for _ in range(num_iter):
        dangling_mass = sum(score for score, degree in zip(scores, outdeg) if degree == 0)
        base = teleport + DAMPING * dangling_mass / num_docs
        following = [
            base + DAMPING * sum(scores[src] / outdeg[src] for src in sources)
            for sources in inbound
        ]
        delta = sum(abs(old - new) for old, new in zip(scores, following))
        scores = following
        if delta < tol:
            break
    return scores