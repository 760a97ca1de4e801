"""A vault: the Markdown notes found in one directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from tabulate import tabulate

from notevault.document import Document, ParseError
from notevault.mdpath import MarkdownPath
from notevault.query import Query
from notevault.search import Corpus

__all__ = ["VaultError", "Vault"]


class VaultError(Exception):
    """Raised when the vault directory cannot be read."""

    def __init__(self, path: os.PathLike | str, reason: str) -> None:
        super().__init__(f"the directory `{path}` cannot be opened because {reason}")
        self.path = Path(path)
        self.reason = reason


def _load_documents(base_path: Path) -> dict[MarkdownPath, Document]:
    try:
        with os.scandir(base_path) as entries:
            candidates = [entry.path for entry in entries]
    except OSError as exc:
        raise VaultError(base_path, str(exc)) from exc

    documents: dict[MarkdownPath, Document] = {}
    for candidate in candidates:
        # A file that cannot be read as a note must not block the rest of the vault.
        try:
            document = Document.load(base_path, candidate)
        except ParseError:
            continue
        documents[document.path] = document
    return dict(sorted(documents.items()))


class Vault:
    """A collection of notes together with their search statistics."""

    def __init__(self, base_path: os.PathLike | str) -> None:
        self.path = Path(base_path)
        self._documents = _load_documents(self.path)
        self.corpus = Corpus(doc.stripped() for doc in self._documents.values())

    def documents(self) -> list[Document]:
        """All documents of the vault, ordered by path."""
        return list(self._documents.values())

    def get_document(self, path: MarkdownPath) -> Document | None:
        return self._documents.get(path)

    def search(self, query: str) -> dict[Document, float]:
        """BM25 score of every document for ``query``."""
        return {
            doc: self.corpus.score(query, doc.stripped()) for doc in self._documents.values()
        }

    def find_backlinks(self, path: MarkdownPath) -> list[MarkdownPath]:
        """Paths of the documents that link to ``path``."""
        return [doc.path for doc in self._documents.values() if doc.has_link_to(path)]

    def query(self, query: Query) -> list[Document]:
        """Documents whose metadata satisfies ``query``."""
        return [doc for doc in self._documents.values() if query.matches(doc)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "documents": {
                str(path.path): doc.to_dict() for path, doc in self._documents.items()
            },
            "corpus": self.corpus.to_dict(),
        }

    def __str__(self) -> str:
        heading = f"\x1b[1m\x1b[4m{self.path}\x1b[24m\x1b[22m"
        table = tabulate(
            [[str(doc)] for doc in self._documents.values()],
            headers=["String"],
            tablefmt="rounded_outline",
            disable_numparse=True,
        )
        return f"{heading}\n{table}\n        "