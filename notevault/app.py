"""Entry point of the ``n`` command."""

from __future__ import annotations

import json
import math
import struct
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence

from tabulate import tabulate

from notevault.cli import Command, UsageError, parse_args
from notevault.document import Document, ParseError, format_value
from notevault.mdpath import MarkdownPath, PathError
from notevault.query import QueryError, parse_query
from notevault.rank import rank
from notevault.vault import Vault, VaultError

__all__ = ["main", "MAX_RESULTS"]

MAX_RESULTS = 10
MAX_ITER = 100_000
TOLERANCE = 0.0000001
# How much the BM25 score counts over the PageRank score.
BM25_WEIGHT = 0.7


@dataclass
class _SearchResult:
    document: Document
    bm25: float
    rank: float
    combined: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "document": self.document.to_dict(),
            "bm25": self.bm25,
            "rank": self.rank,
            "combined": self.combined,
        }


def _as_f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _number(value: float) -> str:
    """Shortest decimal text that reads back as the same single-precision number."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value) or abs(value) > 3.4e38:
        return "inf" if value > 0 else "-inf"
    target = _as_f32(value)
    text = repr(target)
    for digits in range(1, 18):
        candidate = f"{target:.{digits}g}"
        if _as_f32(float(candidate)) == target:
            text = candidate
            break
    return format(Decimal(text), "f")


def _dump(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def _table(rows: list[list[str]], headers: list[str]) -> str:
    return tabulate(rows, headers=headers, tablefmt="rounded_outline", disable_numparse=True)


def _title(document: Document) -> str:
    if "title" not in document.metadata:
        return ""
    return format_value(document.metadata["title"])


def _require_document(vault: Vault, path: MarkdownPath) -> Document:
    document = vault.get_document(path)
    if document is None:
        raise LookupError(f"the document `{path.path}` is not part of the vault")
    return document


def _new(vault: Vault, template: Any, name: str) -> None:
    path = vault.path / f"{name}.md"
    template.write(path)
    print(path)


def _search(vault: Vault, text: str, as_json: bool) -> None:
    scored = [(doc, score) for doc, score in vault.search(text).items() if score > 0]
    ranks = rank([doc for doc, _ in scored], vault.path, MAX_ITER, TOLERANCE)
    results = [
        _SearchResult(doc, bm25, pr, BM25_WEIGHT * bm25 + (1.0 - BM25_WEIGHT) * pr)
        for (doc, bm25), pr in zip(scored, ranks)
    ]
    results.sort(key=lambda result: result.combined, reverse=True)
    del results[MAX_RESULTS:]
    if as_json:
        print(_dump([result.to_dict() for result in results]))
        return
    rows = [
        [_title(r.document), _number(r.bm25), _number(r.rank), _number(r.combined)]
        for r in results
    ]
    print(_table(rows, ["Title", "BM25", "Rank", "Score"]))


def _query(vault: Vault, text: str) -> None:
    for document in vault.query(parse_query(text)):
        if "title" in document.metadata:
            print(format_value(document.metadata["title"]))


def _inspect(vault: Vault, path: str | None, as_json: bool) -> None:
    if path is None:
        print(_dump(vault.to_dict()) if as_json else vault)
        return
    document = _require_document(vault, MarkdownPath.resolve(vault.path, path))
    print(_dump(document.to_dict()) if as_json else document)


def _backlinks(vault: Vault, path: str, as_json: bool) -> None:
    backlinks = vault.find_backlinks(MarkdownPath.resolve(vault.path, path))
    if as_json:
        print(_dump([str(link.path) for link in backlinks]))
    else:
        print(_table([[str(link)] for link in backlinks], ["String"]))


def _links(vault: Vault, path: str, as_json: bool) -> None:
    document = _require_document(vault, MarkdownPath.resolve(vault.path, path))
    if as_json:
        print(_dump([link.to_dict() for link in document.links]))
    else:
        print(repr(document.links))


def _list(vault: Vault, as_json: bool) -> None:
    documents = vault.documents()
    scored = sorted(
        zip(documents, rank(documents, vault.path, MAX_ITER, TOLERANCE)),
        key=lambda pair: pair[1],
        reverse=True,
    )
    if as_json:
        print(_dump([[doc.to_dict(), score] for doc, score in scored]))
    else:
        rows = [[_title(doc), _number(score)] for doc, score in scored]
        print(_table(rows, ["Title", "Score"]))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    try:
        args = parse_args(argv)
        vault = Vault(Path(args.vault_dir))
        if args.command is Command.NEW:
            _new(vault, args.template, args.argument)
        elif args.command is Command.SEARCH:
            _search(vault, args.argument, args.json)
        elif args.command is Command.QUERY:
            _query(vault, args.argument)
        elif args.command is Command.INSPECT:
            _inspect(vault, args.argument, args.json)
        elif args.command is Command.BACKLINKS:
            _backlinks(vault, args.argument, args.json)
        elif args.command is Command.LINKS:
            _links(vault, args.argument, args.json)
        else:
            _list(vault, args.json)
    except (UsageError, VaultError, QueryError, ParseError, PathError, LookupError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())