"""S-expression queries over document metadata."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

__all__ = ["QueryError", "Query", "Contains", "Not", "And", "Or", "Xor", "parse_query"]

_SPACE = " \t\r\n"
_INTEGER = re.compile(r"[+-]?[0-9]+")
_ESCAPES = {"\\": "\\", "n": "\n", "r": "\r", "t": "\t"}


class QueryError(ValueError):
    """Raised when a query cannot be parsed."""

    def __init__(self, message: str, remaining: str) -> None:
        super().__init__(message)
        self.remaining = remaining


def _value_contains(value: Any, needle: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return needle in ("true", "false") and (needle == "true") == value
    if isinstance(value, int):
        return _INTEGER.fullmatch(needle) is not None and int(needle) == value
    if isinstance(value, str):
        return value == needle
    if isinstance(value, (list, tuple)):
        return any(_value_contains(item, needle) for item in value)
    if isinstance(value, dict):
        return any(
            _value_contains(k, needle) or _value_contains(v, needle) for k, v in value.items()
        )
    return str(value) == needle


class Query(ABC):
    """A predicate over a document's metadata."""

    @abstractmethod
    def matches(self, document: Any) -> bool:
        """Whether ``document`` satisfies this query."""


@dataclass(frozen=True)
class Contains(Query):
    key: str
    value: str

    def matches(self, document: Any) -> bool:
        return _value_contains(document.get_metadata(self.key), self.value)


@dataclass(frozen=True)
class Not(Query):
    inner: Query

    def matches(self, document: Any) -> bool:
        return not self.inner.matches(document)


@dataclass(frozen=True)
class And(Query):
    left: Query
    right: Query

    def matches(self, document: Any) -> bool:
        return self.left.matches(document) and self.right.matches(document)


@dataclass(frozen=True)
class Or(Query):
    left: Query
    right: Query

    def matches(self, document: Any) -> bool:
        return self.left.matches(document) or self.right.matches(document)


@dataclass(frozen=True)
class Xor(Query):
    left: Query
    right: Query

    def matches(self, document: Any) -> bool:
        return self.left.matches(document) != self.right.matches(document)


_BINARY = {"and": And, "or": Or, "xor": Xor}


class _Backtrack(Exception):
    """A recoverable parse failure: the caller may try another alternative."""


def _is_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in "\x1c\x1d\x1e\x1f"


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def rest(self) -> str:
        return self.text[self.pos:]

    def space0(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _SPACE:
            self.pos += 1

    def space1(self) -> None:
        start = self.pos
        self.space0()
        if self.pos == start:
            raise _Backtrack

    def literal(self, word: str) -> None:
        if not self.text.startswith(word, self.pos):
            raise _Backtrack
        self.pos += len(word)

    def query(self) -> Query:
        self.space0()
        start = self.pos
        for name in ("contains", "not", "and", "or", "xor"):
            self.pos = start
            try:
                return self.s_expression(name)
            except _Backtrack:
                continue
        self.pos = start
        raise _Backtrack

    def s_expression(self, name: str) -> Query:
        self.space0()
        self.literal("(")
        self.space0()
        self.literal(name)
        self.space1()
        try:
            result = self.body(name)
        except _Backtrack:
            raise QueryError(f"malformed `{name}` expression", self.rest) from None
        self.space0()
        try:
            self.literal(")")
        except _Backtrack:
            raise QueryError("expected closing paren", self.rest) from None
        return result

    def body(self, name: str) -> Query:
        if name == "contains":
            key = self.atom()
            self.space1()
            return Contains(key, self.atom())
        if name == "not":
            return Not(self.query())
        left = self.query()
        self.space1()
        return _BINARY[name](left, self.query())

    def atom(self) -> str:
        self.space0()
        start = self.pos
        for quote in ('"', "'"):
            try:
                return self.quoted(quote)
            except _Backtrack:
                self.pos = start
        return self.bare()

    def quoted(self, quote: str) -> str:
        self.literal(quote)
        escapes = {**_ESCAPES, quote: quote}
        parts: list[str] = []
        text = self.text
        while self.pos < len(text) and text[self.pos] != quote:
            if text[self.pos] == "\\":
                escaped = text[self.pos + 1 : self.pos + 2]
                if escaped not in escapes:
                    raise _Backtrack
                parts.append(escapes[escaped])
                self.pos += 2
                continue
            end = self.pos
            while end < len(text) and text[end] not in (quote, "\\"):
                end += 1
            parts.append(text[self.pos:end])
            self.pos = end
        self.literal(quote)
        return "".join(parts)

    def bare(self) -> str:
        start = self.pos
        text = self.text
        while self.pos < len(text) and not _is_whitespace(text[self.pos]) and text[self.pos] not in "()":
            self.pos += 1
        if self.pos == start:
            raise _Backtrack
        return text[start:self.pos]


def parse_query(text: str) -> Query:
    """Parse a query such as ``(and (contains tags rust) (not (contains draft true)))``."""
    parser = _Parser(text)
    try:
        result = parser.query()
    except _Backtrack:
        raise QueryError("expected a query expression", text) from None
    if parser.rest.strip():
        raise QueryError(f"unexpected trailing input {parser.rest!r}", parser.rest)
    return result