"""Markdown documents: their links, YAML frontmatter and plain text."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from itertools import pairwise
from pathlib import Path
from typing import Any, Iterable, Iterator

import yaml
from markdown_it import MarkdownIt
from markdown_it.token import Token
from tabulate import tabulate

from notevault.link import Link
from notevault.mdpath import MarkdownPath, PathError

__all__ = ["ParseError", "KeyIsNotStringError", "Document", "value_contains", "format_value"]

_INTEGER = re.compile(r"[+-]?[0-9]+")
_BOOL_TAG = "tag:yaml.org,2002:bool"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_SKIPPED_BLOCKS = frozenset({"image", "codeblock"})


class ParseError(Exception):
    """Raised when a document cannot be read or understood."""

    def __init__(self, message: str, path: os.PathLike | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class KeyIsNotStringError(ParseError):
    """A frontmatter key was not a string."""

    def __init__(self, key: Any) -> None:
        super().__init__(
            f"the key of the YAML frontmatter must be a string. `{key!r}` was received instead"
        )
        self.key = key


class _Real(str):
    """A YAML float kept as the text it was written with."""


class _FrontmatterLoader(yaml.SafeLoader):
    """Safe YAML loader that keeps dates as text, floats as written and only true/false as booleans."""


_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (_BOOL_TAG, _TIMESTAMP_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_FrontmatterLoader.add_implicit_resolver(_BOOL_TAG, re.compile(r"^(?:true|false)$"), list("tf"))
_FrontmatterLoader.add_constructor(
    _FLOAT_TAG, lambda loader, node: _Real(loader.construct_scalar(node))
)


class _RawLinkParser(MarkdownIt):
    """Markdown parser that leaves link destinations exactly as written."""

    # Destinations are kept verbatim instead of being percent-encoded.
    normalizeLink = staticmethod(str)  # noqa: N815

    def validateLink(self, url: str) -> bool:  # noqa: N802
        """Accept every destination whatever its scheme; only text destinations exist."""
        return isinstance(url, str)


# Reference definitions are disabled so only inline links produce link tokens.
_LINK_PARSER = _RawLinkParser("commonmark").disable("reference")
_TEXT_PARSER = MarkdownIt("commonmark")


def value_contains(value: Any, needle: str) -> bool:
    """Whether a metadata value equals ``needle`` or holds an item that does."""
    if value is None:
        return False
    if isinstance(value, bool):
        return needle in ("true", "false") and (needle == "true") == value
    if isinstance(value, int):
        return _INTEGER.fullmatch(needle) is not None and int(needle) == value
    if isinstance(value, str):
        return value == needle
    if isinstance(value, (list, tuple)):
        return any(value_contains(item, needle) for item in value)
    if isinstance(value, dict):
        return any(value_contains(k, needle) or value_contains(v, needle) for k, v in value.items())
    return str(value) == needle


def _table(rows: Iterable[Iterable[str]], headers: list[str]) -> str:
    return tabulate(
        [list(row) for row in rows],
        headers=headers,
        tablefmt="rounded_outline",
        disable_numparse=True,
    )


def format_value(value: Any) -> str:
    """Render a metadata value for the terminal; collections become tables."""
    if value is None:
        return "\x1b[2mnull\x1b[0m"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return str(value)
    if isinstance(value, (list, tuple)):
        return _table(([format_value(item)] for item in value), ["String"])
    if isinstance(value, dict):
        rows = sorted((format_value(k), format_value(v)) for k, v in value.items())
        return _table(rows, ["String", "String"])
    return str(value)


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            (str(k) if isinstance(k, str) else format_value(k)): _plain(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if value is None or isinstance(value, (bool, int, float)) and not isinstance(value, _Real):
        return value
    return str(value)


@dataclass(frozen=True)
class _Event:
    kind: str
    tag: str = ""
    text: str = ""
    href: str | None = None


def _inline_events(children: Iterable[Token]) -> Iterator[_Event]:
    for child in children:
        kind = child.type
        if kind in ("text", "text_special"):
            yield _Event("text", text=child.content)
        elif kind == "softbreak":
            yield _Event("softbreak")
        elif kind == "hardbreak":
            yield _Event("hardbreak")
        elif kind == "image":
            yield _Event("start", "image")
            yield from _inline_events(child.children or [])
            yield _Event("end", "image")
        elif kind == "link_open":
            href = None if child.markup == "autolink" else child.attrGet("href")
            yield _Event("start", "link", href=None if href is None else str(href))
        elif child.nesting == 1:
            yield _Event("start", kind.removesuffix("_open"))
        elif child.nesting == -1:
            yield _Event("end", kind.removesuffix("_close"))
        else:
            yield _Event("other", kind)


def _block_events(tokens: Iterable[Token]) -> Iterator[_Event]:
    for token in tokens:
        kind = token.type
        if kind == "inline":
            yield from _inline_events(token.children or [])
        elif kind in ("fence", "code_block"):
            yield _Event("start", "codeblock")
            yield _Event("text", text=token.content)
            yield _Event("end", "codeblock")
        elif kind == "hr":
            yield _Event("rule")
        elif token.nesting == 1:
            yield _Event("start", kind.removesuffix("_open"))
        elif token.nesting == -1:
            yield _Event("end", kind.removesuffix("_close"))
        else:
            yield _Event("other", kind)


def _merged(events: Iterable[_Event]) -> Iterator[_Event]:
    """Join runs of adjacent text events into one."""
    pending: list[str] = []
    for event in events:
        if event.kind == "text":
            pending.append(event.text)
            continue
        if pending:
            text = "".join(pending)
            pending = []
            if text:
                yield _Event("text", text=text)
        yield event
    text = "".join(pending)
    if text:
        yield _Event("text", text=text)


def _events(parser: MarkdownIt, text: str) -> list[_Event]:
    return list(_merged(_block_events(parser.parse(text))))


def _split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split a leading ``---`` metadata block from the body, if there is one."""
    lines = text.split("\n")
    if len(lines) < 2 or lines[0].rstrip() != "---" or not lines[1].strip():
        return None, text
    for end, line in enumerate(lines[1:], start=1):
        if line.rstrip() in ("---", "..."):
            return "\n".join(lines[1:end]), "\n".join(lines[end + 1 :])
    return None, text


def _read(path: MarkdownPath) -> str:
    try:
        return path.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"failed to read file `{path.path}` because {exc}", path.path) from exc


@dataclass
class Document:
    """A single Markdown document."""

    path: MarkdownPath
    links: list[Link] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __hash__(self) -> int:
        return hash((self.path, tuple(self.links)))

    @classmethod
    def load(cls, base_path: os.PathLike | str, path: os.PathLike | str) -> Document:
        """Read the document at ``path`` relative to ``base_path``."""
        try:
            md_path = MarkdownPath.resolve(base_path, path)
        except PathError as exc:
            joined = Path(base_path) / Path(path)
            raise ParseError(f"the path `{joined}` is invalid because {exc}", joined) from exc

        document = cls(md_path)
        frontmatter, body = _split_frontmatter(_read(md_path))
        if frontmatter is not None and frontmatter.strip():
            document._load_frontmatter(frontmatter)

        for event, following in pairwise(_events(_LINK_PARSER, body)):
            if (
                event.kind == "start"
                and event.tag == "link"
                and event.href is not None
                and following.kind == "text"
            ):
                document.insert_link(Link(following.text, event.href))
        return document

    def _load_frontmatter(self, text: str) -> None:
        where = self.path.path
        try:
            roots = list(yaml.load_all(text, Loader=_FrontmatterLoader))
        except yaml.YAMLError as exc:
            raise ParseError(
                f"the frontmatter for the document `{where}` cannot be parsed because {exc}", where
            ) from exc
        if not roots:
            raise ParseError(
                f"the frontmatter for the document `{where}` cannot be parsed because "
                "Cannot get the root of the frontmatter",
                where,
            )
        root = roots[0]
        if not isinstance(root, dict):
            raise ParseError(
                f"the frontmatter for the document `{where}` cannot be parsed because "
                "Top-level is not a mapping",
                where,
            )
        for key, value in root.items():
            try:
                self.insert_metadata(key, value)
            except KeyIsNotStringError:
                continue

    def insert_link(self, link: Link) -> None:
        self.links.append(link)

    def insert_metadata(self, key: Any, value: Any) -> None:
        """Store a frontmatter entry; the key must be a plain string."""
        if type(key) is not str:
            raise KeyIsNotStringError(key)
        self.metadata[key] = value

    def stripped(self) -> str:
        """The document's prose as plain text, without code blocks, images or frontmatter."""
        _, body = _split_frontmatter(_read(self.path))
        events = iter(_events(_TEXT_PARSER, body))
        parts: list[str] = []
        for event in events:
            if event.kind == "text":
                parts.append(f"{event.text} ")
            elif event.kind == "softbreak":
                parts.append(" ")
            elif event.kind in ("hardbreak", "rule"):
                parts.append("\n")
            elif event.kind == "start" and event.tag in _SKIPPED_BLOCKS:
                for inner in events:
                    if inner.kind == "end":
                        break
        return "".join(parts)

    def has_link_to(self, path: MarkdownPath) -> bool:
        return any(link.points_to(path) for link in self.links)

    def get_metadata(self, key: str) -> Any:
        return self.metadata.get(key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path.path),
            "links": [link.to_dict() for link in self.links],
            "metadata": {key: _plain(self.metadata[key]) for key in sorted(self.metadata)},
        }

    def __str__(self) -> str:
        metadata = _table(
            ((key, format_value(self.metadata[key])) for key in sorted(self.metadata)),
            ["key", "value"],
        )
        links = _table(([str(link)] for link in self.links), ["String"])
        return f"{self.path}\n\nMetadata:\n{metadata}\n\nLinks:\n{links}"