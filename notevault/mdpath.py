"""Paths that are known to point at Markdown files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote

__all__ = [
    "PathError",
    "NotMarkdownError",
    "CanonicalisationError",
    "MarkdownPath",
    "maybe_encode",
]

_MARKDOWN_SUFFIX = ".md"

# Bytes escaped by the URL "fragment" percent-encode set: C0 controls, DEL,
# everything outside ASCII, and a handful of punctuation.
_FRAGMENT_EXTRA = frozenset(b' "<>`')


class PathError(Exception):
    """Raised when a path cannot be turned into a MarkdownPath."""

    def __init__(self, path: os.PathLike | str, message: str) -> None:
        super().__init__(message)
        self.path = Path(path)


class NotMarkdownError(PathError):
    """The path does not carry a ``.md`` extension."""

    def __init__(self, path: os.PathLike | str) -> None:
        super().__init__(path, f"the path `{path}` is not a Markdown file")


class CanonicalisationError(PathError):
    """The path could not be resolved on the file system."""

    def __init__(self, path: os.PathLike | str, reason: str) -> None:
        super().__init__(
            path, f"could not canonicalise the path `{path}` because {reason}"
        )
        self.reason = reason


def _decode(path: os.PathLike | str) -> Path:
    return Path(unquote(os.fspath(path), errors="replace"))


def _is_markdown(path: os.PathLike | str) -> bool:
    return Path(path).suffix == _MARKDOWN_SUFFIX


@dataclass(frozen=True, order=True)
class MarkdownPath:
    """A path that is guaranteed to name a Markdown file."""

    path: Path

    @classmethod
    def resolve(cls, base_path: os.PathLike | str, path: os.PathLike | str) -> MarkdownPath:
        """Percent-decode, join and canonicalise ``path`` relative to ``base_path``."""
        if not _is_markdown(path):
            raise NotMarkdownError(path)
        joined = _decode(base_path) / _decode(path)
        try:
            canonical = joined.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise CanonicalisationError(joined, str(exc)) from exc
        return cls(canonical)

    @classmethod
    def unchecked(cls, base_path: os.PathLike | str, path: os.PathLike | str) -> MarkdownPath:
        """Like :meth:`resolve`, but without touching the file system."""
        if not _is_markdown(path):
            raise NotMarkdownError(path)
        return cls(_decode(base_path) / _decode(path))

    def __str__(self) -> str:
        return f"\x1b[1m\x1b[4m\x1b[94m{self.path}\x1b[39m\x1b[24m\x1b[22m"


def maybe_encode(path: os.PathLike | str, do_encode: bool) -> Path:
    """Percent-encode ``path`` with the URL fragment set when ``do_encode`` is true."""
    if not do_encode:
        return Path(path)
    encoded = "".join(
        f"%{byte:02X}"
        if byte < 0x20 or byte >= 0x7F or byte in _FRAGMENT_EXTRA
        else chr(byte)
        for byte in os.fspath(path).encode("utf-8", errors="replace")
    )
    return Path(encoded)