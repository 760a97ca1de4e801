"""Links found inside Markdown documents."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from urllib.parse import unquote

from notevault.mdpath import MarkdownPath, PathError

__all__ = ["Link"]

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")
_TRIMMED = "".join(chr(c) for c in range(0x21))


def _has_scheme(url: str) -> bool:
    cleaned = url.strip(_TRIMMED)
    for ch in "\t\n\r":
        cleaned = cleaned.replace(ch, "")
    return _SCHEME.match(cleaned) is not None


@dataclass(frozen=True)
class Link:
    """A link in a Markdown file."""

    text: str
    url: str

    def points_to(self, target: MarkdownPath) -> bool:
        """Whether this link leads to the ``target`` document."""
        resolved = self.to_markdown_path(target.path.parent)
        return resolved is not None and resolved == target

    def to_markdown_path(self, base_path: os.PathLike | str) -> MarkdownPath | None:
        """Resolve a relative link against ``base_path``; absolute URLs give None."""
        if _has_scheme(self.url):
            return None
        try:
            return MarkdownPath.resolve(base_path, self.url)
        except PathError:
            return None

    def to_dict(self) -> dict[str, str]:
        return {"text": self.text, "url": self.url}

    def __str__(self) -> str:
        url = unquote(self.url, errors="replace")
        return f"\x1b[4m\x1b[94m{url}\x1b[39m\x1b[24m"