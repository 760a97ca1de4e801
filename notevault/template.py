"""Note templates with ``{{variable}}`` placeholders."""

from __future__ import annotations

import os
import re
from pathlib import Path

__all__ = ["Template"]

_PLACEHOLDER = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}")


def _parse_fields(fields: str | None) -> dict[str, str]:
    if fields is None:
        return {}
    variables: dict[str, str] = {}
    for pair in fields.split(","):
        key, sep, rest = pair.partition(":")
        if not sep:
            raise ValueError(f"malformed variable {pair!r}: expected KEY:VALUE")
        variables[key] = rest.split(":", 1)[0]
    return variables


class Template:
    """A text template filled in from ``key:value`` pairs separated by commas."""

    def __init__(self, text: str, fields: str | None = None) -> None:
        self.text = text
        self.variables = _parse_fields(fields)

    def render(self) -> str:
        """Replace each placeholder with its value; unknown names become empty."""
        return _PLACEHOLDER.sub(lambda m: self.variables.get(m.group(1), ""), self.text)

    def write(self, path: os.PathLike | str) -> None:
        """Write the rendered template to ``path``."""
        Path(path).write_text(self.render(), encoding="utf-8")

    def __repr__(self) -> str:
        return f"Template(text={self.text!r}, variables={self.variables!r})"