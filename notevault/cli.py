"""Command-line argument parsing."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, NamedTuple, Sequence

from notevault.template import Template

__all__ = ["UsageError", "Command", "Args", "parse_args"]

USAGE = (
    "Usage: n [-j|--json] [-d|--vault-dir=DIR] SUBCOMMAND PATH\n\n"
    "To see the available subcommands, run zk --help subcommands."
)
SUBCOMMANDS_HELP = "Available subcommmands are: inspect, links, backlinks"

_SHORT = {"j": "json", "d": "vault-dir", "v": "variables", "t": "template-file", "h": "help"}
_LONG = frozenset(_SHORT.values())
_TAKES_VALUE = frozenset({"vault-dir", "variables", "template-file"})


class UsageError(Exception):
    """The command line could not be understood."""


class Command(Enum):
    INSPECT = "inspect"
    LINKS = "links"
    BACKLINKS = "backlinks"
    QUERY = "query"
    SEARCH = "search"
    LIST = "list"
    NEW = "new"


_COMMAND_NAMES = {command.value: command for command in Command} | {"ls": Command.LIST}
_NEEDS_ARGUMENT = frozenset(
    {Command.LINKS, Command.BACKLINKS, Command.QUERY, Command.SEARCH}
)


@dataclass
class Args:
    """Parsed command-line arguments."""

    command: Command
    argument: str | None = None
    json: bool = False
    vault_dir: Path = Path(".")
    template: Template | None = None


class _Token(NamedTuple):
    name: str | None
    label: str | None
    value: str | None


def _lex(remaining: Iterator[str]) -> Iterator[_Token]:
    for token in remaining:
        if token == "--":
            for rest in remaining:
                yield _Token(None, None, rest)
            return
        if token.startswith("--"):
            name, eq, attached = token[2:].partition("=")
            yield _Token(name if name in _LONG else None, f"--{name}", attached if eq else None)
        elif token.startswith("-") and token != "-":
            cluster = token[1:]
            while cluster:
                letter, cluster = cluster[0], cluster[1:]
                name = _SHORT.get(letter)
                if (name in _TAKES_VALUE or name == "help") and cluster:
                    yield _Token(name, f"-{letter}", cluster.removeprefix("="))
                    break
                yield _Token(name, f"-{letter}", None)
        else:
            yield _Token(None, None, token)


def _read_template(template_file: str, variables: str | None) -> Template:
    try:
        text = Path(template_file).read_text(encoding="utf-8")
    except OSError as exc:
        raise UsageError(f"cannot read template file `{template_file}`: {exc}") from exc
    try:
        return Template(text, variables)
    except ValueError as exc:
        raise UsageError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None) -> Args:
    """Parse the command line; ``--help`` prints the usage and exits."""
    remaining = iter(sys.argv[1:] if argv is None else list(argv))
    subcommand: str | None = None
    argument: str | None = None
    json_output = False
    vault_dir = Path.cwd()
    variables: str | None = None
    template_file: str | None = None

    for token in _lex(remaining):
        if token.label is None:
            if subcommand is None:
                subcommand = token.value
            else:
                argument = token.value
        elif token.name == "json":
            if token.value is not None:
                raise UsageError(f"unexpected argument for option '{token.label}'")
            json_output = True
        elif token.name in _TAKES_VALUE:
            value = token.value if token.value is not None else next(remaining, None)
            if value is None:
                raise UsageError(f"missing argument for option '{token.label}'")
            if token.name == "vault-dir":
                vault_dir = Path(value)
            elif token.name == "variables":
                variables = value
            else:
                template_file = value
        elif token.name == "help":
            target = token.value if token.value is not None else next(remaining, None)
            print(SUBCOMMANDS_HELP if target == "subcommands" else USAGE)
            raise SystemExit(0)
        else:
            raise UsageError(f"invalid option '{token.label}'")

    if subcommand is None:
        raise UsageError("missing subcommand")
    command = _COMMAND_NAMES.get(subcommand)
    if command is None:
        raise UsageError(f"unknown subcommand `{subcommand}`")

    template = None
    if command in _NEEDS_ARGUMENT and argument is None:
        raise UsageError("missing argument")
    if command is Command.NEW:
        if template_file is None:
            raise UsageError("missing argument")
        template = _read_template(template_file, variables)
        if argument is None:
            raise UsageError("missing argument")
    if command is Command.LIST:
        argument = None

    return Args(
        command=command,
        argument=argument,
        json=json_output,
        vault_dir=vault_dir,
        template=template,
    )