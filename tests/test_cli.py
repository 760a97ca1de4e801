from pathlib import Path

import pytest

from notevault.cli import SUBCOMMANDS_HELP, USAGE, Command, UsageError, parse_args


def test_list_with_json_flag():
    args = parse_args(["-j", "list"])
    assert args.command is Command.LIST
    assert args.json is True


def test_ls_alias_and_defaults():
    args = parse_args(["ls"])
    assert args.command is Command.LIST
    assert args.json is False
    assert args.vault_dir == Path.cwd()


def test_vault_dir_short_option(tmp_path):
    args = parse_args(["-d", str(tmp_path), "links", "a.md"])
    assert args.command is Command.LINKS
    assert args.vault_dir == tmp_path
    assert args.argument == "a.md"


def test_vault_dir_long_option_with_equals(tmp_path):
    args = parse_args([f"--vault-dir={tmp_path}", "--json", "backlinks", "b.md"])
    assert args.command is Command.BACKLINKS
    assert args.vault_dir == tmp_path
    assert args.json is True
    assert args.argument == "b.md"


def test_combined_short_flags(tmp_path):
    args = parse_args(["-jd", str(tmp_path), "search", "apples"])
    assert args.json is True
    assert args.vault_dir == tmp_path
    assert args.command is Command.SEARCH
    assert args.argument == "apples"


def test_attached_short_value(tmp_path):
    args = parse_args([f"-d={tmp_path}", "query", "(contains a b)"])
    assert args.vault_dir == tmp_path
    assert args.argument == "(contains a b)"


def test_last_positional_wins():
    args = parse_args(["links", "a.md", "b.md"])
    assert args.argument == "b.md"


def test_inspect_without_argument():
    args = parse_args(["inspect"])
    assert args.command is Command.INSPECT
    assert args.argument is None


def test_double_dash_makes_values():
    args = parse_args(["search", "--", "-j"])
    assert args.argument == "-j"
    assert args.json is False


def test_missing_subcommand():
    with pytest.raises(UsageError, match="missing subcommand"):
        parse_args([])


@pytest.mark.parametrize("command", ["query", "search", "links", "backlinks"])
def test_missing_argument(command):
    with pytest.raises(UsageError, match="missing argument"):
        parse_args([command])


def test_unknown_subcommand():
    with pytest.raises(UsageError, match="unknown subcommand"):
        parse_args(["frobnicate"])


def test_unknown_option():
    with pytest.raises(UsageError, match="invalid option"):
        parse_args(["-x", "list"])


def test_option_missing_value():
    with pytest.raises(UsageError, match="missing argument for option"):
        parse_args(["list", "-d"])


def test_flag_with_value_rejected():
    with pytest.raises(UsageError):
        parse_args(["--json=yes", "list"])


def test_new_reads_template(tmp_path):
    template_file = tmp_path / "tpl.md"
    template_file.write_text("# {{ title }}\n", encoding="utf-8")
    args = parse_args(["-t", str(template_file), "-v", "title:Hello", "new", "note"])
    assert args.command is Command.NEW
    assert args.argument == "note"
    assert args.template.render() == "# Hello\n"


def test_new_without_template_file():
    with pytest.raises(UsageError, match="missing argument"):
        parse_args(["new", "note"])


def test_new_with_missing_template_file(tmp_path):
    with pytest.raises(UsageError, match="cannot read template file"):
        parse_args(["-t", str(tmp_path / "absent.md"), "new", "note"])


def test_help_prints_usage(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["--help"])
    assert info.value.code == 0
    assert capsys.readouterr().out == USAGE + "\n"


def test_help_subcommands(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["-h", "subcommands"])
    assert info.value.code == 0
    assert capsys.readouterr().out == SUBCOMMANDS_HELP + "\n"