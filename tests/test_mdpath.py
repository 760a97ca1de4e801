from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from notevault.mdpath import (
    CanonicalisationError,
    MarkdownPath,
    NotMarkdownError,
    PathError,
    maybe_encode,
)

_bases = st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=40)
_stems = st.from_regex(r"[A-Za-z0-9_]{1,16}", fullmatch=True)


@given(base=_bases, stem=_stems, encode_base=st.booleans(), encode_leaf=st.booleans())
def test_equivalence(base, stem, encode_base, encode_leaf):
    file = Path(f"{stem}.md")
    lhs = MarkdownPath.unchecked(maybe_encode(base, encode_base), maybe_encode(file, encode_leaf))
    rhs = MarkdownPath.unchecked(base, file)
    assert lhs == rhs


@given(base=_bases, stem=_stems, encode_base=st.booleans(), encode_leaf=st.booleans())
def test_hash_equivalence(base, stem, encode_base, encode_leaf):
    file = Path(f"{stem}.md")
    lhs = MarkdownPath.unchecked(maybe_encode(base, encode_base), maybe_encode(file, encode_leaf))
    rhs = MarkdownPath.unchecked(base, file)
    assert hash(lhs) == hash(rhs)


def test_resolve_existing_file(tmp_path):
    (tmp_path / "note.md").write_text("hello")
    result = MarkdownPath.resolve(tmp_path, "note.md")
    assert result.path == (tmp_path / "note.md").resolve()


def test_resolve_percent_decodes_leaf(tmp_path):
    (tmp_path / "my note.md").write_text("hello")
    result = MarkdownPath.resolve(tmp_path, "my%20note.md")
    assert result == MarkdownPath.resolve(tmp_path, "my note.md")
    assert result.path.name == "my note.md"


def test_resolve_rejects_non_markdown(tmp_path):
    (tmp_path / "note.txt").write_text("hello")
    with pytest.raises(NotMarkdownError):
        MarkdownPath.resolve(tmp_path, "note.txt")


def test_resolve_missing_file(tmp_path):
    with pytest.raises(CanonicalisationError) as info:
        MarkdownPath.resolve(tmp_path, "absent.md")
    assert isinstance(info.value, PathError)
    assert info.value.path == tmp_path / "absent.md"


def test_unchecked_rejects_non_markdown():
    with pytest.raises(NotMarkdownError):
        MarkdownPath.unchecked("base", "note.markdown")


def test_unchecked_joins_without_file_system():
    assert MarkdownPath.unchecked("some/dir", "x.md").path == Path("some/dir/x.md")


def test_maybe_encode_fragment_set():
    assert maybe_encode(Path("a b.md"), True) == Path("a%20b.md")
    assert maybe_encode(Path("a b.md"), False) == Path("a b.md")


def test_equal_paths_collapse_in_set():
    paths = {MarkdownPath.unchecked("d", "x.md"), MarkdownPath.unchecked("d", "x%2Emd")}
    assert len(paths) == 1


def test_str_contains_path():
    text = str(MarkdownPath.unchecked("d", "x.md"))
    assert str(Path("d/x.md")) in text
    assert text.startswith("\x1b[")