import pytest

from notevault.document import Document
from notevault.rank import rank

MAX_ITER = 100_000
TOLERANCE = 0.0000001


def _vault(tmp_path, files):
    for name, body in files.items():
        (tmp_path / name).write_text(body, encoding="utf-8")
    return [Document.load(tmp_path, name) for name in files]


def test_empty():
    assert rank([], ".", MAX_ITER, TOLERANCE) == []


def test_single_document_holds_all_rank(tmp_path):
    docs = _vault(tmp_path, {"a.md": "alone\n"})
    assert rank(docs, tmp_path, MAX_ITER, TOLERANCE) == pytest.approx([1.0])


def test_cycle_is_uniform(tmp_path):
    docs = _vault(
        tmp_path,
        {"a.md": "[b](b.md)\n", "b.md": "[c](c.md)\n", "c.md": "[a](a.md)\n"},
    )
    scores = rank(docs, tmp_path, MAX_ITER, TOLERANCE)
    assert scores == pytest.approx([1 / 3] * 3, abs=1e-6)


def test_linked_document_ranks_higher_and_sum_is_one(tmp_path):
    docs = _vault(tmp_path, {"a.md": "[b](b.md)\n", "b.md": "end\n", "c.md": "[b](b.md)\n"})
    scores = rank(docs, tmp_path, MAX_ITER, TOLERANCE)
    assert sum(scores) == pytest.approx(1.0, abs=1e-6)
    assert scores[1] > scores[0]
    assert scores[0] == pytest.approx(scores[2])


def test_zero_iterations_gives_uniform_start(tmp_path):
    docs = _vault(tmp_path, {"a.md": "[b](b.md)\n", "b.md": "end\n"})
    assert rank(docs, tmp_path, 0, TOLERANCE) == pytest.approx([0.5, 0.5])


def test_missing_and_external_links_are_ignored(tmp_path):
    docs = _vault(
        tmp_path,
        {"a.md": "[gone](missing.md)\n", "b.md": "[web](https://example.com/x.md)\n"},
    )
    scores = rank(docs, tmp_path, MAX_ITER, TOLERANCE)
    assert scores[0] == pytest.approx(scores[1])
    assert sum(scores) == pytest.approx(1.0, abs=1e-6)


def test_repeated_links_carry_more_weight(tmp_path):
    docs = _vault(
        tmp_path,
        {"a.md": "[b](b.md) [b](b.md) [c](c.md)\n", "b.md": "end\n", "c.md": "end\n"},
    )
    scores = rank(docs, tmp_path, MAX_ITER, TOLERANCE)
    assert scores[1] > scores[2] > scores[0]
    assert all(score > 0 for score in scores)