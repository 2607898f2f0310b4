import pytest

from mandarin_deck.exceptions import MandarinDeckError
from mandarin_deck.services import VocabularyService


def _load(tmp_path, text):
    path = tmp_path / "input.csv"
    path.write_text(text, encoding="utf-8")
    return VocabularyService.load_from_csv(str(path))


def test_rows_are_trimmed_and_overrides_optional(tmp_path):
    service = _load(tmp_path, "  你好 \n學生, student \n")

    rows = service.rows()

    assert [(row.hanzi, row.definition) for row in rows] == [("你好", None), ("學生", "student")]
    assert [row.index for row in rows] == [0, 1]


def test_ragged_rows_and_blank_lines(tmp_path):
    service = _load(tmp_path, "基金會,foundation,extra,more\n\n時尚\n")

    assert [(row.hanzi, row.definition) for row in service.rows()] == [
        ("基金會", "foundation"),
        ("時尚", None),
    ]


def test_empty_text_rows_are_skipped(tmp_path):
    service = _load(tmp_path, ",orphan\n你好\n")

    assert service.count == 1
    assert service.rows()[0].hanzi == "你好"


def test_byte_order_mark_is_ignored(tmp_path):
    path = tmp_path / "input.csv"
    path.write_bytes("你好\n".encode("utf-8-sig"))

    assert VocabularyService.load_from_csv(str(path)).rows()[0].hanzi == "你好"


def test_empty_file(tmp_path):
    assert _load(tmp_path, "").rows() == []


def test_missing_file(tmp_path):
    with pytest.raises(MandarinDeckError):
        VocabularyService.load_from_csv(str(tmp_path / "missing.csv"))
