# tests/test_core/test_document.py
"""Unit tests for `kilo.core.Document`.

- Row insert/delete outside the valid range are no-ops.
- Every successful change bumps `dirty`; load and save reset it.
- Load strips line terminators; save writes ``\\n`` after every row.
"""

from pathlib import Path

import pytest

from kilo.core.Document import Document


def test_insert_row_outside_range_is_ignored() -> None:
    doc = Document([b"a"])
    doc.insert_row(5, b"x")
    doc.insert_row(-1, b"x")
    assert doc.lines() == [b"a"]
    assert doc.dirty == 0


def test_insert_row_at_end_appends() -> None:
    doc = Document([b"a"])
    doc.insert_row(1, b"b")
    assert doc.lines() == [b"a", b"b"]
    assert doc.dirty == 1


def test_delete_row_bounds() -> None:
    doc = Document([b"a", b"b"])
    doc.delete_row(2)
    assert doc.numrows == 2
    assert doc.dirty == 0
    doc.delete_row(0)
    assert doc.lines() == [b"b"]
    assert doc.dirty == 1


def test_row_content_operations_bump_dirty() -> None:
    doc = Document([b"ab"])
    row = doc[0]
    doc.row_insert_char(row, 2, ord("c"))
    doc.row_append_string(row, b"de")
    tail = doc.row_truncate(row, 3)
    assert tail == b"de"
    assert row.chars == b"abc"
    assert doc.dirty == 3


def test_row_delete_char_out_of_range_keeps_dirty() -> None:
    doc = Document([b"ab"])
    doc.row_delete_char(doc[0], 7)
    assert doc.dirty == 0
    doc.row_delete_char(doc[0], 1)
    assert doc[0].chars == b"a"
    assert doc.dirty == 1


def test_new_rows_use_document_tab_stop() -> None:
    doc = Document([b"\t"], tab_stop=4)
    doc.insert_row(1, b"\t")
    assert doc[0].render == b"    "
    assert doc[1].render == b"    "


def test_load_strips_line_terminators(tmp_path: Path) -> None:
    path = tmp_path / "in.txt"
    path.write_bytes(b"one\r\ntwo\n\nthree")
    doc = Document()
    doc.load(str(path))
    assert doc.lines() == [b"one", b"two", b"", b"three"]
    assert doc.dirty == 0
    assert doc.filename == str(path)


def test_load_missing_file_gives_empty_named_document(tmp_path: Path) -> None:
    path = tmp_path / "new.txt"
    doc = Document([b"stale"])
    doc.load(str(path))
    assert doc.numrows == 0
    assert doc.filename == str(path)
    assert not path.exists()


def test_save_writes_newline_after_every_row(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    doc = Document([b"one", b"two"], filename=str(path))
    doc.insert_row(2, b"")
    written = doc.save()
    assert written == 9
    assert path.read_bytes() == b"one\ntwo\n\n"
    assert doc.dirty == 0


def test_save_truncates_longer_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "out.txt"
    path.write_bytes(b"x" * 100)
    Document([b"short"]).save(str(path))
    assert path.read_bytes() == b"short\n"


def test_save_binds_filename(tmp_path: Path) -> None:
    path = tmp_path / "named.txt"
    doc = Document([b"a"])
    doc.save(str(path))
    assert doc.filename == str(path)


def test_save_without_filename_raises() -> None:
    with pytest.raises(ValueError):
        Document([b"a"]).save()


def test_save_io_error_propagates_and_keeps_dirty(tmp_path: Path) -> None:
    doc = Document([b"a"], filename=str(tmp_path))
    doc.insert_row(1, b"b")
    with pytest.raises(OSError):
        doc.save()
    assert doc.dirty == 1


def test_save_then_load_round_trips_rows(tmp_path: Path) -> None:
    path = tmp_path / "rt.txt"
    rows = [b"abc", b"", b"d\te", b"  trailing  ", b"\x80\xff"]
    Document(rows).save(str(path))
    reloaded = Document()
    reloaded.load(str(path))
    assert reloaded.lines() == rows
