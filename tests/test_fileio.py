"""Test whole-file reading and atomic saving."""

import os
import tempfile
from unittest.mock import patch

import pytest
from rawedit import fileio


def test_read_lines_splits_on_newline(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("first\nsecond\n\nfourth", encoding='utf-8')
    assert fileio.read_lines(str(path)) == ["first", "second", "", "fourth"]


def test_read_empty_file_gives_one_empty_line(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding='utf-8')
    assert fileio.read_lines(str(path)) == [""]


def test_read_crlf_file_keeps_carriage_returns(tmp_path):
    path = tmp_path / "dos.txt"
    path.write_bytes(b"a\r\nb")
    assert fileio.read_lines(str(path)) == ["a\r", "b"]


@pytest.mark.parametrize("data", [b"a\rb", b"a\r\nb\r\n", b"x\r\r\ny"])
def test_load_and_save_keeps_line_endings(tmp_path, data):
    path = tmp_path / "endings.txt"
    path.write_bytes(data)
    fileio.write_lines(str(path), fileio.read_lines(str(path)))
    assert path.read_bytes() == data


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        fileio.read_lines(str(tmp_path / "missing.txt"))


def test_write_lines_joins_with_newlines(tmp_path):
    path = tmp_path / "out.txt"
    written = fileio.write_lines(str(path), ["héllo", "", "world"])
    assert path.read_bytes() == "héllo\n\nworld".encode('utf-8')
    assert written == len("héllo\n\nworld".encode('utf-8'))


def test_write_then_read_preserves_lines(tmp_path):
    path = tmp_path / "round.txt"
    lines = ["one", "  two", "", "日本"]
    fileio.write_lines(str(path), lines)
    assert fileio.read_lines(str(path)) == lines


def test_failed_write_keeps_original_and_cleans_up():
    """A failing rename leaves the old content and no temp files behind."""
    with tempfile.TemporaryDirectory() as temp_dir:
        target = os.path.join(temp_dir, "keep.txt")
        with open(target, 'w', encoding='utf-8') as f:
            f.write("original")

        with patch('rawedit.fileio.os.replace', side_effect=OSError(28, "No space left on device")):
            with pytest.raises(OSError):
                fileio.write_lines(target, ["new content"])

        with open(target, 'r', encoding='utf-8') as f:
            assert f.read() == "original"
        assert os.listdir(temp_dir) == ["keep.txt"]


def test_write_into_missing_directory_raises(tmp_path):
    with pytest.raises(OSError):
        fileio.write_lines(str(tmp_path / "no" / "such.txt"), ["x"])
