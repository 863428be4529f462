"""Test TextBuffer line operations."""

import pytest
from rawedit.buffer import TextBuffer, CursorPosition


def test_new_buffer_has_one_empty_row():
    buffer = TextBuffer()
    assert buffer.row_count() == 1
    assert buffer.line(0) == ""
    assert buffer.is_initial()


def test_replace_lines_with_empty_list_keeps_one_row():
    buffer = TextBuffer(["a", "b"])
    buffer.replace_lines([])
    assert buffer.lines() == [""]


def test_replace_lines_rejects_newlines():
    buffer = TextBuffer(["keep"])
    with pytest.raises(ValueError):
        buffer.replace_lines(["bad\nrow"])
    assert buffer.lines() == ["keep"]


def test_insert_char_middle():
    buffer = TextBuffer(["hllo"])
    position = buffer.insert_char(0, 1, "e")
    assert buffer.line(0) == "hello"
    assert position == CursorPosition(2, 0)


def test_insert_char_clamps_column():
    buffer = TextBuffer(["ab"])
    position = buffer.insert_char(0, 10, "c")
    assert buffer.line(0) == "abc"
    assert position == CursorPosition(3, 0)

    buffer.insert_char(0, -4, "_")
    assert buffer.line(0) == "_abc"


def test_insert_char_grows_missing_rows():
    buffer = TextBuffer(["x"])
    buffer.insert_char(3, 0, "y")
    assert buffer.lines() == ["x", "", "", "y"]


def test_insert_char_rejects_newline_and_strings():
    buffer = TextBuffer()
    with pytest.raises(ValueError):
        buffer.insert_char(0, 0, "\n")
    with pytest.raises(ValueError):
        buffer.insert_char(0, 0, "ab")
    assert buffer.is_initial()


def test_insert_char_negative_row_is_an_error():
    with pytest.raises(IndexError):
        TextBuffer().insert_char(-1, 0, "a")


def test_delete_char_before_within_line():
    buffer = TextBuffer(["hello"])
    position = buffer.delete_char_before(0, 5)
    assert buffer.line(0) == "hell"
    assert position == CursorPosition(4, 0)


def test_delete_char_before_joins_lines():
    """Backspace at the start of a row joins it onto the previous row."""
    buffer = TextBuffer(["hello", "world"])
    position = buffer.delete_char_before(1, 0)
    assert buffer.lines() == ["helloworld"]
    assert position == CursorPosition(5, 0)


def test_delete_char_before_at_origin_is_noop():
    buffer = TextBuffer(["hello"])
    position = buffer.delete_char_before(0, 0)
    assert buffer.lines() == ["hello"]
    assert position == CursorPosition(0, 0)


def test_delete_last_character_keeps_row():
    buffer = TextBuffer(["a"])
    buffer.delete_char_before(0, 1)
    assert buffer.lines() == [""]
    assert buffer.row_count() == 1


def test_split_line_at_end():
    buffer = TextBuffer(["hello", "world"])
    position = buffer.split_line(0, 5)
    assert buffer.lines() == ["hello", "", "world"]
    assert position == CursorPosition(0, 1)


def test_split_line_middle():
    buffer = TextBuffer(["hello world"])
    position = buffer.split_line(0, 5)
    assert buffer.lines() == ["hello", " world"]
    assert position == CursorPosition(0, 1)


def test_split_line_at_start_inserts_blank_above():
    buffer = TextBuffer(["hello"])
    position = buffer.split_line(0, 0)
    assert buffer.lines() == ["", "hello"]
    assert position == CursorPosition(0, 1)


@pytest.mark.parametrize("text", ["hello", "héllo", "日本語テキスト", ""])
def test_split_then_backspace_restores_line(text):
    """Joining right after a split gives back the original row and column."""
    for col in range(len(text) + 1):
        buffer = TextBuffer([text])
        position = buffer.split_line(0, col)
        restored = buffer.delete_char_before(position.row, position.column)
        assert buffer.lines() == [text]
        assert restored == CursorPosition(col, 0)


def test_multibyte_columns_are_characters():
    buffer = TextBuffer(["日本"])
    assert buffer.line_length(0) == 2
    buffer.insert_char(0, 1, "é")
    assert buffer.line(0) == "日é本"
    position = buffer.delete_char_before(0, 2)
    assert buffer.line(0) == "日本"
    assert position == CursorPosition(1, 0)


@pytest.mark.parametrize("operation", ["delete_char_before", "split_line"])
def test_out_of_range_row_raises(operation):
    buffer = TextBuffer(["only"])
    with pytest.raises(IndexError):
        getattr(buffer, operation)(1, 0)
    with pytest.raises(IndexError):
        getattr(buffer, operation)(-1, 0)
    assert buffer.lines() == ["only"]


def test_accessors_bounds_checked():
    buffer = TextBuffer(["a"])
    with pytest.raises(IndexError):
        buffer.line_length(2)
    with pytest.raises(IndexError):
        buffer.line(-1)


def test_to_text_joins_with_newlines():
    assert TextBuffer(["a", "", "b"]).to_text() == "a\n\nb"


def test_lines_returns_copy():
    buffer = TextBuffer(["a"])
    buffer.lines().append("b")
    assert buffer.row_count() == 1
