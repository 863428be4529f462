"""Test decoding of raw terminal bytes into key events."""

import os

import pytest
from rawedit.keys import (
    BytesSource,
    FdByteSource,
    KeyDecoder,
    KeyEvent,
    KeyType,
    StreamClosed,
)


def decode_all(data: bytes) -> list[KeyEvent]:
    """Decode every event from ``data`` until the stream closes."""
    decoder = KeyDecoder()
    source = BytesSource(data)
    events = []
    while True:
        try:
            events.append(decoder.decode_next(source))
        except StreamClosed:
            return events


def test_arrow_right_sequence():
    """ESC [ C is exactly one ArrowRight consuming all three bytes."""
    source = BytesSource(b'\x1b[C')
    event = KeyDecoder().decode_next(source)
    assert event.key_type == KeyType.ARROW_RIGHT
    assert event.raw == b'\x1b[C'
    assert source.closed


@pytest.mark.parametrize("final,key_type", [
    (b'A', KeyType.ARROW_UP),
    (b'B', KeyType.ARROW_DOWN),
    (b'C', KeyType.ARROW_RIGHT),
    (b'D', KeyType.ARROW_LEFT),
])
def test_all_arrows(final, key_type):
    events = decode_all(b'\x1b[' + final)
    assert [e.key_type for e in events] == [key_type]


def test_lone_escape():
    """A lone ESC with nothing pending is reported as Escape."""
    source = BytesSource(b'\x1b')
    event = KeyDecoder().decode_next(source)
    assert event.key_type == KeyType.ESCAPE
    assert event.raw == b'\x1b'
    assert source.closed


def test_escape_followed_by_other_byte_keeps_lookahead():
    """ESC x is unrecognized and x is decoded on the next call."""
    events = decode_all(b'\x1bx')
    assert [e.key_type for e in events] == [KeyType.UNRECOGNIZED, KeyType.CHARACTER]
    assert events[0].raw == b'\x1b'
    assert events[1].value == 'x'


def test_unknown_finalizer():
    events = decode_all(b'\x1b[Zq')
    assert events[0].key_type == KeyType.UNRECOGNIZED
    assert events[0].raw == b'\x1b[Z'
    assert events[1] == KeyEvent(KeyType.CHARACTER, 'q', b'q')


def test_truncated_sequence_does_not_block():
    """ESC [ followed by end-of-stream degrades to Unrecognized."""
    source = BytesSource(b'\x1b[')
    event = KeyDecoder().decode_next(source)
    assert event.key_type == KeyType.UNRECOGNIZED
    assert event.raw == b'\x1b['
    with pytest.raises(StreamClosed):
        KeyDecoder().decode_next(source)


def test_enter_backspace_and_controls():
    events = decode_all(b'\r\x7f\x11\x13\x01')
    assert [e.key_type for e in events] == [
        KeyType.ENTER, KeyType.BACKSPACE, KeyType.CONTROL, KeyType.CONTROL, KeyType.CONTROL,
    ]
    assert events[2].is_ctrl('q')
    assert events[3].is_ctrl('s')
    assert events[4].value == 'a'


def test_regular_characters():
    events = decode_all(b'hi ~')
    assert [e.value for e in events] == ['h', 'i', ' ', '~']
    assert all(e.key_type == KeyType.CHARACTER for e in events)


def test_multibyte_utf8_character():
    """A multi-byte UTF-8 character decodes to one event."""
    events = decode_all('é日'.encode('utf-8'))
    assert [e.value for e in events] == ['é', '日']
    assert events[1].raw == '日'.encode('utf-8')


def test_truncated_utf8_is_unrecognized():
    events = decode_all(b'\xe6\x97')
    assert len(events) == 1
    assert events[0].key_type == KeyType.UNRECOGNIZED


def test_invalid_utf8_lead_byte():
    events = decode_all(b'\xffa')
    assert events[0].key_type == KeyType.UNRECOGNIZED
    assert events[1].value == 'a'


def test_other_c0_bytes_unrecognized():
    events = decode_all(b'\x00\x1c')
    assert [e.key_type for e in events] == [KeyType.UNRECOGNIZED, KeyType.UNRECOGNIZED]


def test_empty_stream_raises_stream_closed():
    with pytest.raises(StreamClosed):
        KeyDecoder().decode_next(BytesSource(b''))


def test_events_are_immutable():
    event = KeyEvent(KeyType.CHARACTER, 'a', b'a')
    with pytest.raises(AttributeError):
        event.value = 'b'


def test_fd_source_reads_pipe():
    """The fd source peeks without consuming and reports EOF."""
    r, w = os.pipe()
    try:
        source = FdByteSource(r)
        assert not source.has_pending()
        os.write(w, b'\x1b[A')
        os.close(w)
        w = None
        event = KeyDecoder().decode_next(source)
        assert event.key_type == KeyType.ARROW_UP
        with pytest.raises(StreamClosed):
            KeyDecoder().decode_next(source)
        assert source.closed
    finally:
        os.close(r)
        if w is not None:
            os.close(w)


def test_fd_source_lone_escape_with_nothing_pending():
    r, w = os.pipe()
    try:
        os.write(w, b'\x1b')
        source = FdByteSource(r)
        event = KeyDecoder().decode_next(source)
        assert event.key_type == KeyType.ESCAPE
        assert not source.buffered()
    finally:
        os.close(r)
        os.close(w)
