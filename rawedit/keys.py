"""Keyboard input decoding from raw terminal bytes."""

import codecs
import logging
import os
import select
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

ESC = 0x1B
CR = 0x0D
DEL = 0x7F
CSI_BRACKET = ord('[')


class KeyType(Enum):
    """Types of key events."""
    CHARACTER = "character"
    CONTROL = "control"
    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    ENTER = "enter"
    BACKSPACE = "backspace"
    ESCAPE = "escape"
    UNRECOGNIZED = "unrecognized"


# Finalizer byte of an `ESC [` sequence -> arrow key
_ARROW_FINALIZERS = {
    ord('A'): KeyType.ARROW_UP,
    ord('B'): KeyType.ARROW_DOWN,
    ord('C'): KeyType.ARROW_RIGHT,
    ord('D'): KeyType.ARROW_LEFT,
}


@dataclass(frozen=True)
class KeyEvent:
    """Represents one decoded keypress."""
    key_type: KeyType
    value: str = ""  # The character, or the lower-case letter of a control key
    raw: bytes = b""  # The bytes consumed for this event

    def is_ctrl(self, letter: str) -> bool:
        return self.key_type == KeyType.CONTROL and self.value == letter


class StreamClosed(EOFError):
    """The input stream ended before a key could be read."""


class DecoderState(Enum):
    AWAIT_ESCAPE = "await_escape"
    AWAIT_BRACKET = "await_bracket"
    AWAIT_FINALIZER = "await_finalizer"


class ByteSource(ABC):
    """A consume/peek cursor over a byte stream.

    Subclasses only know how to fetch more bytes; buffering, peeking and
    consuming live here so the decoder never depends on a particular
    reader implementation.
    """

    def __init__(self):
        self._pending = bytearray()
        self._eof = False

    @abstractmethod
    def _fill(self, block: bool) -> bool:
        """Append more bytes to ``self._pending``.

        Args:
            block: Wait for input when nothing is available yet.

        Returns:
            True if bytes were added. Sets ``self._eof`` at end-of-stream.
        """

    def has_pending(self) -> bool:
        """Zero-wait check for at least one unread byte."""
        if self._pending:
            return True
        if self._eof:
            return False
        return self._fill(block=False)

    def buffered(self) -> bool:
        """True if bytes have already been read ahead into the buffer."""
        return bool(self._pending)

    @property
    def closed(self) -> bool:
        """True once the stream has ended and every byte was consumed."""
        return self._eof and not self._pending

    def peek_byte(self) -> Optional[int]:
        """Return the next byte without consuming it or waiting."""
        if not self.has_pending():
            return None
        return self._pending[0]

    def read_byte(self) -> Optional[int]:
        """Consume one byte, blocking until available. None at end-of-stream."""
        while not self._pending:
            if self._eof:
                return None
            self._fill(block=True)
        value = self._pending[0]
        del self._pending[0]
        return value


class BytesSource(ByteSource):
    """In-memory source; everything not yet consumed counts as available."""

    def __init__(self, data: bytes = b""):
        super().__init__()
        self._pending.extend(data)
        self._eof = True

    def _fill(self, block: bool) -> bool:
        return False


class FdByteSource(ByteSource):
    """Source reading from a raw file descriptor (normally stdin)."""

    CHUNK_SIZE = 1024

    def __init__(self, fd: int = 0):
        super().__init__()
        self.fd = fd

    def fileno(self) -> int:
        return self.fd

    def _fill(self, block: bool) -> bool:
        if not block:
            ready, _, _ = select.select([self.fd], [], [], 0)
            if not ready:
                return False
        data = os.read(self.fd, self.CHUNK_SIZE)
        if not data:
            self._eof = True
            return False
        self._pending.extend(data)
        return True


class KeyDecoder:
    """Turns a byte stream into one KeyEvent per logical keypress.

    Escape sequences are recognised by a small state machine
    (AWAIT_ESCAPE -> AWAIT_BRACKET -> AWAIT_FINALIZER) that only ever
    blocks for the first byte of a key.
    """

    def decode_next(self, source: ByteSource) -> KeyEvent:
        """Read and decode the next key from ``source``.

        Raises:
            StreamClosed: the stream ended before any byte was read.
        """
        first = source.read_byte()
        if first is None:
            raise StreamClosed("input stream closed")

        event = self._decode(first, source)
        logger.debug("Decoded %s value=%r raw=%r", event.key_type.name, event.value, event.raw)
        return event

    def _decode(self, first: int, source: ByteSource) -> KeyEvent:
        raw = bytearray([first])
        state = DecoderState.AWAIT_ESCAPE

        while True:
            if state == DecoderState.AWAIT_ESCAPE:
                if first == ESC:
                    state = DecoderState.AWAIT_BRACKET
                    continue
                return self._decode_single(first, source, raw)

            if state == DecoderState.AWAIT_BRACKET:
                if not source.has_pending():
                    return KeyEvent(KeyType.ESCAPE, raw=bytes(raw))
                if source.peek_byte() != CSI_BRACKET:
                    # Leave the lookahead byte for the next key
                    return KeyEvent(KeyType.UNRECOGNIZED, raw=bytes(raw))
                raw.append(source.read_byte())
                state = DecoderState.AWAIT_FINALIZER
                continue

            # AWAIT_FINALIZER: a truncated sequence must not block
            if not source.has_pending():
                return KeyEvent(KeyType.UNRECOGNIZED, raw=bytes(raw))
            final = source.read_byte()
            raw.append(final)
            key_type = _ARROW_FINALIZERS.get(final, KeyType.UNRECOGNIZED)
            return KeyEvent(key_type, raw=bytes(raw))

    def _decode_single(self, first: int, source: ByteSource, raw: bytearray) -> KeyEvent:
        """Classify a key that does not start an escape sequence."""
        if first == CR:
            return KeyEvent(KeyType.ENTER, raw=bytes(raw))
        if first == DEL:
            return KeyEvent(KeyType.BACKSPACE, raw=bytes(raw))
        if 0x01 <= first <= 0x1A:
            return KeyEvent(KeyType.CONTROL, value=chr(first | 0x60), raw=bytes(raw))
        if first < 0x20:
            return KeyEvent(KeyType.UNRECOGNIZED, raw=bytes(raw))

        # UTF-8: keep pulling continuation bytes until a character appears
        decoder = codecs.getincrementaldecoder('utf-8')()
        try:
            text = decoder.decode(bytes(raw))
            while not text:
                if not source.has_pending():
                    return KeyEvent(KeyType.UNRECOGNIZED, raw=bytes(raw))
                nxt = source.read_byte()
                raw.append(nxt)
                text = decoder.decode(bytes([nxt]))
        except UnicodeDecodeError:
            return KeyEvent(KeyType.UNRECOGNIZED, raw=bytes(raw))
        return KeyEvent(KeyType.CHARACTER, value=text, raw=bytes(raw))
