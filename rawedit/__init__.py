"""rawedit - A small terminal line editor."""

from .buffer import TextBuffer, CursorPosition
from .keys import KeyDecoder, KeyEvent, KeyType, StreamClosed
from .render import RenderCompositor
from .viewport import Viewport, ViewportCursor

__all__ = [
    'TextBuffer',
    'CursorPosition',
    'KeyDecoder',
    'KeyEvent',
    'KeyType',
    'StreamClosed',
    'RenderCompositor',
    'Viewport',
    'ViewportCursor',
]
