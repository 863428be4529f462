"""Frame composition: buffer + viewport -> terminal control sequences."""

from typing import Optional

from .buffer import TextBuffer
from .config import EditorConstants
from .viewport import ViewportCursor


def _is_control(ch: str) -> bool:
    """C0, DEL and C1 characters; the terminal would act on them."""
    code = ord(ch)
    return code < 0x20 or 0x7F <= code < 0xA0


class RenderCompositor:
    """Builds one full terminal frame per call.

    All escape sequences come from the blessed terminal, so ``term.move``
    takes 0-indexed (y, x) and emits the 1-indexed wire form. Composing a
    frame reads the buffer and cursor state but never changes it.
    """

    def __init__(self, term, placeholder: str = EditorConstants.PLACEHOLDER,
                 show_welcome: bool = True, version: str = "unknown"):
        self.term = term
        self.placeholder = placeholder
        self.show_welcome = show_welcome
        self.welcome = EditorConstants.WELCOME_MESSAGE.format(version)

    def compose(self, buffer: TextBuffer, view: ViewportCursor, width: int, height: int,
                status: Optional[str] = None) -> str:
        """Return the frame for the current state.

        Args:
            buffer: Document to draw.
            view: Cursor and viewport offsets.
            width: Terminal width in columns.
            height: Terminal height in rows, including the status line.
            status: Status bar text; a default summary when None.
        """
        term = self.term
        # A one-row terminal only has room for the status line
        text_rows = max(0, height - 1)
        out = [term.hide_cursor, term.home]

        for y in range(text_rows):
            out.append(term.clear_eol)
            out.append(self._row_text(buffer, view, y, width, text_rows))
            if y < text_rows - 1:
                out.append("\r\n")

        if status is None:
            status = self.status_text(buffer, view, width)
        out.append(term.move(text_rows, 0))
        out.append(term.clear_eol)
        out.append(term.reverse + self._fit(status, width) + term.normal)

        cursor_y, cursor_x = view.screen_position()
        out.append(term.move(cursor_y, cursor_x))
        out.append(term.normal_cursor)
        return ''.join(out)

    def _row_text(self, buffer: TextBuffer, view: ViewportCursor, y: int, width: int,
                  text_rows: int) -> str:
        file_row = y + view.viewport.row_offset
        if file_row < buffer.row_count():
            col = view.viewport.col_offset
            return self._visible(buffer.line(file_row)[col:col + width])

        if self.show_welcome and buffer.is_initial() and y == text_rows // 3:
            return self._welcome_line(width)
        return self.placeholder

    def _visible(self, text: str) -> str:
        """Replace control characters so each still takes exactly one cell."""
        if not any(_is_control(ch) for ch in text):
            return text
        out = []
        for ch in text:
            if ch == "\t":
                out.append(self.term.reverse + EditorConstants.TAB_GLYPH + self.term.normal)
            elif _is_control(ch):
                out.append(self.term.reverse + EditorConstants.CONTROL_GLYPH + self.term.normal)
            else:
                out.append(ch)
        return ''.join(out)

    def _welcome_line(self, width: int) -> str:
        message = self.welcome[:width]
        padding = (width - len(message)) // 2
        if padding == 0:
            return message
        return self.placeholder + " " * (padding - 1) + message

    @staticmethod
    def _fit(text: str, width: int) -> str:
        return text[:width].ljust(width)

    def status_text(self, buffer: TextBuffer, view: ViewportCursor, width: int,
                    filename: Optional[str] = None, modified: bool = False,
                    message: Optional[str] = None) -> str:
        """Left: file summary or a message. Right: cursor line/column (1-based)."""
        if message:
            left = f" {message}"
        else:
            name = filename or EditorConstants.NO_NAME
            left = f" {name} - {buffer.row_count()} lines"
            if modified:
                left += " (modified)"
        right = f"Ln {view.cursor.row + 1}, Col {view.cursor.column + 1} "
        gap = width - len(left) - len(right)
        if gap < 1:
            # Narrow terminal: the position must stay visible
            return right.strip() + left
        return left + " " * gap + right

    def clear_screen(self) -> str:
        """Full-screen clear written on quit."""
        return self.term.home + self.term.clear
