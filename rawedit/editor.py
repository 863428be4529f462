"""Main editor controller: decode, dispatch, render."""

import logging
import os
import select
import signal
from typing import Optional

from . import fileio
from .buffer import TextBuffer
from .commands import CommandRegistry
from .config import EditorConfig, EditorConstants
from .keys import ByteSource, FdByteSource, KeyDecoder, KeyEvent, KeyType, StreamClosed
from .render import RenderCompositor
from .terminal import TerminalInterface
from .version import get_version
from .viewport import ViewportCursor

logger = logging.getLogger(__name__)


class Editor:
    """Line editor application controller.

    Owns the buffer, cursor/viewport and compositor; nothing here is
    shared with other threads. The run loop is decode -> dispatch ->
    render, with the blocking input read as its only wait.
    """

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 config: Optional[EditorConfig] = None,
                 source: Optional[ByteSource] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.config = config or EditorConfig()
        self.buffer = TextBuffer()
        width, height = self.terminal.size()
        self.view = ViewportCursor(self.buffer, width, height)
        self.compositor = RenderCompositor(
            self.terminal.term,
            placeholder=self.config.placeholder,
            show_welcome=self.config.show_welcome,
            version=get_version(),
        )
        self.decoder = KeyDecoder()
        self.source = source
        self.command_registry = CommandRegistry()
        self.running = False
        self._stop_requested = False
        self._wake_pipe_r: Optional[int] = None
        self._wake_pipe_w: Optional[int] = None
        # File handling
        self.filename: Optional[str] = None
        self.modified = False
        self.status_message: Optional[str] = EditorConstants.HELP_MESSAGE
        self.prompt_mode: Optional[str] = None  # None or 'save_filename'
        self.prompt_input = ""

    # --- Signals -----------------------------------------------------------

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        self._wake(EditorConstants.RESIZE_PIPE_MARKER)

    def _handle_stop(self, signum, frame):
        """Handle SIGINT/SIGTERM by asking the loop to stop."""
        del frame  # Unused
        logger.info("Received signal %d, stopping", signum)
        self.request_stop()

    def _wake(self, marker: bytes):
        if self._wake_pipe_w is not None:
            os.write(self._wake_pipe_w, marker)

    def request_stop(self):
        """Stop the loop once the current cycle has finished."""
        self._stop_requested = True
        self._wake(EditorConstants.STOP_PIPE_MARKER)

    # --- Main loop ---------------------------------------------------------

    def run(self):
        """Run the main editor loop."""
        self.terminal.setup()
        self.running = True
        self._stop_requested = False
        self._wake_pipe_r, self._wake_pipe_w = os.pipe()

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_int_handler = signal.signal(signal.SIGINT, self._handle_stop)
        original_term_handler = signal.signal(signal.SIGTERM, self._handle_stop)

        try:
            with self.terminal.raw_mode():
                if self.source is None:
                    self.source = FdByteSource(self.terminal.input_fd)
                self._loop()
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
            signal.signal(signal.SIGTERM, original_term_handler)
            os.close(self._wake_pipe_r)
            os.close(self._wake_pipe_w)
            self._wake_pipe_r = self._wake_pipe_w = None
            self.terminal.cleanup()

    def _loop(self):
        while self.running:
            if self._stop_requested:
                logger.info("Stop requested, leaving main loop")
                self.running = False
                break

            self.draw()

            if not (self.source.buffered() or self.source.closed):
                ready, _, _ = select.select([self.source.fileno(), self._wake_pipe_r], [], [])
                if self._wake_pipe_r in ready:
                    self._handle_wake(os.read(self._wake_pipe_r, 1024))
                    continue

            try:
                event = self.decoder.decode_next(self.source)
            except StreamClosed:
                logger.info("Input stream closed, leaving main loop")
                self.running = False
                break
            self.handle_key(event)

    def _handle_wake(self, data: bytes):
        if EditorConstants.RESIZE_PIPE_MARKER in data:
            self.resize(*self.terminal.size())

    def resize(self, width: int, height: int):
        """Adopt a new terminal size."""
        logger.debug("Terminal resized to %dx%d", width, height)
        self.view.resize(width, height)

    def draw(self):
        """Draw the current editor state to terminal."""
        width, height = self.terminal.size()
        if (width, height) != (self.view.text_width, self.view.text_height + 1):
            self.resize(width, height)

        self.terminal.write(self.compositor.compose(
            self.buffer, self.view, width, height, status=self._status_text(width)))

    def _status_text(self, width: int) -> str:
        if self.prompt_mode == 'save_filename':
            message = EditorConstants.SAVE_PROMPT.format(self.prompt_input)
        else:
            message = self.status_message
        return self.compositor.status_text(
            self.buffer, self.view, width,
            filename=self.filename, modified=self.modified, message=message)

    # --- Key handling ------------------------------------------------------

    def handle_key(self, key_event: KeyEvent):
        """Handle one decoded key event.

        Args:
            key_event: KeyEvent produced by the decoder
        """
        # Clear status message on any keypress (except in prompt mode)
        if self.status_message and not self.prompt_mode:
            self.status_message = None

        if self.prompt_mode == 'save_filename':
            self._handle_filename_prompt(key_event)
            return

        if key_event.key_type == KeyType.ESCAPE:
            self.status_message = EditorConstants.ESCAPE_MESSAGE
            return

        was_modified = self.command_registry.execute(self, key_event)
        if was_modified is None:
            logger.debug("Ignoring unbound key %s %r", key_event.key_type.name, key_event.raw)
        elif was_modified:
            self.modified = True

    def quit(self):
        """Clear the screen and end the loop."""
        self.terminal.write(self.compositor.clear_screen())
        self.running = False

    def _handle_save(self):
        """Handle Ctrl-S save command."""
        if self.filename:
            self.save_file(self.filename)
        else:
            self.prompt_mode = 'save_filename'
            self.prompt_input = ""

    def _handle_filename_prompt(self, key_event: KeyEvent):
        """Handle keypress during filename prompt."""
        if key_event.key_type == KeyType.ESCAPE or key_event.is_ctrl('g'):
            self.prompt_mode = None
            self.prompt_input = ""
            self.status_message = EditorConstants.SAVE_CANCELLED_MESSAGE
        elif key_event.key_type == KeyType.ENTER:
            if self.prompt_input:
                self.prompt_mode = None
                self.save_file(self.prompt_input)
                self.prompt_input = ""
        elif key_event.key_type == KeyType.BACKSPACE:
            self.prompt_input = self.prompt_input[:-1]
        elif key_event.key_type == KeyType.CHARACTER:
            self.prompt_input += key_event.value

    # --- Files -------------------------------------------------------------

    def load_file(self, filename: str):
        """Load a file into the editor.

        A missing file starts a new document with that name. Any other
        failure keeps the current buffer and reports on the status line.

        Args:
            filename: Path to file to load
        """
        try:
            lines = fileio.read_lines(filename)
        except FileNotFoundError:
            logger.info("%s does not exist, starting a new file", filename)
            self.filename = filename
            self.modified = False
            return
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load %s: %s", filename, e)
            self.status_message = EditorConstants.LOAD_FAILED_MESSAGE.format(filename, e)
            return

        self.buffer.replace_lines(lines)
        self.view.reset()
        self.filename = filename
        self.modified = False

    def save_file(self, filename: str) -> bool:
        """Save the buffer to a file atomically.

        Args:
            filename: Path to save file to

        Returns:
            True if save succeeded, False otherwise
        """
        try:
            written = fileio.write_lines(filename, self.buffer.lines())
        except OSError as e:
            logger.warning("Could not save %s: %s", filename, e)
            self.status_message = EditorConstants.SAVE_FAILED_MESSAGE.format(e.strerror or e)
            return False

        self.filename = filename
        self.modified = False
        self.status_message = EditorConstants.SAVED_MESSAGE.format(written, filename)
        return True
