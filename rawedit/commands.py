"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .buffer import CursorPosition
from .keys import KeyType

if TYPE_CHECKING:
    from .editor import Editor
    from .keys import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Movement commands don't modify the document."""
        self._move(editor, key_event)
        return False

    @abstractmethod
    def _move(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the movement."""
        pass


class LeftCharCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.move_left()


class RightCharCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.move_right()


class UpLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.move_up()


class DownLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.view.move_down()


class EditCommand(EditorCommand):
    """Base class for editing commands.

    Each edit goes through a buffer operation and the cursor adopts the
    position that operation returns.
    """

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        cursor = editor.view.cursor
        old_position = CursorPosition(cursor.column, cursor.row)
        new_position = self._edit(editor, cursor.row, cursor.column, key_event)
        editor.view.set_cursor(new_position)
        # Every real edit moves the cursor; backspace at (0, 0) does not
        return new_position != old_position

    @abstractmethod
    def _edit(self, editor: 'Editor', row: int, col: int, key_event: 'KeyEvent'):
        """Perform the edit and return the new cursor position."""
        pass


class BackspaceCommand(EditCommand):
    def _edit(self, editor, row, col, key_event):
        return editor.buffer.delete_char_before(row, col)


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, row, col, key_event):
        return editor.buffer.split_line(row, col)


class InsertCharCommand(EditCommand):
    def _edit(self, editor, row, col, key_event):
        return editor.buffer.insert_char(row, col, key_event.value)


class SystemCommand(EditorCommand):
    """Base class for system commands like save and quit."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """System commands don't modify document content directly."""
        self._execute_system(editor, key_event)
        return False

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.quit()


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor._handle_save()


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._insert_char = InsertCharCommand()
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.ARROW_LEFT, ''), LeftCharCommand())
        self.register((KeyType.ARROW_RIGHT, ''), RightCharCommand())
        self.register((KeyType.ARROW_UP, ''), UpLineCommand())
        self.register((KeyType.ARROW_DOWN, ''), DownLineCommand())

        # Editing commands
        self.register((KeyType.BACKSPACE, ''), BackspaceCommand())
        self.register((KeyType.ENTER, ''), InsertNewlineCommand())

        # System commands
        self.register((KeyType.CONTROL, 'q'), QuitCommand())
        self.register((KeyType.CONTROL, 's'), SaveCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        if key_type == KeyType.CHARACTER:
            return self._insert_char
        return self._commands.get((key_type, value))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> Optional[bool]:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified, False if it was not, and
            None when no command is bound to the key.
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command is None:
            return None
        return command.execute(editor, key_event)
