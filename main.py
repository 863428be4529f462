#!/usr/bin/env python3
"""rawedit - A small terminal line editor.

Usage:
    python main.py [filename]

Controls:
    Arrow keys: Move the cursor
    Ctrl-S: Save file
    Ctrl-Q: Quit
    Type to insert text
    Backspace: Delete character / join with previous line
    Enter: Split line
"""

from rawedit.__main__ import main


if __name__ == "__main__":
    main()
