"""rawedit CLI entry point.

Allows running via `python -m rawedit` and provides the console script
defined in `pyproject.toml`.

Usage:
    rawedit [--log FILE] [filename]
    rawedit --keytest
    rawedit --version
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .version import get_version_string

logger = logging.getLogger(__name__)

USAGE = "usage: rawedit [--log FILE] [filename] | --keytest | --version"


def _configure_logging(log_file: Optional[str], level: str = "DEBUG") -> None:
    """Send logs to a file; the terminal itself belongs to the editor."""
    if not log_file:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper(), logging.DEBUG),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_keyboard_test() -> None:
    """Print each decoded key event until ESC is pressed."""
    from .keys import FdByteSource, KeyDecoder, KeyType, StreamClosed
    from .terminal import TerminalInterface

    term = TerminalInterface()
    decoder = KeyDecoder()
    term.write("Keyboard test mode -- press keys to see decoded events. Quit with ESC.\r\n")

    with term.raw_mode():
        source = FdByteSource(term.input_fd)
        while True:
            try:
                event = decoder.decode_next(source)
            except StreamClosed:
                break
            raw = event.raw.hex(' ')
            if event.key_type == KeyType.ESCAPE:
                term.write(f"Pressed: ESC [{raw}]\r\n")
                break
            if event.value:
                term.write(f"Pressed: {event.key_type.name} {event.value!r} [{raw}]\r\n")
            else:
                term.write(f"Pressed: {event.key_type.name} [{raw}]\r\n")


def main(argv: Optional[list[str]] = None) -> None:
    # Very small arg parsing: version, key test, log file and optional filename
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ('--keytest', '--keyboard-test'):
        run_keyboard_test()
        return

    from .config import EditorConfig
    config = EditorConfig.load()
    log_file = config.log_file
    if args and args[0] == '--log':
        if len(args) < 2:
            print(USAGE, file=sys.stderr)
            sys.exit(2)
        log_file = args[1]
        args = args[2:]
    if len(args) > 1 or (args and args[0].startswith('-')):
        print(USAGE, file=sys.stderr)
        sys.exit(2)
    _configure_logging(log_file, config.log_level)

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    editor = Editor(config=config)
    if args:
        editor.load_file(args[0])
    editor.run()
    logger.info("Editor exited")


if __name__ == "__main__":  # pragma: no cover
    main()
