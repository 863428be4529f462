"""Whole-file reading and atomic writing of buffer lines."""

import logging
import os
import tempfile

logger = logging.getLogger(__name__)


def read_lines(filename: str) -> list[str]:
    """Read a UTF-8 file and split it into lines on newline characters.

    Raises:
        OSError: the file cannot be read.
        UnicodeDecodeError: the file is not valid UTF-8.
    """
    # newline='' keeps \r bytes so a load-and-save round trip is exact
    with open(filename, 'r', encoding='utf-8', newline='') as f:
        content = f.read()
    lines = content.split('\n') if content else [""]
    logger.info("Read %d lines from %s", len(lines), filename)
    return lines


def write_lines(filename: str, lines: list[str]) -> int:
    """Save lines joined by newlines to ``filename`` atomically.

    The content goes to a temporary file in the same directory, which is
    then renamed over the target, so a failed save never truncates the
    existing file.

    Returns:
        Number of bytes written.

    Raises:
        OSError: the file could not be written.
    """
    data = '\n'.join(lines).encode('utf-8')

    # Same directory keeps the rename on one filesystem
    dir_name = os.path.dirname(filename) or '.'
    suffix = os.path.splitext(filename)[1]
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name, suffix=suffix,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_filename, filename)
    except OSError:
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_filename)
        raise

    logger.info("Wrote %d bytes to %s", len(data), filename)
    return len(data)
