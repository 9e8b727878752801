import os
import sys

from asciiraster.sampling import DEFAULT_GRID_SIZE


def get_terminal_size(stream=None) -> tuple[int, int]:
    """Return (columns, rows) of the terminal behind `stream`, or the default grid if it is not a tty."""
    stream = stream if stream is not None else sys.stdout
    if not stream.isatty():
        return DEFAULT_GRID_SIZE
    size = os.get_terminal_size(stream.fileno())
    return (size.columns, size.lines)
