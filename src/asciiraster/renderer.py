import io
import logging
from collections.abc import Iterator
from typing import Protocol

import numpy as np

from asciiraster.errors import InvalidDimension, SinkError
from asciiraster.mapper import Cell, map_cell
from asciiraster.ramp import DEFAULT_RAMP, GlyphRamp
from asciiraster.sampling import compute_grid_size, sample_row

logger = logging.getLogger(__name__)

RESET = "\033[0m"


class Sink(Protocol):
    def write(self, data, /):
        """Append text (or UTF-8 bytes for binary sinks)."""
        ...


def _foreground(colour: tuple[int, int, int]) -> str:
    r, g, b = colour
    return f"\033[38;2;{r};{g};{b}m"


def format_row(cells: list[Cell], colour: bool = True) -> str:
    """Serialise one row of cells, ending with a newline.

    In colour mode a truecolor escape is emitted only when the colour changes,
    and the row is closed with a reset so styling never leaks past the line.
    """
    if not colour:
        return "".join(cell.glyph for cell in cells) + "\n"
    parts = []
    previous = None
    for cell in cells:
        if cell.colour != previous:
            parts.append(_foreground(cell.colour))
            previous = cell.colour
        parts.append(cell.glyph)
    if previous is not None:
        parts.append(RESET)
    parts.append("\n")
    return "".join(parts)


def _window(pixels: np.ndarray, vertical_offset: int) -> tuple[int, int]:
    """(width, height) of the sampling window starting `vertical_offset` rows down."""
    source_height, source_width = pixels.shape[:2]
    if not 0 <= vertical_offset < source_height:
        raise InvalidDimension(
            f"Vertical offset {vertical_offset} is outside an image {source_height} pixels tall"
        )
    return source_width, source_height - vertical_offset


def _lines(
    pixels: np.ndarray,
    top: int,
    cols: int,
    rows: int,
    ramp: GlyphRamp,
    colour: bool,
    normalize: bool,
    alpha_threshold: float,
) -> Iterator[str]:
    brightest = 1.0
    if normalize:
        brightest = max(float(sample_row(pixels, row, cols, rows, top)[1].max()) for row in range(rows)) or 1.0

    for row in range(rows):
        colours, lums, alphas = sample_row(pixels, row, cols, rows, top)
        cells = [
            map_cell(
                tuple(int(v) for v in colours[c]),
                float(lums[c]) / brightest,
                ramp,
                float(alphas[c]),
                alpha_threshold,
            )
            for c in range(cols)
        ]
        yield format_row(cells, colour)


def render_lines(
    pixels: np.ndarray,
    vertical_offset: int = 0,
    width: int | None = None,
    height: int | None = None,
    ramp: GlyphRamp = DEFAULT_RAMP,
    colour: bool = True,
    normalize: bool = False,
    alpha_threshold: float = 0,
) -> Iterator[str]:
    """Validate the request and return an iterator over the rendered rows.

    Dimension errors are raised here, before the first row is produced.
    """
    window_width, window_height = _window(pixels, vertical_offset)
    cols, rows = compute_grid_size(window_width, window_height, width, height)
    logger.debug(
        "Rendering %dx%d grid from %dx%d window at offset %d",
        cols,
        rows,
        window_width,
        window_height,
        vertical_offset,
    )
    return _lines(pixels, vertical_offset, cols, rows, ramp, colour, normalize, alpha_threshold)


def _is_binary(sink) -> bool:
    if isinstance(sink, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(sink, "mode", None)
    return isinstance(mode, str) and "b" in mode


def render_to_text(
    sink: Sink,
    pixels: np.ndarray,
    vertical_offset: int = 0,
    width: int | None = None,
    height: int | None = None,
    ramp: GlyphRamp = DEFAULT_RAMP,
    colour: bool = True,
    normalize: bool = False,
    alpha_threshold: float = 0,
) -> None:
    """Stream the rendered image to `sink` one row at a time.

    A sink failure is raised as SinkError; rows written before it remain.
    """
    lines = render_lines(pixels, vertical_offset, width, height, ramp, colour, normalize, alpha_threshold)
    binary = _is_binary(sink)
    try:
        for line in lines:
            sink.write(line.encode("utf-8") if binary else line)
        flush = getattr(sink, "flush", None)
        if flush is not None:
            flush()
    except OSError as exc:
        raise SinkError(f"Failed writing to output: {exc}") from exc
