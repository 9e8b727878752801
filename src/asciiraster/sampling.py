from functools import lru_cache

import numpy as np

from asciiraster.errors import InvalidDimension

# (cols, rows) used when neither width nor height is requested
DEFAULT_GRID_SIZE = (80, 24)

# Rec. 601 luma weights for R, G, B
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def compute_grid_size(
    source_width: int,
    source_height: int,
    width: int | None = None,
    height: int | None = None,
) -> tuple[int, int]:
    """Resolve the requested output size into a concrete (cols, rows) grid.

    With neither dimension given the default grid is used. With exactly one,
    the other follows the source aspect ratio. With both, they are used as
    given and the aspect ratio is not enforced.
    """
    if source_width <= 0 or source_height <= 0:
        raise InvalidDimension(f"Source image is empty: {source_width}x{source_height}")
    for name, value in (("width", width), ("height", height)):
        if value is not None and value <= 0:
            raise InvalidDimension(f"Requested {name} must be positive, got {value}")

    if width is None and height is None:
        return DEFAULT_GRID_SIZE
    if height is None:
        return width, max(1, round(width * source_height / source_width))
    if width is None:
        return max(1, round(height * source_width / source_height)), height
    return width, height


def _span(index: int, count: int, size: int, start: int = 0) -> tuple[int, int]:
    """Half-open pixel range covered by cell `index` of `count` cells over `size` pixels."""
    lo = start + index * size // count
    hi = start + (index + 1) * size // count
    if hi <= lo:
        # Zero-area cell: fall back to the nearest valid pixel
        lo = min(lo, start + size - 1)
        hi = lo + 1
    return lo, hi


def cell_bounds(
    col: int, row: int, cols: int, rows: int, width: int, height: int, top: int = 0
) -> tuple[int, int, int, int]:
    """Map a grid cell back to an (x0, y0, x1, y1) rectangle in source-pixel space.

    The sampling window covers source rows [top, height). Every rectangle
    contains at least one pixel and lies inside the source.
    """
    if not 0 <= top < height:
        raise InvalidDimension(f"Window offset {top} is outside an image {height} pixels tall")
    x0, x1 = _span(col, cols, width)
    y0, y1 = _span(row, rows, height - top, top)
    return x0, y0, x1, y1


def luminance(r, g, b):
    """Perceived brightness in [0, 1] from 0-255 channel values. Accepts scalars or arrays."""
    wr, wg, wb = LUMA_WEIGHTS
    return (wr * r + wg * g + wb * b) / 255.0


def sample_cell(pixels: np.ndarray, bounds: tuple[int, int, int, int]) -> tuple[tuple[int, int, int], float, float]:
    """Average colour, luminance and alpha over one cell rectangle.

    `pixels` is an (height, width, 3 or 4) uint8 array. Returns
    ((r, g, b), luminance, alpha) with alpha 255.0 for RGB input.
    """
    x0, y0, x1, y1 = bounds
    region = pixels[y0:y1, x0:x1]
    count = region.shape[0] * region.shape[1]
    means = region.sum(axis=(0, 1), dtype=np.float64) / count
    colour = tuple(int(v) for v in np.rint(means[:3]))
    alpha = float(means[3]) if pixels.shape[2] == 4 else 255.0
    return colour, float(luminance(*means[:3])), alpha


@lru_cache(maxsize=32)
def column_spans(cols: int, width: int) -> tuple[np.ndarray, np.ndarray]:
    """Read-only (x0s, x1s) pixel edges of every column, shared by all rows of a grid."""
    spans = np.array([_span(c, cols, width) for c in range(cols)])
    x0s, x1s = spans[:, 0].copy(), spans[:, 1].copy()
    x0s.flags.writeable = False
    x1s.flags.writeable = False
    return x0s, x1s


def sample_row(
    pixels: np.ndarray, row: int, cols: int, rows: int, top: int = 0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample every cell of one grid row at once.

    Returns (colours, luminances, alphas) with shapes (cols, 3), (cols,) and
    (cols,). Matches `sample_cell` on each cell's bounds.
    """
    height, width, channels = pixels.shape
    _, y0, _, y1 = cell_bounds(0, row, cols, rows, width, height, top)
    x0s, x1s = column_spans(cols, width)

    # Column sums over the band, then prefix sums so each cell is a difference
    band = pixels[y0:y1].sum(axis=0, dtype=np.float64)  # (width, channels)
    prefix = np.zeros((width + 1, channels))
    np.cumsum(band, axis=0, out=prefix[1:])

    counts = ((x1s - x0s) * (y1 - y0)).astype(np.float64)
    means = (prefix[x1s] - prefix[x0s]) / counts[:, None]

    colours = np.rint(means[:, :3]).astype(np.uint8)
    lums = luminance(means[:, 0], means[:, 1], means[:, 2])
    alphas = means[:, 3] if channels == 4 else np.full(cols, 255.0)
    return colours, lums, alphas
