from dataclasses import dataclass

from asciiraster.ramp import DEFAULT_RAMP, GlyphRamp

BLANK = " "


@dataclass(frozen=True)
class Cell:
    glyph: str
    colour: tuple[int, int, int]


def map_cell(
    colour: tuple[int, int, int],
    luminance: float,
    ramp: GlyphRamp = DEFAULT_RAMP,
    alpha: float = 255.0,
    alpha_threshold: float = 0,
) -> Cell:
    """Pick the ramp glyph for a sampled luminance and carry the colour through.

    Cells whose average alpha is at or below `alpha_threshold` are drawn blank.
    """
    if alpha <= alpha_threshold:
        return Cell(BLANK, colour)
    return Cell(ramp.map(luminance), colour)
