import math
from dataclasses import dataclass

from asciiraster.charsets import STANDARD


@dataclass(frozen=True)
class GlyphRamp:
    """Characters ordered from sparse to dense, indexed by luminance in [0, 1].

    Brighter luminance always maps to a denser (or equal) glyph.
    """

    chars: str

    def __post_init__(self):
        if not self.chars:
            raise ValueError("Glyph ramp must contain at least one character")

    def __len__(self) -> int:
        return len(self.chars)

    def index(self, luminance: float) -> int:
        # NaN fails both comparisons, so it clamps to 0
        if not luminance > 0.0:
            return 0
        if luminance >= 1.0:
            return len(self.chars) - 1
        return math.floor(luminance * (len(self.chars) - 1))

    def map(self, luminance: float) -> str:
        return self.chars[self.index(luminance)]

    def inverted(self) -> "GlyphRamp":
        """Dense-to-sparse variant, for light backgrounds."""
        return GlyphRamp(self.chars[::-1])


DEFAULT_RAMP = GlyphRamp(STANDARD)
