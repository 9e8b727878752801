from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from asciiraster.errors import DecodeError, InvalidDimension
from asciiraster.ramp import DEFAULT_RAMP, GlyphRamp
from asciiraster.renderer import Sink, render_to_text

logger = logging.getLogger(__name__)

# Pillow raises SyntaxError for some truncated or corrupt files, and
# DecompressionBombError (a plain Exception) for images over MAX_IMAGE_PIXELS
_DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


class ImageEngine:
    """Owns a decoded image and renders it as coloured text.

    The pixels are copied into a read-only RGBA array at construction, so one
    engine can serve any number of renders, including concurrent ones.
    """

    def __init__(
        self,
        image: Image.Image,
        *,
        ramp: GlyphRamp | str = DEFAULT_RAMP,
        colour: bool = True,
        normalize: bool = False,
        alpha_threshold: float = 0,
    ):
        if image.width == 0 or image.height == 0:
            raise InvalidDimension(f"Image is empty: {image.width}x{image.height}")
        pixels = np.array(image.convert("RGBA"), dtype=np.uint8)
        pixels.flags.writeable = False
        self._pixels = pixels
        self.ramp = GlyphRamp(ramp) if isinstance(ramp, str) else ramp
        self.colour = colour
        self.normalize = normalize
        self.alpha_threshold = alpha_threshold

    @classmethod
    def from_bytes(cls, data: bytes, **options) -> ImageEngine:
        """Decode an encoded image (PNG, JPEG, ...) and wrap it in an engine."""
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except _DECODE_ERRORS as exc:
            raise DecodeError(f"Cannot decode image ({len(data)} bytes): {exc}") from exc
        logger.debug("Decoded %s image %dx%d from bytes", image.format, image.width, image.height)
        return cls(image, **options)

    @classmethod
    def from_path(cls, path: str | Path, **options) -> ImageEngine:
        path = Path(path)
        try:
            image = Image.open(path)
        except _DECODE_ERRORS as exc:
            raise DecodeError(f"Cannot decode image {path}: {exc}") from exc
        with image:
            try:
                image.load()
            except _DECODE_ERRORS as exc:
                raise DecodeError(f"Cannot decode image {path}: {exc}") from exc
            logger.debug("Decoded %s image %dx%d from %s", image.format, image.width, image.height, path)
            return cls(image, **options)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def render_to_text(
        self,
        sink: Sink,
        vertical_offset: int = 0,
        width: int | None = None,
        height: int | None = None,
    ) -> None:
        render_to_text(
            sink,
            self._pixels,
            vertical_offset,
            width,
            height,
            ramp=self.ramp,
            colour=self.colour,
            normalize=self.normalize,
            alpha_threshold=self.alpha_threshold,
        )

    def render(self, vertical_offset: int = 0, width: int | None = None, height: int | None = None) -> str:
        """Render into memory and return the text."""
        buffer = io.StringIO()
        self.render_to_text(buffer, vertical_offset, width, height)
        return buffer.getvalue()
