class RenderError(Exception):
    """Base class for all asciiraster errors."""


class DecodeError(RenderError, ValueError):
    """The input bytes could not be decoded as an image."""


class InvalidDimension(RenderError, ValueError):
    """A requested or computed render dimension is zero, negative or out of range."""


class SinkError(RenderError, OSError):
    """The output sink rejected a write. Text written before the failure stays in the sink."""
