import pytest
from PIL import Image


class FailingSink:
    """Accepts `good_writes` writes, then raises OSError like a closed pipe."""

    def __init__(self, good_writes=0):
        self.good_writes = good_writes
        self.written = []

    def write(self, data):
        if len(self.written) >= self.good_writes:
            raise OSError(32, "Broken pipe")
        self.written.append(data)


@pytest.fixture
def failing_sink():
    return FailingSink(good_writes=1)


@pytest.fixture
def split_image():
    """4x4 image: top half black, bottom half white."""
    img = Image.new("RGB", (4, 4), (0, 0, 0))
    for y in range(2, 4):
        for x in range(4):
            img.putpixel((x, y), (255, 255, 255))
    return img
