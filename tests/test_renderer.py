import io

import numpy as np
import pytest
from PIL import Image

from asciiraster.charsets import BLOCKS
from asciiraster.errors import InvalidDimension, SinkError
from asciiraster.mapper import Cell
from asciiraster.ramp import GlyphRamp
from asciiraster.renderer import RESET, format_row, render_lines, render_to_text
from asciiraster.sampling import DEFAULT_GRID_SIZE

RED = "\033[38;2;255;0;0m"


def _pixels(img):
    return np.asarray(img.convert("RGBA"))


def _render(img, **kwargs):
    sink = io.StringIO()
    render_to_text(sink, _pixels(img), **kwargs)
    return sink.getvalue()


def test_solid_red_two_by_two():
    img = Image.new("RGB", (2, 2), (255, 0, 0))
    result = _render(img, width=2, height=2)
    # Red luma 0.299 -> floor(0.299 * 9) == 2 -> ":"
    assert result == f"{RED}::{RESET}\n" * 2


def test_plain_output_has_no_escapes():
    img = Image.new("RGB", (4, 2), (255, 255, 255))
    assert _render(img, width=4, height=2, colour=False) == "@@@@\n@@@@\n"


def test_colour_escape_only_on_change():
    img = Image.new("RGB", (4, 1), (255, 0, 0))
    for x in range(2, 4):
        img.putpixel((x, 0), (0, 0, 255))
    result = _render(img, width=4, height=1)
    assert result.count("\033[38;2;") == 2
    assert result.startswith(RED)
    assert "\033[38;2;0;0;255m" in result
    assert result.endswith(RESET + "\n")


def test_default_grid_size():
    img = Image.new("RGB", (10, 10), (128, 128, 128))
    lines = _render(img, colour=False).splitlines()
    cols, rows = DEFAULT_GRID_SIZE
    assert len(lines) == rows
    assert all(len(line) == cols for line in lines)


def test_width_only_preserves_aspect():
    img = Image.new("RGB", (100, 50), (128, 128, 128))
    lines = _render(img, width=50, colour=False).splitlines()
    assert len(lines) == 25
    assert all(len(line) == 50 for line in lines)


@pytest.mark.parametrize("width,height", [(0, None), (None, 0), (0, 5)])
def test_zero_dimension_writes_nothing(width, height):
    img = Image.new("RGB", (4, 4))
    sink = io.StringIO()
    with pytest.raises(InvalidDimension):
        render_to_text(sink, _pixels(img), width=width, height=height)
    assert sink.getvalue() == ""


@pytest.mark.parametrize("offset", [4, 100, -1])
def test_offset_outside_image_writes_nothing(offset):
    img = Image.new("RGB", (4, 4))
    sink = io.StringIO()
    with pytest.raises(InvalidDimension, match="offset"):
        render_to_text(sink, _pixels(img), vertical_offset=offset, width=2)
    assert sink.getvalue() == ""


def test_offset_shifts_window(split_image):
    assert _render(split_image, width=1, height=1, colour=False) == "=\n"
    assert _render(split_image, vertical_offset=2, width=1, height=1, colour=False) == "@\n"


def test_offset_grid_follows_window_aspect():
    img = Image.new("RGB", (100, 60))
    lines = _render(img, vertical_offset=10, width=50, colour=False).splitlines()
    assert len(lines) == 25


def test_render_lines_validates_eagerly():
    img = Image.new("RGB", (4, 4))
    with pytest.raises(InvalidDimension):
        render_lines(_pixels(img), width=0)


def test_render_lines_yields_rows(split_image):
    lines = list(render_lines(_pixels(split_image), width=2, height=2, colour=False))
    assert lines == ["  \n", "@@\n"]


def test_rendering_is_deterministic():
    rng = np.random.default_rng(7)
    img = Image.fromarray(rng.integers(0, 256, size=(30, 40, 3), dtype=np.uint8))
    assert _render(img, width=17) == _render(img, width=17)


def test_binary_sink_receives_utf8():
    img = Image.new("RGB", (2, 1), (255, 255, 255))
    sink = io.BytesIO()
    render_to_text(sink, _pixels(img), width=2, height=1, ramp=GlyphRamp(BLOCKS), colour=False)
    assert sink.getvalue() == "██\n".encode("utf-8")


def test_sink_failure_keeps_partial_output(failing_sink, split_image):
    with pytest.raises(SinkError) as excinfo:
        render_to_text(failing_sink, _pixels(split_image), width=2, height=2, colour=False)
    assert isinstance(excinfo.value, OSError)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert failing_sink.written == ["  \n"]


def test_normalize_stretches_to_brightest():
    img = Image.new("RGB", (2, 1), (64, 64, 64))
    assert _render(img, width=2, height=1, colour=False) == "::\n"
    assert _render(img, width=2, height=1, colour=False, normalize=True) == "@@\n"


def test_normalize_black_image_stays_blank():
    img = Image.new("RGB", (2, 1), (0, 0, 0))
    assert _render(img, width=2, height=1, colour=False, normalize=True) == "  \n"


def test_transparent_pixels_render_blank():
    img = Image.new("RGBA", (2, 2), (255, 255, 255, 0))
    assert _render(img, width=2, height=2, colour=False) == "  \n  \n"


def test_format_row():
    cells = [Cell("a", (1, 2, 3)), Cell("b", (1, 2, 3)), Cell("c", (4, 5, 6))]
    assert format_row(cells) == f"\033[38;2;1;2;3mab\033[38;2;4;5;6mc{RESET}\n"
    assert format_row(cells, colour=False) == "abc\n"
