"""Tests for the Pillow image sink."""

import numpy as np
import pytest

from conftest import sine
from image.writer import read_image, write_image
from waveform.config import RenderConfig, WaveformMode
from waveform.render import render


def _buffer():
    config = RenderConfig(
        image_width=120, image_height=40, bar_width=2, bar_padding=1,
        mode=WaveformMode.FULL, fill_color=(10, 200, 30, 255),
    )
    return render(sine(6000), config)


@pytest.mark.smoke
def test_png_round_trip(tmp_path):
    buf = _buffer()
    path = write_image(str(tmp_path / "wave.png"), buf)
    back = read_image(path)
    assert back.shape == (40, 120, 4)
    np.testing.assert_array_equal(back, buf)


def test_tiff_round_trip(tmp_path):
    buf = _buffer()
    path = write_image(str(tmp_path / "wave.tiff"), buf)
    np.testing.assert_array_equal(read_image(path), buf)


def test_webp_keeps_opaque_pixels(tmp_path):
    buf = _buffer()
    path = write_image(str(tmp_path / "wave.webp"), buf)
    back = read_image(path)
    opaque = buf[:, :, 3] == 255
    np.testing.assert_array_equal(back[opaque], buf[opaque])
    assert (back[~opaque][:, 3] == 0).all()


def test_unknown_extension_rejected(tmp_path):
    with pytest.raises(ValueError, match="Unsupported image extension"):
        write_image(str(tmp_path / "wave.gif"), _buffer())


@pytest.mark.parametrize(
    "bad",
    [
        np.zeros((4, 4, 3), dtype=np.uint8),
        np.zeros((4, 4), dtype=np.uint8),
        np.zeros((4, 4, 4), dtype=np.float32),
    ],
)
def test_non_rgba_buffer_rejected(tmp_path, bad):
    with pytest.raises(ValueError, match="RGBA"):
        write_image(str(tmp_path / "wave.png"), bad)
