"""Tests for per-bar rectangle geometry in each layout mode."""

import numpy as np
import pytest

from waveform.config import INT16_MAX, INT16_MIN, RenderConfig, ScaleMode, WaveformMode
from waveform.geometry import Rect, bar_left, bar_rect
from waveform.scale import ScaleConstants

pytestmark = pytest.mark.smoke


def _setup(mode, height, scale=ScaleMode.LINEAR):
    config = RenderConfig(
        image_width=100,
        image_height=height,
        bar_width=3,
        bar_padding=2,
        mode=mode,
        scale=scale,
    )
    return config, ScaleConstants.for_config(config)


def test_bar_left_stride():
    assert bar_left(0, 3, 2) == 0
    assert bar_left(4, 3, 2) == 20
    lefts = [bar_left(k, 20, 5) for k in range(128)]
    assert all(b - a == 25 for a, b in zip(lefts, lefts[1:]))


def test_half_grows_from_bottom():
    # 65535px plot -> 1px per unit, exact heights
    config, c = _setup(WaveformMode.HALF, 65535)
    rect = bar_rect(2, -100, 200, config, c)
    assert rect == Rect(left=10, top=65535 - 300, width=3, height=300)


def test_full_symmetry_is_centred():
    config, c = _setup(WaveformMode.FULL_SYMMETRY, 65535)
    rect = bar_rect(0, -100, 200, config, c)
    assert rect.height == 300
    assert rect.top == (65535 - 300) // 2


def test_full_straddles_midline():
    config, c = _setup(WaveformMode.FULL, 65536)
    rect = bar_rect(1, -50, 100, config, c)
    assert rect == Rect(left=5, top=32768 - 100, width=3, height=150)


def test_full_all_positive():
    config, c = _setup(WaveformMode.FULL, 65536)
    rect = bar_rect(0, 40, 100, config, c)
    assert rect.top == 32768 - 100
    assert rect.top + rect.height == 32768 - 40


def test_full_all_negative():
    config, c = _setup(WaveformMode.FULL, 65536)
    rect = bar_rect(0, -30, -10, config, c)
    assert rect.top == 32768 + 10
    assert rect.top + rect.height == 32768 + 30


def test_full_silence_is_zero_height():
    config, c = _setup(WaveformMode.FULL, 100)
    rect = bar_rect(0, 0, 0, config, c)
    assert rect.height == 0
    assert rect.top == 50


@pytest.mark.parametrize("mode", list(WaveformMode))
@pytest.mark.parametrize("scale", list(ScaleMode))
def test_empty_bar_is_zero_height(mode, scale):
    """Sentinel (INT16_MAX, INT16_MIN) means no samples: no bar, not a full one."""
    config, c = _setup(mode, 100, scale)
    rect = bar_rect(3, INT16_MAX, INT16_MIN, config, c)
    assert rect.height == 0
    assert rect.empty
    assert rect.left == 15


@pytest.mark.parametrize("mode", list(WaveformMode))
@pytest.mark.parametrize("scale", list(ScaleMode))
def test_extremes_stay_inside_image(mode, scale):
    config, c = _setup(mode, 99, scale)
    rect = bar_rect(0, INT16_MIN, INT16_MAX, config, c)
    assert rect.top >= 0
    assert rect.top + rect.height <= 99
    assert rect.height > 0


@pytest.mark.parametrize("scale", list(ScaleMode))
def test_full_rect_height_non_negative(scale):
    config, c = _setup(WaveformMode.FULL, 200, scale)
    rng = np.random.default_rng(3)
    pairs = rng.integers(INT16_MIN, INT16_MAX + 1, (500, 2))
    for a, b in pairs:
        lo, hi = min(a, b), max(a, b)
        rect = bar_rect(0, lo, hi, config, c)
        lower = c.height(abs(lo))
        lower_pos = 100 - lower if lo > 0 else 100 + lower
        assert lower_pos >= rect.top
        assert rect.top + rect.height == lower_pos
        assert 0 <= rect.top <= 200


def test_half_height_uses_range_not_magnitude():
    config, c = _setup(WaveformMode.HALF, 65535)
    assert bar_rect(0, 1000, 1000, config, c).height == 0
    assert bar_rect(0, 1000, 1500, config, c).height == 500
