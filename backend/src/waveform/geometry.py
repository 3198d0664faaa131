"""Per-bar rectangle layout for the three waveform modes."""

from typing import NamedTuple

from waveform.config import RenderConfig, WaveformMode
from waveform.scale import ScaleConstants


class Rect(NamedTuple):
    left: int
    top: int
    width: int
    height: int

    @property
    def empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def bar_left(index: int, bar_width: int, bar_padding: int) -> int:
    return index * (bar_width + bar_padding)


def bar_rect(
    index: int,
    lo: int,
    hi: int,
    config: RenderConfig,
    constants: ScaleConstants,
) -> Rect:
    """Rectangle to fill for bar `index` whose samples span [lo, hi].

    A bar that received no samples (lo > hi, the aggregation sentinels) gets
    a zero-height rectangle at the baseline of its mode.

    Args:
        index: Bar index, 0-based from the left edge.
        lo: Minimum sample in the bar.
        hi: Maximum sample in the bar.
        config: Active render config.
        constants: Scale constants derived from the same config.
    """
    left = bar_left(index, config.bar_width, config.bar_padding)
    width = config.bar_width
    lo, hi = int(lo), int(hi)
    mode = config.mode

    if mode is WaveformMode.FULL:
        midline = constants.plot_height
        if lo > hi:
            return Rect(left, midline, width, 0)

        upper = constants.height(abs(hi))
        upper_top = midline - upper if hi > 0 else midline + upper
        lower = constants.height(abs(lo))
        lower_pos = midline - lower if lo > 0 else midline + lower
        return Rect(left, upper_top, width, max(0, lower_pos - upper_top))

    height = 0 if lo > hi else constants.height(hi - lo)
    top = config.image_height - height
    if mode is WaveformMode.FULL_SYMMETRY:
        top //= 2
    return Rect(left, top, width, height)
