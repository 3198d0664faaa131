"""Amplitude-to-pixel mapping under linear or logarithmic scale."""

import math
from dataclasses import dataclass

from waveform.config import INT16_MAX, INT16_MIN, RenderConfig, ScaleMode, WaveformMode


@dataclass(frozen=True)
class ScaleConstants:
    """Per-render constants. plot_height is one side of the plot in FULL mode."""

    scale: ScaleMode
    plot_height: int
    max_plot_value: int
    unit_height: float

    @classmethod
    def for_config(cls, config: RenderConfig) -> "ScaleConstants":
        if config.mode is WaveformMode.FULL:
            # Each half can reach the full single-sided magnitude
            plot_height = config.image_height // 2
            max_plot_value = -INT16_MIN
        else:
            plot_height = config.image_height
            max_plot_value = INT16_MAX - INT16_MIN

        if config.scale is ScaleMode.LINEAR:
            unit_height = plot_height / max_plot_value
        else:
            unit_height = plot_height / math.log2(max_plot_value)

        return cls(config.scale, plot_height, max_plot_value, unit_height)

    def height(self, value: float) -> int:
        """Pixel height for a non-negative amplitude magnitude, capped at plot_height."""
        if self.scale is ScaleMode.LINEAR:
            pixels = int(self.unit_height * value)
        elif value < 1:
            # Silence never gets a bar
            pixels = 0
        else:
            pixels = int(math.log2(value) * self.unit_height)
        return max(0, min(pixels, self.plot_height))
