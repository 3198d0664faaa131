"""Waveform rendering — int16 samples to an RGBA bar image."""

import logging

import numpy as np

from waveform.canvas import fill_rect, new_buffer
from waveform.config import RenderConfig, check_config
from waveform.geometry import Rect, bar_rect
from waveform.partition import aggregate, as_samples, bar_edges
from waveform.scale import ScaleConstants

logger = logging.getLogger(__name__)


def render_bars(samples, config: RenderConfig) -> list[Rect]:
    """Compute the rectangle of every bar, left to right.

    Validates the config and samples before any work is done.

    Raises:
        InvalidConfigError: If the config fails validation.
        EmptySamplesError: If samples is empty.
        ValueError: If samples is not a 1-D int16-compatible sequence.
    """
    check_config(config)
    arr = as_samples(samples)

    constants = ScaleConstants.for_config(config)
    count = config.bar_count
    edges = bar_edges(arr.shape[0], count)
    mins, maxs = aggregate(arr, edges)

    return [
        bar_rect(k, mins[k], maxs[k], config, constants) for k in range(count)
    ]


def render(samples, config: RenderConfig) -> np.ndarray:
    """Render samples as a bar waveform.

    Args:
        samples: One channel of 16-bit signed samples (sequence or ndarray).
        config: Image size, bar geometry, layout/scale modes and fill color.

    Returns:
        np.ndarray of shape (image_height, image_width, 4) uint8 RGBA.
        Pixels not covered by a bar stay (0, 0, 0, 0).
    """
    rects = render_bars(samples, config)

    buffer = new_buffer(config.image_width, config.image_height)
    for rect in rects:
        fill_rect(buffer, rect, config.fill_color)

    logger.debug(
        "Rendered %d bars (%s/%s) into %dx%d",
        len(rects),
        config.mode.value,
        config.scale.value,
        config.image_width,
        config.image_height,
    )
    return buffer
