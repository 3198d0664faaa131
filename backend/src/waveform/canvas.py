"""RGBA pixel buffer allocation and clipped rectangle fill."""

import logging

import numpy as np

from waveform.geometry import Rect

logger = logging.getLogger(__name__)


def new_buffer(width: int, height: int) -> np.ndarray:
    """Fully transparent RGBA uint8 buffer of shape (height, width, 4)."""
    return np.zeros((height, width, 4), dtype=np.uint8)


def fill_rect(buffer: np.ndarray, rect: Rect, color: tuple[int, int, int, int]) -> None:
    """Fill rect with color in place, clipped to the buffer extents.

    Covers rows top..top+height and columns left..left+width, end-exclusive.
    Zero-area rects are a no-op.
    """
    if rect.empty:
        return

    buf_h, buf_w = buffer.shape[:2]
    x0 = max(0, rect.left)
    y0 = max(0, rect.top)
    x1 = min(buf_w, rect.left + rect.width)
    y1 = min(buf_h, rect.top + rect.height)

    if (x0, y0, x1, y1) != (
        rect.left,
        rect.top,
        rect.left + rect.width,
        rect.top + rect.height,
    ):
        logger.debug("Clipped %s to buffer %dx%d", rect, buf_w, buf_h)

    if x1 <= x0 or y1 <= y0:
        return
    buffer[y0:y1, x0:x1] = color
