"""Image encoding via Pillow — persists RGBA pixel buffers."""

import logging
from pathlib import Path

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

FORMATS = {
    ".png": "PNG",
    ".webp": "WEBP",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}


def write_image(path: str, buffer: np.ndarray) -> str:
    """Write an RGBA uint8 buffer of shape (height, width, 4).

    The image format follows the file extension.

    Raises:
        ValueError: If the buffer is not RGBA uint8 or the extension is unknown.
    """
    if buffer.ndim != 3 or buffer.shape[2] != 4 or buffer.dtype != np.uint8:
        raise ValueError(
            f"Expected RGBA uint8 buffer (H, W, 4), got {buffer.shape} {buffer.dtype}"
        )

    ext = Path(path).suffix.lower()
    fmt = FORMATS.get(ext)
    if fmt is None:
        raise ValueError(f"Unsupported image extension '{ext}'. Allowed: {sorted(FORMATS)}")

    img = Image.fromarray(np.ascontiguousarray(buffer))
    if fmt == "WEBP":
        img.save(path, format=fmt, lossless=True)
    else:
        img.save(path, format=fmt)

    logger.info("Wrote %dx%d %s: %s", buffer.shape[1], buffer.shape[0], fmt, path)
    return path


def read_image(path: str) -> np.ndarray:
    """Load an image back as an RGBA uint8 array."""
    with Image.open(path) as img:
        return np.asarray(img.convert("RGBA")).copy()
