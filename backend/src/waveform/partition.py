"""Bar partitioning and per-bar min/max aggregation over int16 samples."""

import numpy as np

from waveform.config import INT16_MAX, INT16_MIN


class EmptySamplesError(ValueError):
    """Raised when a render is attempted on an empty sample sequence."""


def bar_count(image_width: int, bar_width: int, bar_padding: int) -> int:
    """Number of whole bars (plus the gaps between them) that fit in the width."""
    return (image_width + bar_padding) // (bar_width + bar_padding)


def as_samples(samples) -> np.ndarray:
    """Coerce an integer sequence to a 1-D int16 array.

    Raises:
        EmptySamplesError: If there are no samples.
        ValueError: If the input is not 1-D, not integer, or out of int16 range.
    """
    arr = np.asarray(samples)
    if arr.ndim != 1:
        raise ValueError(f"Samples must be 1-D (one channel), got shape {arr.shape}")
    if arr.size == 0:
        raise EmptySamplesError("Sample sequence is empty")
    if arr.dtype == np.int16:
        return arr
    if not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"Samples must be 16-bit integers, got dtype {arr.dtype}")
    if int(arr.min()) < INT16_MIN or int(arr.max()) > INT16_MAX:
        raise ValueError("Sample values out of int16 range")
    return arr.astype(np.int16)


def bar_edges(num_samples: int, count: int) -> np.ndarray:
    """Sample index boundaries for each bar.

    Sample i lands in bar floor(i * count / num_samples), the index reached by
    accumulating count/num_samples per sample. Integer arithmetic keeps the
    boundaries exact: edges[0] == 0, edges[-1] == num_samples, non-decreasing.

    Returns:
        np.ndarray of shape (count + 1,) int64. Bar k owns samples
        edges[k]:edges[k + 1] (empty when the two are equal).
    """
    if count == 0:
        return np.zeros(1, dtype=np.int64)
    k = np.arange(count + 1, dtype=np.int64)
    # ceil(k * N / count) without floats
    return (k * num_samples + count - 1) // count


def aggregate(samples: np.ndarray, edges: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Per-bar (min, max) over the ranges given by bar_edges.

    Bars with no samples keep the sentinel pair (INT16_MAX, INT16_MIN), so
    min > max marks an empty bar.
    """
    count = len(edges) - 1
    mins = np.full(count, INT16_MAX, dtype=np.int16)
    maxs = np.full(count, INT16_MIN, dtype=np.int16)

    starts = edges[:-1]
    filled = edges[1:] > starts
    if not filled.any():
        return mins, maxs

    # Empty bars have zero width, so consecutive non-empty starts still
    # delimit exactly one bar each for reduceat.
    idx = starts[filled]
    mins[filled] = np.minimum.reduceat(samples, idx)
    maxs[filled] = np.maximum.reduceat(samples, idx)
    return mins, maxs
