"""Audio decoding via PyAV — extracts one channel of int16 PCM from a media file."""

import logging

import av
import numpy as np

logger = logging.getLogger(__name__)


def to_int16(arr: np.ndarray) -> np.ndarray:
    """Convert a PCM array of any common sample format to int16.

    Float PCM is expected in [-1, 1] and is clipped. Wider integer formats
    keep their top 16 bits; unsigned 8-bit is re-centred on zero.
    """
    if arr.dtype == np.int16:
        return arr
    if np.issubdtype(arr.dtype, np.floating):
        scaled = np.round(arr.astype(np.float64) * 32767.0)
        return np.clip(scaled, -32768, 32767).astype(np.int16)
    if arr.dtype == np.uint8:
        return ((arr.astype(np.int16) - 128) << 8).astype(np.int16)
    if np.issubdtype(arr.dtype, np.signedinteger):
        shift = arr.dtype.itemsize * 8 - 16
        return (arr.astype(np.int64) >> shift).astype(np.int16)
    raise ValueError(f"Unsupported PCM dtype: {arr.dtype}")


def decode_samples(path: str, channel: int = 0) -> dict:
    """Decode one audio channel from a container to int16 PCM.

    Channels are never mixed: the requested channel is picked as-is.

    Args:
        path: Path to the media file (wav, flac, mp3, mp4, ...).
        channel: Zero-based channel index to extract.

    Returns:
        dict with keys:
            ok: bool
            samples: np.ndarray of shape (num_samples,) int16
            sample_rate: int
            channels: int (channel count of the source stream)
            duration_s: float
            error: str (only if ok=False)
    """
    try:
        container = av.open(path)
    except av.error.FFmpegError as e:
        return {"ok": False, "error": str(e)}

    try:
        if not container.streams.audio:
            return {"ok": False, "error": "No audio stream found"}

        stream = container.streams.audio[0]
        sample_rate = stream.rate
        channels = stream.channels

        if not 0 <= channel < channels:
            return {
                "ok": False,
                "error": f"Channel {channel} out of range (stream has {channels})",
            }

        chunks: list[np.ndarray] = []
        for frame in container.decode(audio=0):
            arr = frame.to_ndarray()
            if frame.format.is_planar:
                # (channels, samples)
                mono = arr[channel]
            else:
                # Packed: (1, samples * channels), interleaved
                mono = arr.reshape(-1, channels)[:, channel]
            chunks.append(to_int16(mono))
    except av.error.FFmpegError as e:
        return {"ok": False, "error": f"Undecodable audio: {e}"}
    finally:
        container.close()

    if chunks:
        samples = np.concatenate(chunks)
    else:
        samples = np.empty(0, dtype=np.int16)

    logger.info(
        "Decoded %d samples (channel %d of %d, %d Hz)",
        samples.shape[0],
        channel,
        channels,
        sample_rate,
    )

    return {
        "ok": True,
        "samples": samples,
        "sample_rate": sample_rate,
        "channels": channels,
        "duration_s": round(samples.shape[0] / sample_rate, 6) if sample_rate else 0.0,
    }
