import shutil
import uuid
from pathlib import Path

import av
import numpy as np
import pytest


def write_wav(path: str, samples: np.ndarray, sample_rate: int = 44100) -> str:
    """Write int16 PCM to a WAV file with PyAV.

    samples is (num_samples,) for mono or (num_samples, 2) for stereo.
    """
    if samples.ndim == 1:
        samples = samples.reshape(-1, 1)
    channels = samples.shape[1]
    layout = "mono" if channels == 1 else "stereo"

    container = av.open(path, mode="w")
    stream = container.add_stream("pcm_s16le", rate=sample_rate)
    stream.layout = layout

    # Packed s16: one row of interleaved samples
    packed = np.ascontiguousarray(samples.astype(np.int16)).reshape(1, -1)
    frame = av.AudioFrame.from_ndarray(packed, format="s16", layout=layout)
    frame.sample_rate = sample_rate
    for pkt in stream.encode(frame):
        container.mux(pkt)
    for pkt in stream.encode():
        container.mux(pkt)
    container.close()
    return path


def sine(num_samples: int, amplitude: int = 16000, period: int = 100) -> np.ndarray:
    t = np.arange(num_samples, dtype=np.float64)
    return np.round(amplitude * np.sin(2 * np.pi * t / period)).astype(np.int16)


@pytest.fixture
def mono_wav_path(tmp_path):
    """1s mono 440Hz-ish sine at 44.1kHz."""
    return write_wav(str(tmp_path / "mono.wav"), sine(44100))


@pytest.fixture
def stereo_wav_path(tmp_path):
    """Stereo WAV: left = sine, right = constant 1234."""
    left = sine(8000)
    right = np.full(8000, 1234, dtype=np.int16)
    return write_wav(str(tmp_path / "stereo.wav"), np.stack([left, right], axis=1))


@pytest.fixture
def home_tmp_path():
    """tmp_path equivalent under ~/ for tests that go through validate_output_path."""
    base = Path.home() / ".cache" / "wavebars" / "test-tmp"
    base.mkdir(parents=True, exist_ok=True)
    d = base / f"test_{uuid.uuid4().hex[:8]}"
    d.mkdir()
    yield d
    shutil.rmtree(d, ignore_errors=True)
