"""Render configuration — layout/scale modes and the immutable RenderConfig."""

import numbers
import re
from dataclasses import dataclass
from enum import Enum

INT16_MIN = -32768
INT16_MAX = 32767


class WaveformMode(Enum):
    HALF = "half"
    FULL = "full"
    FULL_SYMMETRY = "full-symmetry"


class ScaleMode(Enum):
    LINEAR = "linear"
    LOGARITHM = "logarithm"


WHITE = (255, 255, 255, 255)

_HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}(?:[0-9a-fA-F]{2})?")


class InvalidConfigError(ValueError):
    """Raised when a RenderConfig fails validation. Holds every error found."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid render config: {'; '.join(errors)}")


@dataclass(frozen=True)
class RenderConfig:
    """Everything one render call needs besides the samples.

    Defaults match a 3200x800 strip of 20px bars with 5px gaps.
    """

    image_width: int = 3200
    image_height: int = 800
    bar_width: int = 20
    bar_padding: int = 5
    mode: WaveformMode = WaveformMode.HALF
    scale: ScaleMode = ScaleMode.LINEAR
    fill_color: tuple[int, int, int, int] = WHITE

    @property
    def bar_stride(self) -> int:
        """Horizontal distance between the left edges of adjacent bars."""
        return self.bar_width + self.bar_padding

    @property
    def bar_count(self) -> int:
        if self.bar_stride <= 0:
            return 0
        return (self.image_width + self.bar_padding) // self.bar_stride


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validate_config(config: RenderConfig) -> list[str]:
    """Validate a render config. Returns list of error strings (empty = valid)."""
    errors: list[str] = []

    for name in ("image_width", "image_height", "bar_width", "bar_padding"):
        if not _is_int(getattr(config, name)):
            errors.append(f"'{name}' must be an integer")
    if errors:
        return errors  # Can't validate further

    if config.image_width <= 0:
        errors.append(f"image_width must be > 0, got {config.image_width}")
    if config.image_height <= 0:
        errors.append(f"image_height must be > 0, got {config.image_height}")
    if config.bar_width < 0:
        errors.append(f"bar_width must be >= 0, got {config.bar_width}")
    if config.bar_padding < 0:
        errors.append(f"bar_padding must be >= 0, got {config.bar_padding}")
    if config.bar_stride <= 0:
        errors.append("bar_width + bar_padding must be > 0")

    if not isinstance(config.mode, WaveformMode):
        errors.append(f"Unknown waveform mode: {config.mode!r}")
    if not isinstance(config.scale, ScaleMode):
        errors.append(f"Unknown scale mode: {config.scale!r}")

    color = config.fill_color
    if (
        not isinstance(color, tuple)
        or len(color) != 4
        or not all(_is_int(c) and 0 <= c <= 255 for c in color)
    ):
        errors.append(f"fill_color must be 4 ints in 0..255 (RGBA), got {color!r}")

    return errors


def check_config(config: RenderConfig) -> RenderConfig:
    """Raise InvalidConfigError unless the config is valid. Returns it unchanged."""
    errors = validate_config(config)
    if errors:
        raise InvalidConfigError(errors)
    return config


def parse_color(value: str) -> tuple[int, int, int, int]:
    """Parse 'RRGGBB' or 'RRGGBBAA' hex (optional leading '#') into RGBA.

    Raises:
        ValueError: If the string is not 6 or 8 hex digits.
    """
    text = value.strip().lstrip("#")
    if not _HEX_COLOR.fullmatch(text):
        raise ValueError(f"Color must be RRGGBB or RRGGBBAA hex, got '{value}'")
    channels = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)


def format_color(color: tuple[int, int, int, int]) -> str:
    return "".join(f"{c:02x}" for c in color)
