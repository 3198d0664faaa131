"""Render preset schema — serialize/deserialize .wavebars.json preset files."""

import json

from waveform.config import (
    RenderConfig,
    ScaleMode,
    WaveformMode,
    format_color,
    parse_color,
    validate_config,
)

CURRENT_VERSION = "1.0.0"

REQUIRED_KEYS = {"version", "image", "bars", "mode", "scale", "color"}
REQUIRED_IMAGE = {"width", "height"}
REQUIRED_BARS = {"width", "padding"}


def from_config(config: RenderConfig) -> dict:
    """Build a preset dict from a RenderConfig."""
    return {
        "version": CURRENT_VERSION,
        "image": {"width": config.image_width, "height": config.image_height},
        "bars": {"width": config.bar_width, "padding": config.bar_padding},
        "mode": config.mode.value,
        "scale": config.scale.value,
        "color": format_color(config.fill_color),
    }


def new_preset() -> dict:
    """Create a preset with defaults."""
    return from_config(RenderConfig())


def _build(preset: dict) -> RenderConfig:
    return RenderConfig(
        image_width=preset["image"]["width"],
        image_height=preset["image"]["height"],
        bar_width=preset["bars"]["width"],
        bar_padding=preset["bars"]["padding"],
        mode=WaveformMode(preset["mode"]),
        scale=ScaleMode(preset["scale"]),
        fill_color=parse_color(preset["color"]),
    )


def validate(preset: dict) -> list[str]:
    """Validate a preset dict. Returns list of error strings (empty = valid)."""
    if not isinstance(preset, dict):
        return ["Preset must be a JSON object"]

    errors = []

    missing = REQUIRED_KEYS - set(preset.keys())
    if missing:
        errors.append(f"Missing top-level keys: {sorted(missing)}")
        return errors  # Can't validate further

    if not isinstance(preset["version"], str):
        errors.append("'version' must be a string")

    for key, required in (("image", REQUIRED_IMAGE), ("bars", REQUIRED_BARS)):
        section = preset[key]
        if not isinstance(section, dict):
            errors.append(f"'{key}' must be a dict")
            continue
        missing_section = required - set(section.keys())
        if missing_section:
            errors.append(f"Missing {key} keys: {sorted(missing_section)}")

    modes = [m.value for m in WaveformMode]
    if preset["mode"] not in modes:
        errors.append(f"'mode' must be one of {modes}")
    scales = [s.value for s in ScaleMode]
    if preset["scale"] not in scales:
        errors.append(f"'scale' must be one of {scales}")

    if not isinstance(preset["color"], str):
        errors.append("'color' must be a hex string")
    else:
        try:
            parse_color(preset["color"])
        except ValueError as e:
            errors.append(str(e))

    if errors:
        return errors

    return validate_config(_build(preset))


def to_config(preset: dict) -> RenderConfig:
    """Convert a preset dict to a RenderConfig. Raises ValueError if invalid."""
    errors = validate(preset)
    if errors:
        raise ValueError(f"Invalid preset: {'; '.join(errors)}")
    return _build(preset)


def serialize(preset: dict) -> str:
    """Serialize preset to JSON string."""
    return json.dumps(preset, indent=2)


def deserialize(data: str) -> dict:
    """Deserialize JSON string to preset dict. Raises ValueError on invalid JSON or schema."""
    try:
        preset = json.loads(data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    errors = validate(preset)
    if errors:
        raise ValueError(f"Invalid preset: {'; '.join(errors)}")

    return preset
