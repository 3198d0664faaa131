import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

import sentry_sdk

from _version import __version__
from audio.decoder import decode_samples
from diagnostics import app_dir, init_diagnostics
from engine.export import export_variants, variant_configs, variant_filename
from preset import schema
from security import strip_pii, validate_input, validate_output_path, validate_sample_count
from waveform.config import (
    RenderConfig,
    ScaleMode,
    WaveformMode,
    parse_color,
    validate_config,
)

logger = logging.getLogger(__name__)


def _init_sentry():
    """Consent-gated Sentry init: no DSN unless the user opted in."""
    consent_path = os.path.join(app_dir(), "telemetry_consent")
    dsn = ""
    if os.path.exists(consent_path) and Path(consent_path).read_text().strip() == "yes":
        dsn = os.environ.get("SENTRY_DSN", "")

    sentry_sdk.init(
        dsn=dsn,
        release=f"wavebars@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        traces_sample_rate=0.1,
        before_send=strip_pii,
        max_breadcrumbs=50,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavebars", description="Render an audio file as a bar waveform image"
    )
    parser.add_argument("input", help="Audio or video file to render")
    parser.add_argument(
        "-o", "--output-dir", default=".", help="Directory for the rendered images"
    )
    parser.add_argument("--preset", help="JSON render preset to start from")
    parser.add_argument(
        "--mode", choices=[m.value for m in WaveformMode], help="Bar layout"
    )
    parser.add_argument(
        "--scale", choices=[s.value for s in ScaleMode], help="Amplitude scale"
    )
    parser.add_argument("--width", type=int, help="Image width in pixels")
    parser.add_argument("--height", type=int, help="Image height in pixels")
    parser.add_argument("--bar-width", type=int, help="Bar width in pixels")
    parser.add_argument("--bar-padding", type=int, help="Gap between bars in pixels")
    parser.add_argument("--color", help="Fill color as RRGGBB or RRGGBBAA hex")
    parser.add_argument(
        "--channel", type=int, default=0, help="Audio channel to render (default 0)"
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Render every mode/scale combination instead of a single image",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Preset (or defaults) overridden by any explicit flags.

    Raises:
        ValueError: On an unreadable/invalid preset or a malformed color.
    """
    if args.preset:
        try:
            text = Path(args.preset).read_text()
        except OSError as e:
            raise ValueError(f"Cannot read preset: {e}") from e
        config = schema.to_config(schema.deserialize(text))
    else:
        config = RenderConfig()

    overrides = {}
    if args.mode:
        overrides["mode"] = WaveformMode(args.mode)
    if args.scale:
        overrides["scale"] = ScaleMode(args.scale)
    if args.width is not None:
        overrides["image_width"] = args.width
    if args.height is not None:
        overrides["image_height"] = args.height
    if args.bar_width is not None:
        overrides["bar_width"] = args.bar_width
    if args.bar_padding is not None:
        overrides["bar_padding"] = args.bar_padding
    if args.color:
        overrides["fill_color"] = parse_color(args.color)
    return replace(config, **overrides)


def _fail(message: str) -> int:
    logger.error(message)
    print(f"wavebars: error: {message}", file=sys.stderr)
    return 1


def run(args: argparse.Namespace) -> int:
    """Decode, render and write. Returns a process exit code."""
    errors = validate_input(args.input)
    if errors:
        return _fail("; ".join(errors))

    try:
        base = build_config(args)
    except ValueError as e:
        return _fail(str(e))

    configs = variant_configs(base) if args.all else [base]
    for config in configs:
        errors = validate_config(config)
        if errors:
            return _fail("; ".join(errors))

    output_dir = os.path.abspath(args.output_dir)
    for config in configs:
        errors = validate_output_path(os.path.join(output_dir, variant_filename(config)))
        if errors:
            return _fail("; ".join(errors))

    decoded = decode_samples(args.input, channel=args.channel)
    if not decoded["ok"]:
        return _fail(decoded["error"])

    errors = validate_sample_count(decoded["samples"].shape[0])
    if errors:
        return _fail("; ".join(errors))

    paths = export_variants(decoded["samples"], output_dir, configs)

    for path in paths:
        print(path)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_diagnostics(verbose=args.verbose)
    _init_sentry()
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
