"""Diagnostics — structured logging, faulthandler, crash dumps.

Layers:
1. Structured JSON logging to a RotatingFileHandler, plain text to stderr
2. faulthandler: C-level crash tracebacks (SIGSEGV in codecs, etc.)
3. sys.excepthook: unhandled Python exceptions -> JSON crash dumps
"""

import datetime
import faulthandler
import json
import logging
import logging.handlers
import os
import sys
import traceback
from pathlib import Path

from security import strip_pii

logger = logging.getLogger(__name__)

APP_DIR = "~/.wavebars"
LOG_FILE = "wavebars.log"
FAULT_FILE = "wavebars_fault.log"

MAX_CRASH_REPORTS = 5
MAX_LOG_AGE_DAYS = 7


def app_dir() -> str:
    return os.path.expanduser(APP_DIR)


def _validate_log_dir(env_dir: str) -> str:
    """Validate APP_LOG_DIR is under the app dir. Returns safe path."""
    default = os.path.join(app_dir(), "logs")
    if not env_dir:
        return default
    resolved = os.path.realpath(env_dir)
    allowed = os.path.realpath(app_dir())
    if resolved != allowed and not resolved.startswith(allowed + os.sep):
        logger.warning("APP_LOG_DIR outside %s, using default", APP_DIR)
        return default
    return resolved


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry)


def _cleanup_old_logs(log_dir: str):
    cutoff = datetime.datetime.now() - datetime.timedelta(days=MAX_LOG_AGE_DAYS)
    try:
        for f in Path(log_dir).glob(f"{LOG_FILE}*"):
            if f.stat().st_mtime < cutoff.timestamp():
                f.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Log cleanup skipped: %s", e)


def _cleanup_old_crash_reports(crash_dir: str):
    """Keep only the newest MAX_CRASH_REPORTS crash files."""
    try:
        crash_files = sorted(
            Path(crash_dir).glob("crash_*.json"),
            key=lambda f: f.stat().st_mtime,
            reverse=True,
        )
        for old_file in crash_files[MAX_CRASH_REPORTS:]:
            old_file.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Crash report cleanup skipped: %s", e)


def setup_structured_logging(log_dir: str | None = None, verbose: bool = False) -> str:
    """Configure JSON file logging with rotation plus a stderr handler.

    Args:
        log_dir: Override log directory (validated against the app dir).
        verbose: Log DEBUG to stderr instead of WARNING.

    Returns:
        The log directory actually used.
    """
    resolved_dir = _validate_log_dir(log_dir or os.environ.get("APP_LOG_DIR", ""))
    os.makedirs(resolved_dir, mode=0o700, exist_ok=True)

    log_level = os.environ.get("APP_LOG_LEVEL", "INFO").upper()

    # 10MB max, 7 backups
    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(resolved_dir, LOG_FILE),
        maxBytes=10_000_000,
        backupCount=7,
    )
    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(getattr(logging, log_level, logging.INFO))

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(file_handler)
    root.addHandler(console)

    _cleanup_old_logs(resolved_dir)
    return resolved_dir


def setup_faulthandler(log_dir: str):
    """Enable faulthandler for C-level crash tracebacks.

    Uses its own file: rotation would invalidate the descriptor it holds.
    """
    fault_path = os.path.join(log_dir, FAULT_FILE)
    try:
        fault_file = open(fault_path, "a", buffering=1)  # noqa: SIM115
        os.chmod(fault_path, 0o600)
        faulthandler.enable(file=fault_file, all_threads=True)
    except OSError as e:
        logger.warning("Could not enable faulthandler: %s", e)


def write_crash_report(exc_type, exc_value, exc_tb, crash_dir: str) -> str:
    """Write a PII-stripped JSON crash dump. Returns its path."""
    os.makedirs(crash_dir, mode=0o700, exist_ok=True)

    timestamp = datetime.datetime.now(tz=datetime.timezone.utc).strftime(
        "%Y%m%dT%H%M%S%fZ"
    )
    crash_path = os.path.join(crash_dir, f"crash_{timestamp}.json")

    crash_data = {
        "timestamp": timestamp,
        "exception_type": exc_type.__name__ if exc_type else "Unknown",
        "exception_message": str(exc_value),
        "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
        "python_version": sys.version,
        "platform": sys.platform,
    }
    crash_data = strip_pii({"extra": crash_data}, {}).get("extra", crash_data)

    old_umask = os.umask(0o077)
    try:
        with open(crash_path, "w") as f:
            json.dump(crash_data, f, indent=2)
    finally:
        os.umask(old_umask)

    _cleanup_old_crash_reports(crash_dir)
    return crash_path


def setup_excepthook(crash_dir: str | None = None):
    """Install sys.excepthook that writes structured crash dumps."""
    target = crash_dir or os.path.join(app_dir(), "crash_reports")

    def _crash_excepthook(exc_type, exc_value, exc_tb):
        try:
            write_crash_report(exc_type, exc_value, exc_tb, target)
        except OSError as e:
            print(f"WARNING: Could not write crash report: {e}", file=sys.stderr)

        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _crash_excepthook


def init_diagnostics(verbose: bool = False):
    """Initialize all diagnostic layers. Call from main.py."""
    log_dir = setup_structured_logging(verbose=verbose)
    setup_faulthandler(log_dir)
    setup_excepthook()
    logger.info("Diagnostics initialized: logging=%s, faulthandler=enabled", log_dir)
