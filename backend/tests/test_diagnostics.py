"""Tests for diagnostics — crash dumps, structured logging, log dir validation."""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

import diagnostics
from diagnostics import (
    MAX_CRASH_REPORTS,
    JSONFormatter,
    _cleanup_old_crash_reports,
    _validate_log_dir,
    setup_excepthook,
    setup_structured_logging,
    write_crash_report,
)

pytestmark = pytest.mark.smoke


@pytest.fixture
def fake_app_dir(tmp_path):
    with patch("diagnostics.app_dir", return_value=str(tmp_path)):
        yield tmp_path


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers = handlers
    root.setLevel(level)


def _exc_info():
    try:
        raise ValueError("boom")
    except ValueError:
        return sys.exc_info()


def test_json_formatter_fields():
    record = logging.LogRecord("waveform.render", logging.INFO, __file__, 1, "hi %s", ("x",), None)
    entry = json.loads(JSONFormatter().format(record))
    assert entry["level"] == "INFO"
    assert entry["logger"] == "waveform.render"
    assert entry["message"] == "hi x"
    assert "timestamp" in entry


def test_json_formatter_exception():
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), _exc_info())
    entry = json.loads(JSONFormatter().format(record))
    assert entry["exception"]["type"] == "ValueError"
    assert "boom" in entry["exception"]["traceback"]


def test_log_dir_default(fake_app_dir):
    assert _validate_log_dir("") == os.path.join(str(fake_app_dir), "logs")


def test_log_dir_outside_app_dir_rejected(fake_app_dir, tmp_path_factory):
    outside = tmp_path_factory.mktemp("elsewhere")
    assert _validate_log_dir(str(outside)) == os.path.join(str(fake_app_dir), "logs")


def test_log_dir_inside_app_dir_accepted(fake_app_dir):
    inside = fake_app_dir / "custom"
    assert _validate_log_dir(str(inside)) == os.path.realpath(str(inside))


def test_structured_logging_writes_json(fake_app_dir, restore_logging):
    log_dir = setup_structured_logging(str(fake_app_dir / "logs"))
    logging.getLogger("wavebars.test").warning("rendered %d bars", 128)
    for h in logging.getLogger().handlers:
        h.flush()

    lines = (fake_app_dir / "logs" / diagnostics.LOG_FILE).read_text().splitlines()
    entries = [json.loads(line) for line in lines]
    assert any(e["message"] == "rendered 128 bars" for e in entries)
    assert log_dir == os.path.realpath(str(fake_app_dir / "logs"))


def test_crash_report_written(tmp_path):
    crash_dir = tmp_path / "crash_reports"
    path = write_crash_report(*_exc_info(), str(crash_dir))

    data = json.loads(open(path).read())
    assert data["exception_type"] == "ValueError"
    assert data["exception_message"] == "boom"
    assert data["traceback"]
    mode = os.stat(path).st_mode & 0o777
    assert mode == 0o600, f"Expected 0o600, got {oct(mode)}"


def test_excepthook_writes_and_chains(tmp_path):
    crash_dir = tmp_path / "crashes"
    original = sys.excepthook
    try:
        setup_excepthook(str(crash_dir))
        with patch("sys.__excepthook__") as default_hook:
            sys.excepthook(*_exc_info())
            default_hook.assert_called_once()
    finally:
        sys.excepthook = original

    assert len(list(crash_dir.glob("crash_*.json"))) == 1


def test_crash_report_cleanup_keeps_newest(tmp_path):
    for i in range(MAX_CRASH_REPORTS + 3):
        f = tmp_path / f"crash_{i:03d}.json"
        f.write_text("{}")
        os.utime(f, (1_000_000 + i, 1_000_000 + i))

    _cleanup_old_crash_reports(str(tmp_path))

    remaining = sorted(p.name for p in tmp_path.glob("crash_*.json"))
    assert len(remaining) == MAX_CRASH_REPORTS
    assert remaining[0] == "crash_003.json"
