# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import json
import logging

import pytest

from wsl2dev.core.logger import SUCCESS, TRACE, JsonFormatter, Log


@pytest.mark.unit
class TestLogSetup:
    def test_file_gets_debug_and_success_lines(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = Log.setup(0, str(log_file), logger_name="wsl2dev.test.file")
        logger.debug("debug detail")
        Log.ok(logger, "all good")
        Log.warn(logger, "careful")
        for h in logger.handlers:
            h.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "debug detail" in text
        assert "all good" in text and "SUCCESS" in text
        assert "WARN" in text

    def test_quiet_raises_console_level(self):
        logger = Log.setup(0, None, quiet=1, logger_name="wsl2dev.test.quiet")
        assert logger.level == logging.WARNING

    def test_verbose_levels(self):
        assert Log._level_from_flags(1, 0) == logging.INFO
        assert Log._level_from_flags(2, 0) == logging.DEBUG
        assert Log._level_from_flags(3, 0) == TRACE
        assert SUCCESS > logging.INFO


@pytest.mark.unit
def test_json_formatter_emits_one_object_per_line():
    rec = logging.LogRecord("wsl2dev", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    line = JsonFormatter().format(rec)
    data = json.loads(line)
    assert data["msg"] == "hello world"
    assert data["level"] == "INFO"


@pytest.mark.unit
def test_log_step_reports_failure_and_reraises():
    from fakes.fake_logger import FakeLogger
    from wsl2dev.core.logging_utils import log_step

    logger = FakeLogger()
    with pytest.raises(RuntimeError):
        with log_step(logger, "Installing Ubuntu"):
            raise RuntimeError("no network")
    assert logger.messages("info")[0].endswith("Installing Ubuntu ...")
    assert "no network" in logger.messages("error")[0]


@pytest.mark.security
def test_context_secrets_are_redacted_in_both_formats():
    from wsl2dev.core.logger import EmojiFormatter, LogStyle

    rec = logging.LogRecord("wsl2dev", logging.INFO, __file__, 1, "creating user", (), None)
    rec.ctx = {"user": "alice", "password": "hunter2"}
    assert "hunter2" not in JsonFormatter().format(rec)
    line = EmojiFormatter(LogStyle(color=False)).format(rec)
    assert "user=alice" in line
    assert "hunter2" not in line
