# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for exception handling and secret redaction."""
from __future__ import annotations

import pytest

from wsl2dev.core.exceptions import (
    REDACTED,
    Fatal,
    PrerequisiteError,
    Wsl2DevError,
    WslCommandError,
    format_exception_for_cli,
    redact_context,
    wrap_fatal,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    def test_base_exception_creation(self):
        err = Wsl2DevError(code=1, msg="Test error")
        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None

    def test_prerequisite_error_is_fatal(self):
        err = PrerequisiteError(1, "WSL is not installed")
        assert isinstance(err, Fatal)
        assert str(err) == "WSL is not installed"

    def test_wsl_command_error_keeps_raw_returncode(self):
        err = WslCommandError(1, "install failed", returncode=-1, output="0x80070652")
        assert err.code == 1
        assert err.returncode == -1
        assert "0x80070652" in err.output

    def test_exit_code_clamped(self):
        assert Fatal(code=999, msg="x").code == 255
        assert Fatal(code="nope", msg="x").code == 1

    def test_multiline_message_collapsed(self):
        assert "\n" not in Fatal(1, "line one\nline two").msg

    def test_wrap_fatal(self):
        cause = OSError("disk full")
        err = wrap_fatal("could not write", cause, code=2)
        assert err.cause is cause
        assert err.code == 2


@pytest.mark.security
class TestSecretRedaction:
    def test_secret_keys_redacted(self):
        d = redact_context({"username": "alice", "password": "s3cret", "api_token": "t", "distro": "Ubuntu"})
        assert d["password"] == REDACTED
        assert d["api_token"] == REDACTED
        assert d["username"] == "alice"
        assert d["distro"] == "Ubuntu"


@pytest.mark.unit
class TestCliFormatting:
    def test_cli_format_levels(self):
        err = Wsl2DevError(1, "boom", cause=ValueError("inner"))
        assert format_exception_for_cli(err) == "boom"
        assert format_exception_for_cli(err, verbose=1) == "boom (cause: ValueError: inner)"
        assert format_exception_for_cli(RuntimeError("plain")) == "plain"
        assert format_exception_for_cli(RuntimeError("plain"), verbose=1) == "RuntimeError: plain"

    def test_negative_code_becomes_one(self):
        assert Fatal(code=-5, msg="x").code == 1
