# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from wsl2dev.wsl.errors import ERROR_TABLE, ErrorCause, classify, is_contention, translate


@pytest.mark.unit
class TestTranslate:
    def test_concurrent_marker_mentions_in_progress(self):
        msg = translate(-1, "Error code: Wsl/InstallDistro/0x80070652")
        assert "in progress" in msg

    def test_unknown_code_mentions_exit_code(self):
        assert "42" in translate(42, "something odd happened")

    def test_empty_text_falls_through(self):
        assert translate(3, "") == "operation failed with exit code 3"

    def test_markers_are_case_insensitive(self):
        assert classify(-1, "WslRegisterDistribution failed with error: 0X80370102") is ErrorCause.VIRTUALIZATION_DISABLED

    @pytest.mark.parametrize(
        "text,cause",
        [
            ("Error code: Wsl/Service/0x8000000d", ErrorCause.CONCURRENT_OPERATION),
            ("Error: 0x8007019e", ErrorCause.COMPONENT_NOT_ENABLED),
            ("Error: 0x800701bc WSL 2 requires an update to its kernel component", ErrorCause.KERNEL_OUTDATED),
            ("Error code: 0x80070005", ErrorCause.ACCESS_DENIED),
            ("Wsl/Service/WSL_E_DISTRO_NOT_FOUND 0x8007015b", ErrorCause.DISTRO_NOT_FOUND),
            ("Error code: Wsl/InstallDistro/0x80072ee7", ErrorCause.NETWORK),
        ],
    )
    def test_classify(self, text, cause):
        assert classify(-1, text) is cause

    def test_every_rule_has_actionable_message(self):
        for rule in ERROR_TABLE:
            assert rule.message.endswith(".")
            assert translate(-1, rule.markers[0]) == rule.message


@pytest.mark.unit
def test_is_contention():
    assert is_contention(-1, "0x80070652")
    assert is_contention(-1, "0x8000000D")
    assert not is_contention(-1, "0x80370102")
    assert not is_contention(1, "")
