# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from fakes.fake_logger import FakeLogger
from fakes.fake_wsl import FakeDistro, FakeWsl
from wsl2dev.config.context import RunContext
from wsl2dev.peripherals.prompt import PromptInstaller


def _installer(fake, tmp_path, theme="jandedobbeleer"):
    logger = FakeLogger()
    ctx = RunContext(backup_dir=tmp_path, prompt_theme=theme)
    return PromptInstaller(logger, ctx, fake), logger


@pytest.mark.unit
class TestPromptInstaller:
    def test_runs_as_target_user(self, tmp_path):
        fake = FakeWsl({"Ubuntu": FakeDistro(users={"alice"})})
        inst, _log = _installer(fake, tmp_path)
        assert inst.install_prompt("Ubuntu", "alice") is True
        assert [(k, d, u) for (k, d, u, _s) in fake.scripts] == [("prompt", "Ubuntu", "alice")]
        assert "jandedobbeleer" in fake.scripts[0][3]

    def test_failure_is_a_warning(self, tmp_path):
        fake = FakeWsl({"Ubuntu": FakeDistro(users={"alice"})})
        fake.script_rc["prompt"] = 1
        inst, log = _installer(fake, tmp_path)
        assert inst.install_prompt("Ubuntu", "alice") is False
        assert log.messages("warning")

    def test_bad_theme_never_reaches_the_shell(self, tmp_path):
        fake = FakeWsl({"Ubuntu": FakeDistro(users={"alice"})})
        inst, _log = _installer(fake, tmp_path, theme="x; rm -rf /")
        assert inst.install_prompt("Ubuntu", "alice") is False
        assert fake.calls == []
