# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

from unittest.mock import Mock

import pytest

from fakes.fake_logger import FakeLogger
from fakes.fake_wsl import FakeWsl
from wsl2dev.config.context import RunContext
from wsl2dev.core.exceptions import PrerequisiteError
from wsl2dev.core.secret import Secret
from wsl2dev.orchestrator import Orchestrator
from wsl2dev.provision import ProvisioningOutcome, ProvisioningRequest


def _request():
    return ProvisioningRequest("Ubuntu", "alice", Secret.from_str("pw"))


def _success(**flags):
    return ProvisioningOutcome(True, "Ubuntu", "alice", installed=True, user_created=True, default_bound=True, **flags)


def _orchestrator(tmp_path, outcome, **ctx_kw):
    logger = FakeLogger()
    ctx = RunContext(backup_dir=tmp_path / "bk", **ctx_kw)
    parts = {
        "checker": Mock(),
        "provisioner": Mock(),
        "font_installer": Mock(),
        "prompt_installer": Mock(),
        "terminal_patcher": Mock(),
        "editor_patcher": Mock(),
    }
    parts["provisioner"].provision.return_value = outcome
    parts["font_installer"].install_font.return_value = True
    parts["prompt_installer"].install_prompt.return_value = True
    parts["terminal_patcher"].patch_terminal_config.return_value = True
    parts["editor_patcher"].patch_editor_config.return_value = True
    orch = Orchestrator(logger, ctx, runner=FakeWsl(), **parts)
    return orch, parts, logger


@pytest.mark.unit
class TestOrchestrator:
    def test_success_runs_everything_in_order(self, tmp_path):
        orch, parts, _log = _orchestrator(tmp_path, _success(first_boot_ok=True))
        assert orch.run(_request()) == 0

        parts["checker"].run.assert_called_once()
        parts["checker"].die_if_failed.assert_called_once()
        parts["font_installer"].install_font.assert_called_once()
        parts["prompt_installer"].install_prompt.assert_called_once_with("Ubuntu", "alice")
        parts["terminal_patcher"].patch_terminal_config.assert_called_once()
        parts["editor_patcher"].patch_editor_config.assert_called_once()
        names = [n for n, _s in orch.report.steps]
        assert names == [
            "prerequisites", "install", "user", "default user", "first boot",
            "Nerd Font", "Prompt", "Windows Terminal font", "VS Code font",
        ]

    def test_prompt_targets_resolved_distribution(self, tmp_path):
        outcome = ProvisioningOutcome(True, "Ubuntu-22.04", "alice")
        orch, parts, _log = _orchestrator(tmp_path, outcome)
        orch.run(_request())
        parts["prompt_installer"].install_prompt.assert_called_once_with("Ubuntu-22.04", "alice")

    def test_provisioning_failure_exits_one_but_patches_settings(self, tmp_path):
        failed = ProvisioningOutcome(False, "Ubuntu", "alice", "virtualization is disabled")
        orch, parts, log = _orchestrator(tmp_path, failed)

        assert orch.run(_request()) == 1

        parts["font_installer"].install_font.assert_not_called()
        parts["prompt_installer"].install_prompt.assert_not_called()
        parts["terminal_patcher"].patch_terminal_config.assert_called_once()
        parts["editor_patcher"].patch_editor_config.assert_called_once()
        statuses = dict(orch.report.steps)
        assert statuses["Nerd Font"] == "skipped" and statuses["Prompt"] == "skipped"
        assert statuses["Windows Terminal font"] == "ok"
        assert any("virtualization is disabled" in m for m in log.messages("error"))
        assert any("FAILED" in line for line in orch.report_lines())

    def test_provisioning_failure_honours_settings_skip_flags(self, tmp_path):
        failed = ProvisioningOutcome(False, "Ubuntu", "alice", "install failed")
        orch, parts, _log = _orchestrator(tmp_path, failed, skip_terminal_config=True)

        assert orch.run(_request()) == 1
        parts["terminal_patcher"].patch_terminal_config.assert_not_called()
        parts["editor_patcher"].patch_editor_config.assert_called_once()

    def test_peripheral_failures_keep_exit_zero(self, tmp_path):
        orch, parts, _log = _orchestrator(tmp_path, _success())
        parts["font_installer"].install_font.return_value = False
        parts["terminal_patcher"].patch_terminal_config.side_effect = RuntimeError("boom")

        assert orch.run(_request()) == 0

        statuses = dict(orch.report.steps)
        assert statuses["Nerd Font"] == "failed"
        assert statuses["Windows Terminal font"] == "failed"
        assert statuses["VS Code font"] == "ok"

    def test_skip_flags(self, tmp_path):
        orch, parts, _log = _orchestrator(
            tmp_path, _success(),
            skip_font=True, skip_prompt=True, skip_terminal_config=True, skip_editor_config=True,
        )
        assert orch.run(_request()) == 0
        parts["font_installer"].install_font.assert_not_called()
        parts["prompt_installer"].install_prompt.assert_not_called()
        parts["terminal_patcher"].patch_terminal_config.assert_not_called()
        parts["editor_patcher"].patch_editor_config.assert_not_called()
        assert dict(orch.report.steps)["VS Code font"] == "skipped"

    def test_prerequisite_failure_propagates(self, tmp_path):
        orch, parts, _log = _orchestrator(tmp_path, _success())
        parts["checker"].die_if_failed.side_effect = PrerequisiteError(1, "WSL is not installed")
        with pytest.raises(PrerequisiteError):
            orch.run(_request())
        parts["provisioner"].provision.assert_not_called()

    def test_report_mentions_log_and_start_command(self, tmp_path):
        orch, _parts, _log = _orchestrator(tmp_path, _success(), log_file=tmp_path / "run.log")
        orch.run(_request())
        lines = orch.report_lines()
        assert any(str(tmp_path / "run.log") in line for line in lines)
        assert "Start it with: wsl -d Ubuntu" in lines
