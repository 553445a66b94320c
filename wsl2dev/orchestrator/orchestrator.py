# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/orchestrator/orchestrator.py

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel

from ..config.context import RunContext
from ..core.logger import Log
from ..core.prereq import PrerequisiteChecker
from ..peripherals import EditorConfigPatcher, FontInstaller, PromptInstaller, TerminalConfigPatcher
from ..provision import DistributionProvisioner, ProvisioningOutcome, ProvisioningRequest
from ..wsl.probe import SubsystemProbe
from ..wsl.runner import WslRunner

SKIPPED = "skipped"


@dataclass
class RunReport:
    outcome: Optional[ProvisioningOutcome] = None
    steps: List[Tuple[str, str]] = field(default_factory=list)

    def add(self, name: str, status: str) -> None:
        self.steps.append((name, status))

    @property
    def exit_code(self) -> int:
        return 0 if self.outcome is not None and self.outcome.success else 1


def _status(ok: Optional[bool]) -> str:
    if ok is None:
        return SKIPPED
    return "ok" if ok else "failed"


def _is_tty() -> bool:
    try:
        return sys.stdout.isatty()
    except Exception:
        return False


class Orchestrator:
    """
    prerequisites -> provision -> font -> prompt -> terminal config -> editor config -> report

    Prerequisite failures raise PrerequisiteError (fatal). A failed
    provisioning outcome stops the run with exit code 1. Peripheral results
    only show up in the report.
    """

    def __init__(
        self,
        logger: logging.Logger,
        ctx: RunContext,
        *,
        runner: Optional[WslRunner] = None,
        provisioner: Optional[DistributionProvisioner] = None,
        font_installer: Optional[FontInstaller] = None,
        prompt_installer: Optional[PromptInstaller] = None,
        terminal_patcher: Optional[TerminalConfigPatcher] = None,
        editor_patcher: Optional[EditorConfigPatcher] = None,
        checker: Optional[PrerequisiteChecker] = None,
    ):
        self.logger = logger
        self.ctx = ctx
        self.runner = runner or WslRunner(logger, ctx.wsl_bin)
        self.probe = SubsystemProbe(logger, self.runner)
        self.checker = checker or PrerequisiteChecker(logger, ctx, self.probe)
        self.provisioner = provisioner or DistributionProvisioner(logger, ctx, self.runner, probe=self.probe)
        self.font_installer = font_installer or FontInstaller(logger, ctx)
        self.prompt_installer = prompt_installer or PromptInstaller(logger, ctx, self.runner)
        self.terminal_patcher = terminal_patcher or TerminalConfigPatcher(logger, ctx)
        self.editor_patcher = editor_patcher or EditorConfigPatcher(logger, ctx)
        self.report = RunReport()

        Log.trace(self.logger, "🧠 Orchestrator init: distro=%r backup_dir=%s", ctx.distro, ctx.backup_dir)

    def _optional(self, name: str, skip: bool, fn: Callable[[], bool]) -> None:
        if skip:
            self.logger.info("⏭️  %s skipped", name)
            self.report.add(name, SKIPPED)
            return
        Log.step(self.logger, name)
        try:
            ok = fn()
        except Exception as e:
            self.logger.warning("⚠️ %s failed unexpectedly: %s", name, e)
            self.logger.debug("💥 %s exception", name, exc_info=True)
            ok = False
        self.report.add(name, _status(ok))

    def run(self, request: ProvisioningRequest) -> int:
        Log.banner(self.logger, f"wsl2dev: {request.distro_name} for {request.username}")

        self.checker.run()
        self.checker.die_if_failed()
        self.report.add("prerequisites", "ok")

        outcome = self.provisioner.provision(request)
        self.report.outcome = outcome
        self.report.add("install", "ok" if outcome.installed else ("present" if outcome.success else "-"))
        self.report.add("user", "created" if outcome.user_created else ("present" if outcome.success else "-"))
        self.report.add("default user", "ok" if outcome.default_bound else ("unchanged" if outcome.success else "-"))
        if outcome.first_boot_ok is not None:
            self.report.add("first boot", _status(outcome.first_boot_ok))

        if outcome.success:
            Log.ok(self.logger, f"{outcome.distro_name} provisioned for {outcome.username}")
            self._optional("Nerd Font", self.ctx.skip_font, self.font_installer.install_font)
            self._optional(
                "Prompt",
                self.ctx.skip_prompt,
                lambda: self.prompt_installer.install_prompt(outcome.distro_name, outcome.username),
            )
        else:
            Log.fail(self.logger, f"Provisioning failed: {outcome.error_detail}")
            self.report.add("Nerd Font", SKIPPED)
            self.report.add("Prompt", SKIPPED)

        self._optional("Windows Terminal font", self.ctx.skip_terminal_config, self.terminal_patcher.patch_terminal_config)
        self._optional("VS Code font", self.ctx.skip_editor_config, self.editor_patcher.patch_editor_config)

        self.render_report()
        return self.report.exit_code

    def report_lines(self) -> List[str]:
        out = self.report.outcome
        lines: List[str] = []
        if out is not None:
            lines.append(f"Distribution : {out.distro_name}")
            lines.append(f"User         : {out.username}")
            lines.append(f"Result       : {'success' if out.success else 'FAILED'}")
            if out.error_detail:
                lines.append(f"Error        : {out.error_detail}")
        for name, status in self.report.steps:
            lines.append(f"  {name:<22} {status}")
        if self.ctx.log_file:
            lines.append(f"Log file     : {self.ctx.log_file}")
        lines.append(f"Backups      : {self.ctx.backup_dir}")
        if out is not None and out.success:
            lines.append(f"Start it with: wsl -d {out.distro_name}")
        return lines

    def render_report(self) -> None:
        lines = self.report_lines()
        for line in lines:
            self.logger.info(line)
        if not _is_tty():
            return
        ok = self.report.exit_code == 0
        title = "✓ Your WSL dev environment is ready" if ok else "✗ Provisioning failed"
        Console(stderr=False).print(
            Panel("\n".join(lines), title=title, border_style="green" if ok else "red", expand=True)
        )
