# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/core/prereq.py
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from ..config.context import RunContext
from ..wsl.probe import SubsystemProbe
from .exceptions import PrerequisiteError
from .utils import U

# Windows 10 2004; first build with `wsl --install`.
MIN_WINDOWS_BUILD = 19041


class ExitCode(IntEnum):
    OK = 0
    FAILED = 1


class ErrorKind:
    PERMISSION = "permission"
    OS_VERSION = "os_version"
    SUBSYSTEM = "subsystem"


REMEDIATION: Dict[str, str] = {
    ErrorKind.PERMISSION: "Re-run from an elevated (Run as Administrator) terminal, or pass --skip-admin-check.",
    ErrorKind.OS_VERSION: f"Update Windows to build {MIN_WINDOWS_BUILD} (version 2004) or later.",
    ErrorKind.SUBSYSTEM: "Run 'wsl --install --no-distribution' from an elevated prompt, reboot, and run again.",
}


@dataclass
class PrereqIssue:
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


@dataclass
class PrereqReport:
    errors: List[PrereqIssue] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    notes: Dict[str, str] = field(default_factory=dict)
    checks_ran: List[str] = field(default_factory=list)

    def ok(self) -> bool:
        return not self.errors

    def add_error(self, kind: str, msg: str) -> None:
        self.errors.append(PrereqIssue(kind=kind, message=msg))

    def exit_code(self) -> int:
        return int(ExitCode.OK if self.ok() else ExitCode.FAILED)

    def to_dict(self) -> Dict[str, object]:
        return {
            "ok": self.ok(),
            "exit_code": self.exit_code(),
            "errors": [{"kind": e.kind, "message": e.message} for e in self.errors],
            "warnings": list(self.warnings),
            "notes": dict(self.notes),
            "checks_ran": list(self.checks_ran),
        }


def is_admin() -> bool:
    """Elevated token on Windows, euid 0 elsewhere."""
    if U.is_windows():
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError):
            return False
    geteuid = getattr(os, "geteuid", None)
    return bool(geteuid and geteuid() == 0)


def windows_build() -> Optional[int]:
    if not U.is_windows():
        return None
    return int(sys.getwindowsversion().build)  # type: ignore[attr-defined]


class PrerequisiteChecker:
    """
    Host checks run before anything touches WSL:
      - administrator privileges (skippable)
      - Windows build
      - WSL installed and enabled (via the probe)
    """

    def __init__(self, logger: logging.Logger, ctx: RunContext, probe: SubsystemProbe):
        self.logger = logger
        self.ctx = ctx
        self.probe = probe
        self.report = PrereqReport()

    def _is_tty(self) -> bool:
        try:
            return sys.stderr.isatty()
        except Exception:
            return False

    def check_admin(self) -> None:
        self.report.checks_ran.append("admin")
        if self.ctx.skip_admin_check:
            self.report.notes["admin"] = "SKIPPED (flagged)"
            return
        if is_admin():
            self.report.notes["admin"] = "OK"
            return
        self.report.add_error(ErrorKind.PERMISSION, "Administrator privileges are required")

    def check_os_version(self) -> None:
        self.report.checks_ran.append("os_version")
        build = windows_build()
        if build is None:
            self.report.notes["windows_build"] = "SKIPPED (not Windows)"
            self.report.warnings.append("Not running on Windows; WSL checks rely on the wsl entry point alone")
            return
        self.report.notes["windows_build"] = str(build)
        if build < MIN_WINDOWS_BUILD:
            self.report.add_error(
                ErrorKind.OS_VERSION,
                f"Windows build {build} is too old (need {MIN_WINDOWS_BUILD} or later)",
            )

    def check_subsystem(self) -> None:
        self.report.checks_ran.append("subsystem")
        status = self.probe.probe()
        self.report.notes["wsl"] = status.describe()
        if not status.installed:
            self.report.add_error(ErrorKind.SUBSYSTEM, "Windows Subsystem for Linux is not installed")
        elif not status.enabled:
            self.report.add_error(ErrorKind.SUBSYSTEM, "Windows Subsystem for Linux is installed but not enabled")

    def _run_checks(self, checks: Sequence[Tuple[str, Callable[[], None]]]) -> None:
        if self._is_tty():
            with Progress(
                TextColumn("{task.description}"),
                BarColumn(),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                transient=True,
            ) as progress:
                task = progress.add_task("Checking prerequisites", total=len(checks))
                for name, fn in checks:
                    progress.update(task, description=f"Checking prerequisites: {name}")
                    fn()
                    progress.update(task, advance=1)
        else:
            for name, fn in checks:
                self.logger.debug("Prerequisites: %s...", name)
                fn()

    def _log_summary(self) -> None:
        for w in self.report.warnings:
            self.logger.warning("Prerequisites: %s", w)
        if self.report.notes:
            self.logger.debug("Prerequisite notes: %s", self.report.notes)
        if self.report.ok():
            self.logger.info("✅ Prerequisites: OK (%s)", self.report.notes.get("wsl", "wsl unknown"))
            return
        for e in self.report.errors:
            self.logger.error("Prerequisite failed [%s]: %s", e.kind, e.message)
            self.logger.error("  ↳ %s", REMEDIATION.get(e.kind, ""))

    def run(self) -> PrereqReport:
        checks: List[Tuple[str, Callable[[], None]]] = [
            ("admin", self.check_admin),
            ("windows build", self.check_os_version),
            ("wsl", self.check_subsystem),
        ]
        self._run_checks(checks)
        self._log_summary()
        return self.report

    def die_if_failed(self) -> None:
        if not self.report.checks_ran:
            self.run()
        if self.report.ok():
            return
        first = self.report.errors[0]
        raise PrerequisiteError(
            self.report.exit_code(),
            f"{first.message}. {REMEDIATION.get(first.kind, '')}".strip(),
        )
