# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/wsl/probe.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .runner import WslRunner

_VERSION_RE = re.compile(r"(\d+\.\d+\.\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class SubsystemStatus:
    installed: bool
    enabled: bool
    version: Optional[str] = None

    def version_tuple(self) -> Tuple[int, ...]:
        if not self.version:
            return ()
        return tuple(int(x) for x in self.version.split("."))

    def supports(self, minimum: Tuple[int, ...]) -> bool:
        vt = self.version_tuple()
        return bool(vt) and vt >= tuple(minimum)

    def describe(self) -> str:
        if not self.installed:
            return "not installed"
        if not self.enabled:
            return "installed, disabled"
        return f"installed, enabled (version {self.version or 'unknown'})"


NOT_INSTALLED = SubsystemStatus(installed=False, enabled=False, version=None)


def parse_version(text: str) -> Optional[str]:
    """First dotted version number in `wsl --version` output."""
    m = _VERSION_RE.search(text or "")
    return m.group(1) if m else None


class SubsystemProbe:
    """
    Classifies the host's WSL into NotInstalled / InstalledDisabled /
    InstalledEnabled(version). Read-only, never raises.
    """

    def __init__(self, logger: logging.Logger, runner: WslRunner):
        self.logger = logger
        self.runner = runner

    def probe(self) -> SubsystemStatus:
        if not self.runner.available():
            self.logger.debug("probe: wsl entry point not found")
            return NOT_INSTALLED

        try:
            st = self.runner.status()
        except OSError as e:
            self.logger.warning("Could not query WSL status: %s", e)
            return NOT_INSTALLED

        if not st.ok:
            self.logger.debug("probe: 'wsl --status' exited %d", st.returncode)
            return SubsystemStatus(installed=True, enabled=False, version=None)

        version: Optional[str] = None
        try:
            vr = self.runner.version()
            if vr.ok:
                version = parse_version(vr.stdout)
            else:
                # Inbox (pre-Store) WSL has no --version; that is not a failure.
                self.logger.debug("probe: 'wsl --version' exited %d", vr.returncode)
        except OSError as e:
            self.logger.debug("probe: version query failed: %s", e)

        return SubsystemStatus(installed=True, enabled=True, version=version)
