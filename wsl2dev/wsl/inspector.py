# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/wsl/inspector.py
"""
Distribution state inspection.

WSL has no structured listing API, so state is recovered from the
`wsl --list --verbose` table:

      NAME                   STATE           VERSION
    * Ubuntu-22.04           Running         2
      docker-desktop         Stopped         2

All text parsing lives in parse_verbose_listing() / parse_quiet_listing()
so it can be tested against captured outputs without spawning anything.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .runner import WslRunner


class DistributionState(str, Enum):
    STOPPED = "Stopped"
    RUNNING = "Running"
    INSTALLING = "Installing"
    UNINSTALLING = "Uninstalling"
    CONVERTING = "Converting"
    UNKNOWN = "Unknown"

    @property
    def in_transition(self) -> bool:
        return self in (
            DistributionState.INSTALLING,
            DistributionState.UNINSTALLING,
            DistributionState.CONVERTING,
        )


@dataclass(frozen=True)
class DistributionRecord:
    name: str
    state: DistributionState
    is_default: bool = False
    version: Optional[int] = None


_LISTED_STATES = "|".join(
    s.value for s in DistributionState if s is not DistributionState.UNKNOWN
)

# The state is the last-but-one whitespace-delimited token, so a name that
# merely contains a state word ("Running-Lab") is never mistaken for it.
_VERBOSE_LINE_RE = re.compile(
    rf"^\s*(?P<default>\*)?\s*(?P<name>\S.*?)\s+(?P<state>{_LISTED_STATES})\s+(?P<version>\d+)\s*$"
)
_HEADER_RE = re.compile(r"^\s*NAME\s+STATE\s+VERSION\s*$", re.IGNORECASE)


def parse_verbose_listing(text: str) -> List[DistributionRecord]:
    records: List[DistributionRecord] = []
    for line in (text or "").splitlines():
        if not line.strip() or _HEADER_RE.match(line):
            continue
        m = _VERBOSE_LINE_RE.match(line)
        if not m:
            continue
        records.append(
            DistributionRecord(
                name=m.group("name").strip(),
                state=DistributionState(m.group("state")),
                is_default=bool(m.group("default")),
                version=int(m.group("version")),
            )
        )
    return records


def parse_quiet_listing(text: str) -> List[DistributionRecord]:
    out: List[DistributionRecord] = []
    for line in (text or "").splitlines():
        name = line.strip()
        if name:
            out.append(DistributionRecord(name=name, state=DistributionState.UNKNOWN))
    return out


def match_distribution(records: List[DistributionRecord], name: str) -> Optional[DistributionRecord]:
    """
    Exact (case-insensitive) match first, then substring match.

    The substring pass is a deliberate loose-matching policy: a request for
    "Ubuntu" must find an installed "Ubuntu-22.04". It can also hit an
    unrelated image that shares the prefix; callers log which record matched.
    """
    want = (name or "").strip().lower()
    if not want:
        return None
    for r in records:
        if r.name.lower() == want:
            return r
    for r in records:
        if want in r.name.lower():
            return r
    return None


class DistributionInspector:
    """
    Enumerates registered distributions. Never caches: every call re-runs
    the listing because the subsystem can change between calls.
    """

    def __init__(self, logger: logging.Logger, runner: WslRunner):
        self.logger = logger
        self.runner = runner

    def list_distributions(self) -> List[DistributionRecord]:
        try:
            res = self.runner.list_verbose()
        except OSError as e:
            self.logger.warning("Could not list WSL distributions: %s", e)
            return []

        if res.ok:
            records = parse_verbose_listing(res.stdout)
            if records:
                return records
            self.logger.debug("Verbose listing empty or unparseable; falling back to quiet listing")

        # Degraded path: names only, state Unknown.
        try:
            q = self.runner.list_quiet()
        except OSError as e:
            self.logger.warning("Could not list WSL distributions: %s", e)
            return []

        if not q.ok:
            # wsl exits non-zero when nothing is registered.
            self.logger.debug("No distributions listed (exit %d)", q.returncode)
            return []

        return parse_quiet_listing(q.stdout)

    def find(self, name: str) -> Optional[DistributionRecord]:
        rec = match_distribution(self.list_distributions(), name)
        if rec is not None and rec.name.lower() != name.strip().lower():
            self.logger.info("Distribution %r matched installed image %r", name, rec.name)
        return rec
