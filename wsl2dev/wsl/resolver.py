# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/wsl/resolver.py
"""
Stuck-state handling for a single named distribution.

WSL serializes lifecycle operations internally and reports in-flight ones
as Installing/Uninstalling/Converting in the verbose listing. We never run
anything concurrently against an image; we wait the transition out (bounded),
force it where that is safe (Uninstalling), and refuse where it is not
(someone else's Installing).
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .inspector import DistributionInspector, DistributionRecord, DistributionState
from .runner import WslRunner


class StuckStateResolver:
    def __init__(
        self,
        logger: logging.Logger,
        inspector: DistributionInspector,
        runner: WslRunner,
        *,
        poll_interval_s: float = 5.0,
        poll_ceiling_s: float = 60.0,
        settle_s: float = 3.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.logger = logger
        self.inspector = inspector
        self.runner = runner
        self.poll_interval_s = float(poll_interval_s)
        self.poll_ceiling_s = float(poll_ceiling_s)
        self.settle_s = float(settle_s)
        self._sleep = sleep

    def _inspect(self, name: str) -> Optional[DistributionRecord]:
        return self.inspector.find(name)

    def _poll(self, name: str, done: Callable[[Optional[DistributionRecord]], bool]) -> bool:
        """
        Re-inspect every poll_interval_s until done(record) or the ceiling is
        reached. Returns True if done() became true.
        """
        elapsed = 0.0
        while elapsed < self.poll_ceiling_s:
            self._sleep(self.poll_interval_s)
            elapsed += self.poll_interval_s
            if done(self._inspect(name)):
                self.logger.debug("%s: condition met after %.0fs", name, elapsed)
                return True
        return False

    def resolve_stuck_state(self, name: str) -> bool:
        """
        True when it is safe to operate on `name`, False when blocked.

          Uninstalling -> wait it out; on timeout force-unregister -> True
          Installing   -> a foreign install is running -> False
          anything else, absent, or inspection error -> True (fail-open)
        """
        try:
            rec = self._inspect(name)
        except Exception as e:
            self.logger.warning("Could not inspect %s (%s); proceeding", name, e)
            return True

        if rec is None:
            return True

        if rec.state is DistributionState.INSTALLING:
            self.logger.error(
                "%s is being installed by another process; not starting a concurrent install",
                rec.name,
            )
            return False

        if rec.state is not DistributionState.UNINSTALLING:
            return True

        self.logger.warning(
            "%s is stuck in Uninstalling; waiting up to %.0fs", rec.name, self.poll_ceiling_s
        )
        try:
            cleared = self._poll(
                name, lambda r: r is None or r.state is not DistributionState.UNINSTALLING
            )
        except Exception as e:
            self.logger.warning("Polling %s failed (%s); proceeding", name, e)
            return True

        if cleared:
            self.logger.info("%s finished uninstalling", rec.name)
            return True

        # The forced unregister is assumed to complete eventually; its exit
        # code is logged, not enforced.
        self.logger.warning("%s still Uninstalling after %.0fs; forcing unregister", rec.name, self.poll_ceiling_s)
        try:
            res = self.runner.unregister(rec.name)
            if not res.ok:
                self.logger.warning("Forced unregister of %s exited %d: %s", rec.name, res.returncode, res.output)
        except OSError as e:
            self.logger.warning("Forced unregister of %s could not run: %s", rec.name, e)
        self._sleep(self.settle_s)
        return True

    def wait_until_ready(self, name: str) -> bool:
        """
        Bounded readiness poll after an install/conversion: True once the
        record exists and is no longer in transition (an Unknown state from the
        degraded listing counts as ready).
        """
        try:
            rec = self._inspect(name)
            if rec is not None and not rec.state.in_transition:
                return True
            ready = self._poll(name, lambda r: r is not None and not r.state.in_transition)
        except Exception as e:
            self.logger.warning("Readiness check for %s failed: %s", name, e)
            return False
        if not ready:
            self.logger.warning("%s did not settle within %.0fs", name, self.poll_ceiling_s)
        return ready
