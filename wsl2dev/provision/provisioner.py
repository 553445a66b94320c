# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/provision/provisioner.py
"""
Distribution provisioning pipeline.

    resolve stuck state -> inspect
      -> present + user present : success, nothing to do
      -> present, user missing  : create user -> bind default -> verify
      -> absent                 : install (retry once on contention)
                                  -> wait until ready -> create user
                                  -> bind default -> first boot -> verify

Every command's exit code is checked. Binding and first boot are
best-effort (WARN only); install, user creation and verification are not.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from ..config.context import RunContext
from ..core.exceptions import WslCommandError
from ..core.logger import Log
from ..core.logging_utils import log_step
from ..core.retry import bounded_retry
from ..wsl.errors import is_contention, translate
from ..wsl.inspector import DistributionInspector, DistributionRecord, DistributionState
from ..wsl.probe import SubsystemProbe, SubsystemStatus
from ..wsl.resolver import StuckStateResolver
from ..wsl.runner import WslResult, WslRunner
from . import payload
from .models import ProvisioningOutcome, ProvisioningRequest

ROOT = "root"


class DistributionProvisioner:
    def __init__(
        self,
        logger: logging.Logger,
        ctx: RunContext,
        runner: Optional[WslRunner] = None,
        *,
        probe: Optional[SubsystemProbe] = None,
        inspector: Optional[DistributionInspector] = None,
        resolver: Optional[StuckStateResolver] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.logger = logger
        self.ctx = ctx
        self.runner = runner or WslRunner(logger, ctx.wsl_bin)
        self.probe = probe or SubsystemProbe(logger, self.runner)
        self.inspector = inspector or DistributionInspector(logger, self.runner)
        self.resolver = resolver or StuckStateResolver(
            logger,
            self.inspector,
            self.runner,
            poll_interval_s=ctx.poll_interval_s,
            poll_ceiling_s=ctx.poll_ceiling_s,
            settle_s=ctx.settle_s,
            sleep=sleep,
        )

    # ---------------------------------------------------------------------
    # public entry point
    # ---------------------------------------------------------------------

    def provision(self, request: ProvisioningRequest) -> ProvisioningOutcome:
        """
        Never raises. The request's password is wiped before returning,
        whatever the path.
        """
        try:
            return self._provision(request)
        except WslCommandError as e:
            self.logger.error("❌ %s", e.user_message())
            return ProvisioningOutcome.failed(request, e.user_message())
        except Exception as e:
            self.logger.error("❌ Provisioning %s failed unexpectedly: %s", request.distro_name, e)
            self.logger.debug("💥 provision() exception", exc_info=True)
            return ProvisioningOutcome.failed(request, f"unexpected error: {e}")
        finally:
            request.password.wipe()

    # ---------------------------------------------------------------------
    # pipeline
    # ---------------------------------------------------------------------

    def _provision(self, request: ProvisioningRequest) -> ProvisioningOutcome:
        name = request.distro_name
        user = request.username

        if not self.resolver.resolve_stuck_state(name):
            return ProvisioningOutcome.failed(
                request, f"{name} is being installed by another process; try again once it finishes"
            )

        rec = self.inspector.find(name)
        # A forced unregister may still be draining; treat that image as gone.
        if rec is not None and rec.state is not DistributionState.UNINSTALLING:
            return self._provision_existing(request, rec)

        with log_step(self.logger, f"Installing {name}"):
            res = self._install(name)
        if not res.ok:
            detail = translate(res.returncode, res.output)
            self.logger.error("❌ Install of %s failed: %s", name, detail)
            return ProvisioningOutcome.failed(request, detail)
        self.logger.info("📦 %s installed", name)

        if not self.resolver.wait_until_ready(name):
            self.logger.warning("%s not reported ready yet; continuing", name)

        # Follow-up commands address the registered name, which may differ
        # from the requested one (e.g. "Ubuntu" -> "Ubuntu-22.04").
        rec = self.inspector.find(name)
        target = rec.name if rec is not None else name

        self._create_user(target, request, first_boot_sudo=True)
        outcome = ProvisioningOutcome(True, target, user, installed=True, user_created=True)
        try:
            outcome.default_bound = self._bind_default_user(target, user)
            outcome.first_boot_ok = self._first_boot(target, user)
        except Exception:
            # The first-boot trap did not get to remove the drop-in.
            self._drop_sudoers_dropin(target)
            raise
        return self._verify(target, request, outcome)

    def _provision_existing(self, request: ProvisioningRequest, rec: DistributionRecord) -> ProvisioningOutcome:
        name, user = rec.name, request.username

        if rec.state is DistributionState.CONVERTING:
            self.logger.info("⏳ %s is converting; waiting for it to settle", name)
            if not self.resolver.wait_until_ready(name):
                return ProvisioningOutcome.failed(
                    request, f"{name} did not finish converting within {self.ctx.poll_ceiling_s:.0f}s"
                )

        self.logger.info("✅ %s already installed (%s)", name, rec.state.value)

        if self._user_exists(name, user):
            self.logger.info("👤 User %s already exists in %s; nothing to provision", user, name)
            return ProvisioningOutcome(True, name, user)

        self._create_user(name, request)
        outcome = ProvisioningOutcome(True, name, user, user_created=True)
        outcome.default_bound = self._bind_default_user(name, user)
        return self._verify(name, request, outcome)

    # ---------------------------------------------------------------------
    # steps
    # ---------------------------------------------------------------------

    def _install(self, name: str) -> WslResult:
        """The single install call, retried once when WSL reports contention."""
        return bounded_retry(
            lambda: self.runner.install(name, web_download=self.ctx.web_download),
            should_retry=lambda r: not r.ok and is_contention(r.returncode, r.output),
            before_retry=lambda r: self._before_install_retry(name, r),
            max_attempts=2,
            operation_name=f"install {name}",
            logger=self.logger,
        )

    def _before_install_retry(self, name: str, res: WslResult) -> bool:
        self.logger.warning("⚠️ %s", translate(res.returncode, res.output))
        return self.resolver.resolve_stuck_state(name)

    def _user_exists(self, name: str, user: str) -> bool:
        res = self.runner.exec_as(name, ROOT, ["id", "-u", user])
        return res.ok

    def _create_user(self, name: str, request: ProvisioningRequest, *, first_boot_sudo: bool = False) -> None:
        user = request.username
        Log.step(self.logger, f"Creating user {user} in {name}")
        prefix = user.encode("ascii") + b":"
        with request.password.payload(prefix, b"\n") as stdin:
            res = self.runner.run_script(
                name, ROOT, payload.create_user_script(user, first_boot_sudo=first_boot_sudo), input_bytes=stdin
            )
        if not res.ok:
            raise WslCommandError(
                1,
                f"Could not create user {user} in {name}: {translate(res.returncode, res.output)}",
                returncode=res.returncode,
                output=res.output,
            )
        self.logger.info("👤 User %s created", user)

    def _bind_default_user(self, name: str, user: str) -> bool:
        """Native --set-default-user when WSL is new enough, else /etc/wsl.conf."""
        Log.step(self.logger, f"Setting {user} as default user of {name}")
        status: SubsystemStatus = self.probe.probe()

        if status.supports(self.ctx.native_default_user_min_version):
            res = self.runner.set_default_user(name, user)
            if res.ok:
                self.logger.info("🔗 Default user set via wsl --manage")
                return True
            self.logger.warning(
                "wsl --manage --set-default-user failed: %s; falling back to /etc/wsl.conf",
                translate(res.returncode, res.output),
            )
        else:
            self.logger.debug("WSL %s has no --set-default-user; using /etc/wsl.conf", status.version or "(unknown)")

        res = self.runner.run_script(name, ROOT, payload.default_user_conf_script(user))
        if not res.ok:
            self.logger.warning(
                "⚠️ Could not set default user of %s: %s", name, translate(res.returncode, res.output)
            )
            return False

        # wsl.conf is only read at distribution start.
        term = self.runner.terminate(name)
        if not term.ok:
            self.logger.warning("wsl --terminate %s exited %d; default user applies on next start", name, term.returncode)
        self.logger.info("🔗 Default user written to /etc/wsl.conf")
        return True

    def _first_boot(self, name: str, user: str) -> bool:
        Log.step(self.logger, f"First-boot setup in {name}")
        try:
            script = payload.first_boot_script(self.ctx.packages)
            res = self.runner.run_script(name, user, script)
        except (OSError, ValueError) as e:
            self.logger.warning("⚠️ First-boot setup could not run: %s", e)
            res = None

        if res is not None and res.ok:
            self.logger.info("🧰 Baseline packages installed: %s", " ".join(self.ctx.packages) or "(none)")
            return True

        if res is not None:
            self.logger.warning(
                "⚠️ First-boot setup failed (exit %d); packages can be installed later. %s",
                res.returncode,
                res.output[-400:],
            )
        self._drop_sudoers_dropin(name)
        return False

    def _drop_sudoers_dropin(self, name: str) -> None:
        try:
            res = self.runner.run_script(name, ROOT, payload.remove_sudoers_dropin_script())
            if not res.ok:
                self.logger.warning("Could not remove %s (exit %d)", payload.SUDOERS_DROPIN, res.returncode)
        except OSError as e:
            self.logger.warning("Could not remove %s: %s", payload.SUDOERS_DROPIN, e)

    def _verify(self, name: str, request: ProvisioningRequest, outcome: ProvisioningOutcome) -> ProvisioningOutcome:
        user = request.username
        Log.step(self.logger, f"Verifying {user} in {name}")
        res = self.runner.exec_as(name, user, ["whoami"])
        actual = res.stdout.strip() if res.ok else ""
        if actual != user:
            detail = (
                f"verification failed: whoami returned {actual!r}, expected {user!r}"
                if res.ok
                else f"verification failed: {translate(res.returncode, res.output)}"
            )
            self.logger.error("❌ %s", detail)
            outcome.success = False
            outcome.error_detail = detail
            return outcome
        Log.ok(self.logger, f"{name} ready for {user}")
        return outcome
