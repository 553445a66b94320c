# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/peripherals/prompt.py
from __future__ import annotations

import logging

from ..config.context import RunContext
from ..core.logger import Log
from ..provision import payload
from ..wsl.errors import translate
from ..wsl.runner import WslRunner


class PromptInstaller:
    """oh-my-posh for the provisioned user's bash, installed inside the image."""

    def __init__(self, logger: logging.Logger, ctx: RunContext, runner: WslRunner):
        self.logger = logger
        self.ctx = ctx
        self.runner = runner

    def install_prompt(self, distro: str, username: str) -> bool:
        log = Log.bind(self.logger, distro=distro, user=username)
        try:
            script = payload.prompt_script(self.ctx.prompt_theme)
            res = self.runner.run_script(distro, username, script)
        except (OSError, ValueError) as e:
            log.warning("⚠️ Prompt install could not run: %s", e)
            return False

        if not res.ok:
            log.warning("⚠️ Prompt install failed: %s", translate(res.returncode, res.output))
            log.debug("prompt payload output: %s", res.output[-400:])
            return False

        log.info("🎨 oh-my-posh (%s theme) enabled", self.ctx.prompt_theme)
        return True
