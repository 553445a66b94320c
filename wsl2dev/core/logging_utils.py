# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""
Shared logging utilities for wsl2dev.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def log_step(logger: logging.Logger, description: str) -> Generator[None, None, None]:
    """
    Context manager for logging and timing operation steps.

    Logs the start of an operation, executes the block, then logs
    completion with elapsed time. Logs error and re-raises on exception.

    Example:
        with log_step(logger, "Installing Ubuntu"):
            runner.install("Ubuntu")
    """
    t0 = time.monotonic()
    logger.info("➡️  %s ...", description)
    try:
        yield
        logger.info("%s done (%.2fs)", description, time.monotonic() - t0)
    except Exception as e:
        logger.error("%s failed (%.2fs): %s", description, time.monotonic() - t0, e)
        raise
