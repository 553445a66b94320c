# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""
Bounded retry helpers.

The provisioner retries exactly one operation (the image install) and only
for one failure class, so the helper here is attempt-bounded and
predicate-driven rather than a general backoff decorator.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

T = TypeVar("T")


def bounded_retry(
    operation: Callable[[], T],
    *,
    should_retry: Callable[[T], bool],
    before_retry: Optional[Callable[[T], bool]] = None,
    max_attempts: int = 2,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
) -> T:
    """
    Run `operation` up to `max_attempts` times.

    Unlike exception-driven retry, the operation reports failure through its
    return value: `should_retry(result)` decides whether the result is a
    retryable failure. `before_retry(result)` runs between attempts and may
    veto the retry by returning False (the last result is then returned).

    Returns the result of the last attempt.

    Example:
        result = bounded_retry(
            lambda: runner.install(name),
            should_retry=lambda r: r.returncode != 0 and is_contention(r),
            before_retry=lambda _r: resolver.resolve_stuck_state(name),
            operation_name="install",
        )
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    attempt = 1
    result = operation()
    while attempt < max_attempts and should_retry(result):
        if before_retry is not None and not before_retry(result):
            if logger:
                logger.warning("%s: retry vetoed after attempt %d/%d", operation_name, attempt, max_attempts)
            return result
        attempt += 1
        if logger:
            logger.warning("%s: retrying (attempt %d/%d)", operation_name, attempt, max_attempts)
        result = operation()
    return result
