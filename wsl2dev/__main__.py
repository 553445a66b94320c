# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/__main__.py
from __future__ import annotations

import sys
import traceback
from typing import Optional, Sequence

from .cli import parse_args_with_config, resolve_credentials
from .config.context import RunContext
from .core.exceptions import Fatal, format_exception_for_cli, wrap_fatal
from .orchestrator import Orchestrator
from .provision import ProvisioningRequest


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger, level: str, msg: str) -> None:
    if logger is None:
        _print_stderr(msg)
        return
    fn = getattr(logger, level, None)
    if callable(fn):
        fn(msg)
    else:
        _print_stderr(msg)


def _verbosity(argv: Optional[Sequence[str]]) -> int:
    """Count -v flags before the parser has run (or after it failed)."""
    n = 0
    for a in (sys.argv[1:] if argv is None else argv):
        if a == "--verbose":
            n += 1
        elif a.startswith("-v") and set(a[1:]) == {"v"}:
            n += len(a) - 1
    return n


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger: Optional[object] = None

    # Phase 1: parse + credentials (Fatal can happen here)
    try:
        args, conf, logger = parse_args_with_config(argv)
        ctx = RunContext.from_args(args)
        username, secret = resolve_credentials(args, conf, logger)
        try:
            request = ProvisioningRequest(ctx.distro, username, secret)
        except ValueError as e:
            secret.wipe()
            raise wrap_fatal(f"Invalid request: {e}", e)
    except Fatal as e:
        _safe_log(logger, "error", f"💥 {format_exception_for_cli(e, verbose=_verbosity(argv))}")
        raise SystemExit(getattr(e, "code", 1))
    except (KeyboardInterrupt, EOFError):
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        raise SystemExit(130)

    # Phase 2: run
    try:
        rc = Orchestrator(logger, ctx).run(request)
    except Fatal as e:
        _safe_log(logger, "error", format_exception_for_cli(e, verbose=getattr(args, "verbose", 0)))
        rc = getattr(e, "code", 1)
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        rc = 1
    finally:
        request.password.wipe()

    raise SystemExit(rc)


if __name__ == "__main__":
    main()
