# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/cli/credentials.py
"""
Username/password resolution.

Order: --username/--password, then --password-env (CLI or config), then an
interactive prompt when stdin is a terminal. Without a terminal, a missing
value is fatal rather than a hang.
"""
from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Any, Callable, Dict, Optional, Tuple

from ..core.exceptions import Fatal
from ..core.secret import Secret
from ..provision.models import validate_username
from .args.helpers import _merged_get, _merged_secret, _require

MAX_PROMPTS = 3


def _stdin_is_tty() -> bool:
    try:
        return sys.stdin.isatty()
    except Exception:
        return False


def _prompt_username(ask: Callable[[str], str]) -> str:
    for _ in range(MAX_PROMPTS):
        value = ask("Linux username: ").strip()
        try:
            return validate_username(value)
        except ValueError as e:
            print(f"  {e}", file=sys.stderr)
    raise Fatal(1, "No valid username entered")


def _prompt_password(secret_ask: Callable[[str], str]) -> Secret:
    for _ in range(MAX_PROMPTS):
        first = secret_ask("Linux password: ")
        if not first:
            print("  password must not be empty", file=sys.stderr)
            continue
        if secret_ask("Repeat password: ") != first:
            print("  passwords do not match", file=sys.stderr)
            continue
        return Secret.from_str(first)
    raise Fatal(1, "No password entered")


def resolve_credentials(
    args: argparse.Namespace,
    conf: Dict[str, Any],
    logger: logging.Logger,
    *,
    interactive: Optional[bool] = None,
    ask: Callable[[str], str] = input,
    secret_ask: Callable[[str], str] = getpass.getpass,
) -> Tuple[str, Secret]:
    """
    Returns (username, Secret). Clears args.password once it has been
    copied into the Secret.
    """
    if interactive is None:
        interactive = _stdin_is_tty()

    username = _merged_get(args, conf, "username")
    if _require(username):
        try:
            username = validate_username(str(username))
        except ValueError as e:
            raise Fatal(1, f"Invalid username: {e}")
    elif interactive:
        username = _prompt_username(ask)
    else:
        raise Fatal(1, "No username given and stdin is not a terminal; pass --username")

    raw = _merged_secret(args, conf, "password", "password_env")
    if _require(raw):
        source = "option" if _require(_merged_get(args, conf, "password")) else "environment"
        secret = Secret.from_str(str(raw))
        if getattr(args, "password", None):
            args.password = None
        logger.debug("Password taken from %s", source)
    elif interactive:
        envname = _merged_get(args, conf, "password_env")
        if _require(envname):
            logger.warning("Environment variable %s is not set; prompting", envname)
        secret = _prompt_password(secret_ask)
    else:
        raise Fatal(1, "No password given and stdin is not a terminal; use --password-env NAME")

    return str(username), secret
