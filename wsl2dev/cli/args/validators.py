# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
from typing import Any, Dict
from urllib.parse import urlparse

from ...provision.models import validate_username
from ...provision.payload import prompt_script, validate_packages
from .helpers import _merged_get, _require


def _validate_username(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    u = _merged_get(args, conf, "username")
    if not _require(u):
        return  # prompted for later
    try:
        validate_username(str(u))
    except ValueError as e:
        raise SystemExit(f"--username: {e}")


def _validate_packages(args: argparse.Namespace) -> None:
    pk = getattr(args, "packages", None)
    if pk is None:
        return
    items = pk.replace(",", " ").split() if isinstance(pk, str) else list(pk)
    try:
        validate_packages(items)
    except ValueError as e:
        raise SystemExit(f"--packages: {e}")


def _validate_font_url(args: argparse.Namespace) -> None:
    url = str(getattr(args, "font_url", "") or "")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise SystemExit(f"--font-url must be an http(s) URL, got: {url!r}")


def _validate_prompt_theme(args: argparse.Namespace) -> None:
    theme = str(getattr(args, "prompt_theme", "") or "")
    try:
        prompt_script(theme)
    except ValueError as e:
        raise SystemExit(f"--prompt-theme: {e}")


def _validate_poll_knobs(args: argparse.Namespace) -> None:
    interval = getattr(args, "poll_interval_s", None)
    ceiling = getattr(args, "poll_ceiling_s", None)
    if interval is not None and float(interval) <= 0:
        raise SystemExit("--poll-interval must be > 0")
    if ceiling is not None and float(ceiling) <= 0:
        raise SystemExit("--poll-timeout must be > 0")
    if interval is not None and ceiling is not None and float(interval) > float(ceiling):
        raise SystemExit("--poll-interval must not exceed --poll-timeout")


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    """Static checks only; nothing here touches WSL or the filesystem."""
    if not _require(getattr(args, "distro", None)):
        raise SystemExit("--distro must not be empty")
    _validate_username(args, conf)
    _validate_packages(args)
    _validate_font_url(args)
    _validate_prompt_theme(args)
    _validate_poll_knobs(args)
