# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/config/context.py
"""
Per-run configuration object.

Everything a component needs to know about the run (paths, timings, skip
flags) travels in a RunContext handed to its constructor, never through
module globals.
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.utils import U

DEFAULT_DISTRO = "Ubuntu"
DEFAULT_FONT_URL = "https://github.com/ryanoasis/nerd-fonts/releases/latest/download/CascadiaCode.zip"
DEFAULT_FONT_FACE = "CaskaydiaCove Nerd Font"
DEFAULT_PROMPT_THEME = "jandedobbeleer"
DEFAULT_PACKAGES: Tuple[str, ...] = ("git", "curl", "wget", "unzip", "build-essential")

# `wsl --manage <distro> --set-default-user` first shipped in this release.
NATIVE_DEFAULT_USER_MIN_VERSION: Tuple[int, ...] = (2, 4, 4)


def default_data_root() -> Path:
    base = U.env_path("LOCALAPPDATA")
    if base is not None:
        return base / "wsl2dev"
    return Path.home() / ".wsl2dev"


def default_log_file() -> Path:
    return default_data_root() / "logs" / f"wsl2dev-{U.now_ts()}.log"


def default_backup_dir() -> Path:
    return default_data_root() / "backups" / U.now_ts()


@dataclass
class RunContext:
    distro: str = DEFAULT_DISTRO
    wsl_bin: Optional[str] = None

    log_file: Optional[Path] = None
    backup_dir: Path = field(default_factory=default_backup_dir)

    skip_font: bool = False
    skip_prompt: bool = False
    skip_terminal_config: bool = False
    skip_editor_config: bool = False
    skip_admin_check: bool = False

    font_url: str = DEFAULT_FONT_URL
    font_face: str = DEFAULT_FONT_FACE
    prompt_theme: str = DEFAULT_PROMPT_THEME
    packages: List[str] = field(default_factory=lambda: list(DEFAULT_PACKAGES))
    web_download: bool = False

    # Resolver / readiness polling (seconds).
    poll_interval_s: float = 5.0
    poll_ceiling_s: float = 60.0
    settle_s: float = 3.0

    native_default_user_min_version: Tuple[int, ...] = NATIVE_DEFAULT_USER_MIN_VERSION

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunContext":
        ctx = cls()
        ctx.distro = str(getattr(args, "distro", None) or DEFAULT_DISTRO)
        ctx.wsl_bin = getattr(args, "wsl_bin", None) or None

        log_file = getattr(args, "log_file", None)
        ctx.log_file = Path(log_file).expanduser() if log_file else None
        backup_dir = getattr(args, "backup_dir", None)
        if backup_dir:
            ctx.backup_dir = Path(backup_dir).expanduser()

        for flag in ("skip_font", "skip_prompt", "skip_terminal_config", "skip_editor_config", "skip_admin_check", "web_download"):
            setattr(ctx, flag, bool(getattr(args, flag, False)))

        ctx.font_url = getattr(args, "font_url", None) or DEFAULT_FONT_URL
        ctx.font_face = getattr(args, "font_name", None) or getattr(args, "font_face", None) or DEFAULT_FONT_FACE
        ctx.prompt_theme = getattr(args, "prompt_theme", None) or DEFAULT_PROMPT_THEME

        packages = getattr(args, "packages", None)
        if isinstance(packages, str):
            packages = [p for p in packages.replace(",", " ").split() if p]
        if packages:
            ctx.packages = list(packages)

        for knob in ("poll_interval_s", "poll_ceiling_s", "settle_s"):
            v = getattr(args, knob, None)
            if v is not None:
                setattr(ctx, knob, float(v))
        return ctx
