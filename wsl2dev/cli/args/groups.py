# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse

from ...config.context import (
    DEFAULT_DISTRO,
    DEFAULT_FONT_FACE,
    DEFAULT_FONT_URL,
    DEFAULT_PACKAGES,
    DEFAULT_PROMPT_THEME,
)


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged normalized config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args (password redacted) and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv, -vvv")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less console output: -q (warnings), -qq (errors).")
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Append logs to this file (default: %%LOCALAPPDATA%%\\wsl2dev\\logs\\wsl2dev-<timestamp>.log).",
    )
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit logs as NDJSON.")


def _add_distribution(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Distribution
    # ------------------------------------------------------------------
    p.add_argument("--distro", dest="distro", default=DEFAULT_DISTRO, help="Distribution to install/provision (see `wsl --list --online`).")
    p.add_argument(
        "--packages",
        dest="packages",
        default=None,
        help=f"Baseline packages for first boot, comma or space separated (default: {' '.join(DEFAULT_PACKAGES)}).",
    )
    p.add_argument(
        "--web-download",
        dest="web_download",
        action="store_true",
        help="Download the distribution from the web instead of the Microsoft Store.",
    )


def _add_credentials(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Linux account (prompted on a terminal when missing)
    # ------------------------------------------------------------------
    p.add_argument("--username", dest="username", default=None, help="Linux user to create (lowercase letters/digits).")
    p.add_argument(
        "--password",
        dest="password",
        default=None,
        help="Password for the Linux user (visible in process listings; prefer --password-env).",
    )
    p.add_argument(
        "--password-env",
        dest="password_env",
        default=None,
        help="Name of an environment variable holding the password.",
    )


def _add_peripherals(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Extras (never affect the exit code)
    # ------------------------------------------------------------------
    p.add_argument("--skip-font", dest="skip_font", action="store_true", help="Do not install the Nerd Font.")
    p.add_argument("--skip-prompt", dest="skip_prompt", action="store_true", help="Do not install oh-my-posh in the distribution.")
    p.add_argument("--skip-terminal-config", dest="skip_terminal_config", action="store_true", help="Leave Windows Terminal settings alone.")
    p.add_argument("--skip-editor-config", dest="skip_editor_config", action="store_true", help="Leave VS Code settings alone.")
    p.add_argument("--font-url", dest="font_url", default=DEFAULT_FONT_URL, help="Nerd Font release zip to install.")
    p.add_argument("--font-name", dest="font_name", default=DEFAULT_FONT_FACE, help="Font face written into terminal/editor settings.")
    p.add_argument("--prompt-theme", dest="prompt_theme", default=DEFAULT_PROMPT_THEME, help="oh-my-posh theme name.")
    p.add_argument("--backup-dir", dest="backup_dir", default=None, help="Where settings backups go (default: per-run dir under %%LOCALAPPDATA%%\\wsl2dev\\backups).")


def _add_advanced(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Advanced
    # ------------------------------------------------------------------
    p.add_argument("--skip-admin-check", dest="skip_admin_check", action="store_true", help="Do not require an elevated terminal.")
    p.add_argument("--wsl-bin", dest="wsl_bin", default=None, help="Path to wsl.exe (default: PATH, then %%SystemRoot%%\\System32).")
    p.add_argument("--poll-interval", dest="poll_interval_s", type=float, default=5.0, help="Seconds between state polls.")
    p.add_argument("--poll-timeout", dest="poll_ceiling_s", type=float, default=60.0, help="Give up waiting for a state change after this many seconds.")
