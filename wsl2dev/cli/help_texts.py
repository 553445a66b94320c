# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/cli/help_texts.py
from __future__ import annotations

# Pure help text for the argparse epilog; no imports beyond the stdlib.

YAML_EXAMPLE = r"""# wsl2dev configuration (YAML or JSON)
#
# Run (elevated terminal):
#   wsl2dev --config dev.yaml
#
# Merge configs (later overrides earlier), CLI flags override both:
#   wsl2dev --config base.yaml --config laptop.yaml --distro Debian
#
# Keys use the long option names; dashes or underscores both work.
# --------------------------------------------------------------------------------------
distro: Ubuntu-24.04
username: alice
password_env: WSL2DEV_PASSWORD   # name of an environment variable; never put the password itself here
packages: [git, curl, wget, unzip, build-essential, python3-pip]
web_download: false

font_url: https://github.com/ryanoasis/nerd-fonts/releases/latest/download/CascadiaCode.zip
font_name: CaskaydiaCove Nerd Font
prompt_theme: jandedobbeleer

skip_font: false
skip_prompt: false
skip_terminal_config: false
skip_editor_config: false

log_file: C:/Users/alice/wsl2dev.log
backup_dir: C:/Users/alice/wsl2dev-backups
"""

FEATURE_SUMMARY = r"""  • Installs the WSL distribution (non-interactive, --no-launch), waiting out
    Installing/Uninstalling states left behind by earlier runs
  • Creates a sudo-capable user and makes it the distribution's default login
  • First boot: package index refresh + baseline toolset
  • Nerd Font for Windows, oh-my-posh prompt, Windows Terminal and VS Code font settings
  • Settings files are backed up before they are rewritten
  • Exit code 0 on success, 1 on any fatal failure; extras never change it
"""
