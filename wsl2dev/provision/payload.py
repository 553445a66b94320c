# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/provision/payload.py
"""
Shell payloads executed inside the distribution.

Scripts are generated here as plain text and shipped with
runner.script_argv() (base64 + eval), so nothing in them needs Windows-side
quoting. Values interpolated into a script are either validated usernames or
passed through shlex.quote().

The password never appears in any script: create_user_script() reads the
`user:password` line for chpasswd from stdin.
"""
from __future__ import annotations

import re
import shlex
from typing import Iterable, List

SUDOERS_DROPIN = "/etc/sudoers.d/90-wsl2dev-firstboot"
WSL_CONF = "/etc/wsl.conf"
PROMPT_MARKER_BEGIN = "# >>> wsl2dev prompt >>>"
PROMPT_MARKER_END = "# <<< wsl2dev prompt <<<"
OH_MY_POSH_INSTALLER = "https://ohmyposh.dev/install.sh"
OH_MY_POSH_THEMES = "https://raw.githubusercontent.com/JanDeDobbeleer/oh-my-posh/main/themes"

_PKG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.+_-]*$")
_THEME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def validate_packages(packages: Iterable[str]) -> List[str]:
    out: List[str] = []
    for p in packages:
        p = str(p).strip()
        if not p:
            continue
        if not _PKG_RE.match(p):
            raise ValueError(f"invalid package name: {p!r}")
        out.append(p)
    return out


def create_user_script(username: str, *, first_boot_sudo: bool = False) -> str:
    """
    Root script: create the account (idempotent), set its password from the
    chpasswd line on stdin and add it to the admin group.

    With first_boot_sudo=True it also writes a NOPASSWD drop-in that the
    first-boot payload removes on exit. Callers that do not run first boot
    must leave it off.
    """
    u = shlex.quote(username)
    sudo_dropin = (
        f"printf '%s ALL=(ALL) NOPASSWD: ALL\\n' \"$u\" > {SUDOERS_DROPIN}\nchmod 0440 {SUDOERS_DROPIN}\n"
        if first_boot_sudo
        else ""
    )
    return f"""set -e
u={u}
if ! id -u "$u" >/dev/null 2>&1; then
  shell=$(command -v bash || echo /bin/sh)
  useradd -m -s "$shell" "$u"
fi
chpasswd
added=
for g in sudo wheel; do
  if getent group "$g" >/dev/null 2>&1; then
    usermod -aG "$g" "$u"
    added=$g
    break
  fi
done
[ -n "$added" ] || echo "no sudo/wheel group found" >&2
{sudo_dropin}"""


def default_user_conf_script(username: str) -> str:
    """Root script: set `[user] default=<username>` in /etc/wsl.conf."""
    u = shlex.quote(username)
    return f"""set -e
u={u}
conf={WSL_CONF}
touch "$conf"
if grep -q '^\\[user\\]' "$conf"; then
  sed -i '/^\\[user\\]/,/^\\[/{{/^[[:space:]]*default[[:space:]]*=/d}}' "$conf"
  sed -i "s/^\\[user\\]\\$/[user]\\ndefault=$u/" "$conf"
else
  printf '\\n[user]\\ndefault=%s\\n' "$u" >> "$conf"
fi
grep -q "^default=$u\\$" "$conf"
"""


def first_boot_script(packages: Iterable[str]) -> str:
    """
    User script: refresh the package index and install the baseline toolset
    through `sudo -n`. The sudoers drop-in is removed on exit either way.
    """
    pkgs = " ".join(shlex.quote(p) for p in validate_packages(packages))
    return f"""set -e
trap 'sudo -n rm -f {SUDOERS_DROPIN}' EXIT
export DEBIAN_FRONTEND=noninteractive
pkgs="{pkgs}"
if command -v apt-get >/dev/null 2>&1; then
  sudo -n apt-get update -y
  [ -z "$pkgs" ] || sudo -n -E apt-get install -y --no-install-recommends $pkgs
elif command -v dnf >/dev/null 2>&1; then
  sudo -n dnf makecache -y
  [ -z "$pkgs" ] || sudo -n dnf install -y $pkgs
elif command -v zypper >/dev/null 2>&1; then
  sudo -n zypper --non-interactive refresh
  [ -z "$pkgs" ] || sudo -n zypper --non-interactive install $pkgs
elif command -v pacman >/dev/null 2>&1; then
  sudo -n pacman -Sy --noconfirm $pkgs
else
  echo "no supported package manager found" >&2
  exit 3
fi
mkdir -p "$HOME/.local/bin"
"""


def remove_sudoers_dropin_script() -> str:
    return f"rm -f {SUDOERS_DROPIN}\n"


def prompt_script(theme: str) -> str:
    """
    User script: install oh-my-posh into ~/.local/bin and hook it into
    ~/.bashrc once (guarded by a marker block).
    """
    if not _THEME_RE.match(theme or ""):
        raise ValueError(f"invalid prompt theme: {theme!r}")
    theme_url = f"{OH_MY_POSH_THEMES}/{theme}.omp.json"
    return f"""set -e
bindir="$HOME/.local/bin"
mkdir -p "$bindir"
if [ ! -x "$bindir/oh-my-posh" ] && ! command -v oh-my-posh >/dev/null 2>&1; then
  curl -fsSL {OH_MY_POSH_INSTALLER} | bash -s -- -d "$bindir"
fi
touch "$HOME/.bashrc"
if ! grep -qF '{PROMPT_MARKER_BEGIN}' "$HOME/.bashrc"; then
  cat >> "$HOME/.bashrc" <<'WSL2DEV_EOF'
{PROMPT_MARKER_BEGIN}
export PATH="$HOME/.local/bin:$PATH"
eval "$(oh-my-posh init bash --config {theme_url})"
{PROMPT_MARKER_END}
WSL2DEV_EOF
fi
"""
