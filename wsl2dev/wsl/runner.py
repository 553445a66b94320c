# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/wsl/runner.py
"""
wsl.exe adapter (centralized subprocess execution).

Every interaction with the subsystem goes through WslRunner.run(); nothing
else in the package spawns wsl.exe. The runner never interprets exit codes,
callers do.

Output decoding: wsl.exe prints its own messages as UTF-16LE (with or
without BOM) unless WSL_UTF8=1 is honored, while commands run inside a
distribution print whatever the guest prints (normally UTF-8). We set
WSL_UTF8=1 and still sniff for UTF-16 so both cases decode cleanly.
"""
from __future__ import annotations

import base64
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..core.utils import U

WSL_EXE = "wsl"

_LOG_ARG_MAX = 160


@dataclass(frozen=True)
class WslResult:
    argv: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout + stderr, the text error translation looks at."""
        parts = [s.strip() for s in (self.stdout, self.stderr) if s and s.strip()]
        return "\n".join(parts)


def decode_output(raw: Optional[bytes]) -> str:
    if not raw:
        return ""
    if raw.startswith(b"\xff\xfe"):
        text = raw[2:].decode("utf-16-le", "replace")
    elif len(raw) >= 2 and raw[1:2] == b"\x00" and raw.count(b"\x00") * 3 >= len(raw):
        text = raw.decode("utf-16-le", "replace")
    else:
        text = raw.decode("utf-8", "replace")
    return text.replace("\x00", "").replace("\r\n", "\n").replace("\r", "\n")


def encode_script(script: str) -> str:
    """Base64 form of a shell script, safe to pass as a single argv element."""
    return base64.b64encode(script.encode("utf-8")).decode("ascii")


def script_argv(script: str) -> List[str]:
    """
    argv that runs `script` through sh inside the distribution.

    The script travels base64-encoded and is eval'ed by a fixed one-liner, so
    its content never meets shell quoting; stdin stays free for data
    (chpasswd reads from it).
    """
    b64 = encode_script(script)
    return ["sh", "-c", f'eval "$(echo {b64} | base64 -d)"']


def resolve_wsl_binary(explicit: Optional[str] = None) -> Optional[str]:
    if explicit:
        p = U.which(explicit) or (explicit if Path(explicit).is_file() else None)
        return p
    found = U.which(WSL_EXE)
    if found:
        return found
    system_root = os.environ.get("SystemRoot") or os.environ.get("SYSTEMROOT")
    if system_root:
        candidate = Path(system_root) / "System32" / "wsl.exe"
        if candidate.is_file():
            return str(candidate)
    return None


def _short(arg: str) -> str:
    return arg if len(arg) <= _LOG_ARG_MAX else arg[: _LOG_ARG_MAX - 1] + "…"


class WslRunner:
    """
    Thin wrapper around wsl.exe.

    run() raises FileNotFoundError when the entry point cannot be resolved
    and OSError when the process cannot be started; any exit code is
    returned as a WslResult.
    """

    def __init__(self, logger: logging.Logger, wsl_bin: Optional[str] = None):
        self.logger = logger
        self._explicit = wsl_bin
        self._resolved: Optional[str] = None

    @property
    def binary(self) -> Optional[str]:
        if self._resolved is None:
            self._resolved = resolve_wsl_binary(self._explicit)
        return self._resolved

    def available(self) -> bool:
        return self.binary is not None

    def env(self) -> Dict[str, str]:
        env = dict(os.environ)
        env["WSL_UTF8"] = "1"
        return env

    def run(
        self,
        args: Sequence[str],
        *,
        input_bytes: Optional[Union[bytes, bytearray]] = None,
        timeout: Optional[float] = None,
    ) -> WslResult:
        exe = self.binary
        if exe is None:
            raise FileNotFoundError("wsl.exe not found on PATH or in %SystemRoot%\\System32")

        argv = [exe] + [str(a) for a in args]
        # stdin payloads may carry credentials and are never logged.
        self.logger.debug("wsl: %s%s", " ".join(_short(a) for a in argv[1:]), " <stdin>" if input_bytes else "")

        p = subprocess.run(
            argv,
            input=input_bytes,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=self.env(),
            timeout=timeout,
        )
        res = WslResult(
            argv=argv,
            returncode=p.returncode,
            stdout=decode_output(p.stdout),
            stderr=decode_output(p.stderr),
        )
        if res.returncode != 0:
            self.logger.debug("wsl: exit %d: %s", res.returncode, res.output[:400])
        return res

    # -- subsystem-level commands -------------------------------------------

    def status(self) -> WslResult:
        return self.run(["--status"])

    def version(self) -> WslResult:
        return self.run(["--version"])

    def list_verbose(self) -> WslResult:
        return self.run(["--list", "--verbose"])

    def list_quiet(self) -> WslResult:
        return self.run(["--list", "--quiet"])

    def install(self, distro: str, *, web_download: bool = False) -> WslResult:
        args = ["--install", "-d", distro, "--no-launch"]
        if web_download:
            args.append("--web-download")
        return self.run(args)

    def unregister(self, distro: str) -> WslResult:
        return self.run(["--unregister", distro])

    def terminate(self, distro: str) -> WslResult:
        return self.run(["--terminate", distro])

    def set_default_user(self, distro: str, username: str) -> WslResult:
        return self.run(["--manage", distro, "--set-default-user", username])

    # -- commands inside a distribution -------------------------------------

    def exec_as(
        self,
        distro: str,
        user: str,
        argv: Sequence[str],
        *,
        input_bytes: Optional[Union[bytes, bytearray]] = None,
    ) -> WslResult:
        """Run argv directly (no login shell) inside `distro` as `user`."""
        return self.run(["-d", distro, "-u", user, "--exec", *argv], input_bytes=input_bytes)

    def run_script(
        self,
        distro: str,
        user: str,
        script: str,
        *,
        input_bytes: Optional[Union[bytes, bytearray]] = None,
    ) -> WslResult:
        return self.exec_as(distro, user, script_argv(script), input_bytes=input_bytes)
