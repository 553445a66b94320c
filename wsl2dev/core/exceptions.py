# SPDX-License-Identifier: LGPL-3.0-or-later
# wsl2dev/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _exit_code(x: Any) -> int:
    try:
        code = int(x)
    except (TypeError, ValueError):
        return 1
    if code < 0:
        return 1
    return min(code, 255)


def _one_line(s: str, limit: int = 600) -> str:
    s = " ".join((s or "").split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


_SECRET_KEY_PARTS = (
    "pass",
    "secret",
    "token",
    "credential",
)

REDACTED = "***REDACTED***"


def _is_secret_key(k: str) -> bool:
    ks = (k or "").lower()
    return any(p in ks for p in _SECRET_KEY_PARTS)


def redact_context(ctx: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: (REDACTED if _is_secret_key(str(k)) else v) for k, v in (ctx or {}).items()}


@dataclass(eq=False)
class Wsl2DevError(Exception):
    """
    Base project error. `code` is the process exit code main() honours,
    clamped to 0..255; `msg` is collapsed to one line.
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        self.code = _exit_code(self.code)
        self.msg = _one_line(self.msg) or self.__class__.__name__
        super().__init__(self.msg)
        self.args = (self.msg,)

    def user_message(self, *, include_cause: bool = False) -> str:
        if include_cause and self.cause is not None:
            return f"{self.msg} (cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})"
        return self.msg

    def __str__(self) -> str:
        return self.user_message()


class Fatal(Wsl2DevError):
    """
    User-facing fatal error (exit code should be honored by top-level main()).
    """
    pass


class PrerequisiteError(Fatal):
    """Host is not able to run WSL provisioning (build, privileges, WSL disabled)."""
    pass


@dataclass(eq=False)
class WslCommandError(Wsl2DevError):
    """
    A wsl.exe invocation returned non-zero.
    `returncode` is the raw (unclamped) process exit code; `output` is the
    captured stdout+stderr text used for error translation.
    """
    returncode: int = 1
    output: str = ""


def wrap_fatal(msg: str, exc: Optional[BaseException] = None, code: int = 1) -> Fatal:
    return Fatal(code=code, msg=msg, cause=exc)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output for CLI. With verbose>=1 the cause is appended.
    """
    if isinstance(e, Wsl2DevError):
        return e.user_message(include_cause=verbose >= 1)

    if verbose >= 1:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__
