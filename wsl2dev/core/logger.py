# SPDX-License-Identifier: LGPL-3.0-or-later
# wsl2dev/core/logger.py
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import REDACTED, _is_secret_key, redact_context

# Optional: colors
try:
    from termcolor import colored as _colored  # type: ignore
except Exception:  # pragma: no cover
    _colored = None

# ---------------------------------------------------------------------------
# TRACE / SUCCESS levels (additive)
# ---------------------------------------------------------------------------

TRACE = 5
SUCCESS = 25

if not hasattr(logging, "TRACE"):
    logging.TRACE = TRACE  # type: ignore[attr-defined]
    logging.addLevelName(TRACE, "TRACE")

if not hasattr(logging, "SUCCESS"):
    logging.SUCCESS = SUCCESS  # type: ignore[attr-defined]
    logging.addLevelName(SUCCESS, "SUCCESS")


def _logger_trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


def _logger_success(self: logging.Logger, msg: str, *args, **kwargs) -> None:
    if self.isEnabledFor(SUCCESS):
        self._log(SUCCESS, msg, args, **kwargs)


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _logger_trace  # type: ignore[attr-defined]

if not hasattr(logging.Logger, "success"):
    logging.Logger.success = _logger_success  # type: ignore[attr-defined]

_LEVEL_EMOJI = {
    "TRACE": "🧬",
    "DEBUG": "🔍",
    "INFO": "ℹ️ ",
    "SUCCESS": "✅",
    "WARNING": "⚠️ ",
    "ERROR": "💥",
    "CRITICAL": "🧨",
}
_LEVEL_COLOR = {
    "TRACE": "cyan",
    "DEBUG": "blue",
    "INFO": "white",
    "SUCCESS": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red",
}
# Console labels follow the INFO/WARN/ERROR/SUCCESS vocabulary.
_LEVEL_LABEL = {
    "WARNING": "WARN",
}


def _is_tty() -> bool:
    try:
        return bool(sys.stderr.isatty())
    except Exception:
        return False


def _supports_unicode() -> bool:
    """
    Best-effort check: if the stream encoding can't handle emoji, degrade gracefully.
    """
    try:
        enc = getattr(sys.stderr, "encoding", None) or "utf-8"
        "✅".encode(enc)
        return True
    except Exception:
        return False


def c(
    text: str,
    color: Optional[str] = None,
    attrs: Optional[List[str]] = None,
    *,
    enable: bool = True,
) -> str:
    """Colorize text if termcolor is available and enabled."""
    if not enable or _colored is None or not color:
        return text
    try:
        return _colored(text, color=color, attrs=attrs or [])
    except Exception:
        return text


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------

Ctx = Mapping[str, Any]


def _safe_str(v: Any, *, max_len: int = 240) -> str:
    try:
        s = str(v)
    except Exception:
        s = repr(v)
    s = s.replace("\n", "\\n").replace("\r", "\\r")
    if len(s) > max_len:
        s = s[: max_len - 1] + "…"
    return s


def _merge_ctx(base: Optional[Ctx], extra: Optional[Ctx]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if base:
        out.update(dict(base))
    if extra:
        out.update(dict(extra))
    return out


def _format_ctx_kv(ctx: Optional[Ctx]) -> str:
    if not ctx:
        return ""
    try:
        items = sorted(ctx.items(), key=lambda kv: str(kv[0]))
    except Exception:
        items = list(ctx.items())
    parts: List[str] = []
    for k, v in items:
        key = _safe_str(k, max_len=80)
        parts.append(f"{key}={REDACTED if _is_secret_key(key) else _safe_str(v)}")
    return " " + " ".join(parts) if parts else ""


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that carries a persistent context dict.
    Call sites can also pass `extra={"ctx": {...}}` which merges on top.

    Usage:
      log = Log.bind(logger, distro="Ubuntu", user="devuser")
      log.info("Starting")
      log.error("Failed", extra={"ctx": {"rc": 2}})
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Ctx] = None):
        super().__init__(logger, extra={"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        call_ctx = extra.get("ctx")
        merged = _merge_ctx(self.extra.get("ctx"), call_ctx)
        extra["ctx"] = merged
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **ctx: Any) -> "ContextLoggerAdapter":
        merged = _merge_ctx(self.extra.get("ctx"), ctx)
        return ContextLoggerAdapter(self.logger, merged)


@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    show_ms: bool = False
    show_src: bool = False  # module:line
    show_pid: bool = False
    show_date: bool = False
    unicode: bool = True
    level_width: int = 7


class EmojiFormatter(logging.Formatter):
    """`HH:MM:SS ✅ SUCCESS [src] message key=value` with optional colour."""

    def __init__(self, style: LogStyle):
        super().__init__()
        self._style = style

    def _now(self, created: float) -> str:
        dt = _dt.datetime.fromtimestamp(created)
        fmt = "%Y-%m-%d %H:%M:%S" if self._style.show_date else "%H:%M:%S"
        if self._style.show_ms:
            return dt.strftime(fmt + ".%f")[:-3]
        return dt.strftime(fmt)

    def _emoji(self, levelname: str) -> str:
        if not self._style.unicode:
            return "·"
        return _LEVEL_EMOJI.get(levelname, "•")

    def _prefix_bits(self, record: logging.LogRecord) -> str:
        bits: List[str] = []
        if self._style.show_pid:
            bits.append(f"pid={os.getpid()}")
        if self._style.show_src:
            bits.append(f"{record.module}:{record.lineno}")
        return (" [" + " ".join(bits) + "]") if bits else ""

    def _exception_block(self, record: logging.LogRecord, color_ok: bool) -> str:
        parts: List[str] = []
        if record.exc_info:
            parts.append(self.formatException(record.exc_info))
        if getattr(record, "stack_info", None):
            parts.append(record.stack_info)
        if not parts:
            return ""
        block = "\n".join("  " + ln for ln in "\n".join(parts).splitlines())
        return "\n" + c(block, "red", enable=color_ok and bool(record.exc_info))

    def format(self, record: logging.LogRecord) -> str:
        color_ok = bool(self._style.color and _is_tty() and _colored is not None)

        lvl = _LEVEL_LABEL.get(record.levelname, record.levelname)
        lvl_s = c(f"{lvl:<{self._style.level_width}}", _LEVEL_COLOR.get(record.levelname), enable=color_ok)

        msg = record.getMessage()
        if record.levelno >= logging.WARNING or record.levelno == SUCCESS:
            msg = c(msg, _LEVEL_COLOR.get(record.levelname), attrs=["bold"], enable=color_ok)

        line = (
            f"{self._now(record.created)} {self._emoji(record.levelname)} {lvl_s}"
            f"{self._prefix_bits(record)} {msg}{_format_ctx_kv(getattr(record, 'ctx', None))}"
        )
        return line + self._exception_block(record, color_ok)


class JsonFormatter(logging.Formatter):
    """
    NDJSON formatter (one JSON object per line) for --json-logs.
    Secret-looking context keys are redacted.
    """

    def format(self, record: logging.LogRecord) -> str:
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "pid": os.getpid(),
            "module": record.module,
            "lineno": record.lineno,
        }

        ctx = getattr(record, "ctx", None)
        if ctx:
            obj["ctx"] = redact_context(dict(ctx))

        if record.exc_info:
            obj["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else "Exception"
            obj["traceback"] = self.formatException(record.exc_info)

        return json.dumps(obj, ensure_ascii=False, default=_safe_str)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """
        Typical CLI mapping:
          quiet=0: default INFO
          -q: WARNING
          -qq: ERROR
          -v: INFO
          -vv: DEBUG
          -vvv: TRACE
        Quiet wins over verbose if both are set.
        """
        if quiet >= 2:
            return logging.ERROR
        if quiet == 1:
            return logging.WARNING
        if verbose >= 3:
            return TRACE
        if verbose >= 2:
            return logging.DEBUG
        return logging.INFO

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        """Return a LoggerAdapter that carries a persistent context dict."""
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def banner(logger: logging.Logger, title: str, *, char: str = "─") -> None:
        width = 72
        t = f" {title.strip()} "
        line = (char * max(8, (width - len(t)) // 2)) + t + (char * max(8, (width - len(t)) // 2))
        logger.info(line[:width])

    @staticmethod
    def step(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("➡️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.log(SUCCESS, "%s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.warning("%s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def fail(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.error("%s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any, **ctx: Any) -> None:
        logger.log(TRACE, msg, *args, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: Optional[bool] = None,
        logger_name: str = "wsl2dev",
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        Configure and return the project's logger.

        Console gets the emoji formatter on stderr; the log file (appended,
        UTF-8) gets the same lines without colors plus date, milliseconds and
        source location. json_logs=True switches both to NDJSON.
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False

        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        # -vvv adds milliseconds and module:line on the console.
        console_style = LogStyle(
            color=True if color is None else bool(color),
            show_ms=verbose >= 3,
            show_src=verbose >= 3,
            unicode=_supports_unicode(),
        )
        file_style = LogStyle(color=False, show_ms=True, show_src=True, show_pid=True, show_date=True)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            try:
                h.close()
            except Exception:
                pass

        sh = logging.StreamHandler(stream=sys.stderr)
        sh.setLevel(level)
        sh.setFormatter(JsonFormatter() if json_logs else EmojiFormatter(console_style))
        logger.addHandler(sh)

        if log_file:
            fp = Path(log_file).expanduser().resolve()
            fp.parent.mkdir(parents=True, exist_ok=True)
            fh_fmt: logging.Formatter = JsonFormatter() if json_logs else EmojiFormatter(file_style)

            # File always records DEBUG so a failed run can be diagnosed.
            fh = logging.FileHandler(fp, mode="a", encoding="utf-8")
            fh.setLevel(min(level, logging.DEBUG))
            fh.setFormatter(fh_fmt)
            logger.addHandler(fh)
            logger.setLevel(min(level, logging.DEBUG))

        logger.debug("Logger initialized (level=%s, pid=%s, log_file=%s)", logging.getLevelName(level), os.getpid(), log_file)
        return logger
