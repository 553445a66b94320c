# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ...config.config_loader import Config
from ...config.context import default_log_file
from ...core.logger import Log, c
from ...core.utils import U
from .builder import HelpFormatter, _build_epilog
from .groups import (
    _add_advanced,
    _add_credentials,
    _add_distribution,
    _add_global_config_logging,
    _add_peripherals,
)
from .helpers import _redacted
from .validators import validate_args


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wsl2dev",
        description=c("wsl2dev: one-shot WSL developer environment setup", "green", ["bold"]),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(),
    )

    _add_global_config_logging(p)
    _add_distribution(p)
    _add_credentials(p)
    _add_peripherals(p)
    _add_advanced(p)

    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--dump-config", action="store_true")
    pre.add_argument("--dump-args", action="store_true")
    return pre


def _load_merged_config(logger: Any, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    expanded = Config.expand_configs(logger, list(cfgs))
    return Config.load_many(logger, expanded)


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Any = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], Any]:
    """
    Flow:
      Phase 0: parse only the flags needed to locate config/logging
      Phase 1: load+merge config files
      Phase 2: apply config as defaults onto the parser
      Phase 3: full parse to get final args
      Phase 4: validate using merged config + args

    The log file defaults to a fresh timestamped file per run; args.log_file
    always holds the path actually used.
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = build_parser()

    pre = _build_preparser()
    args0, _rest = pre.parse_known_args(argv)

    dumping = bool(args0.dump_config or args0.dump_args)
    log_file = args0.log_file or (None if dumping else str(default_log_file()))

    if logger is None:
        logger = Log.setup(
            args0.verbose,
            log_file,
            quiet=args0.quiet,
            json_logs=args0.json_logs,
        )

    conf = _load_merged_config(logger, args0.config or [])

    if args0.dump_config:
        print(U.json_dump(_redacted(conf)))
        raise SystemExit(0)

    # Config values become defaults so the CLI can override them.
    Config.apply_as_defaults(logger, parser, conf)

    args = parser.parse_args(argv)
    if not args.log_file:
        args.log_file = log_file

    if args0.dump_args:
        print(U.json_dump(_redacted(vars(args))))
        raise SystemExit(0)

    validate_args(args, conf)

    return args, conf, logger
