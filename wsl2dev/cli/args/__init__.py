# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/cli/args/__init__.py
"""
Argument parsing for the wsl2dev CLI, split by concern:

  builder    - help formatter and epilog
  groups     - `_add_*` option groups
  helpers    - config/CLI merge helpers
  validators - static argument checks
  parser     - two-phase parse (config files become argparse defaults)
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .groups import (
    _add_advanced,
    _add_credentials,
    _add_distribution,
    _add_global_config_logging,
    _add_peripherals,
)
from .helpers import _merged_get, _merged_secret, _redacted, _require
from .parser import _build_preparser, _load_merged_config, build_parser, parse_args_with_config
from .validators import validate_args

__all__ = [
    "HelpFormatter",
    "_build_epilog",
    "_add_advanced",
    "_add_credentials",
    "_add_distribution",
    "_add_global_config_logging",
    "_add_peripherals",
    "_merged_get",
    "_merged_secret",
    "_redacted",
    "_require",
    "_build_preparser",
    "_load_merged_config",
    "build_parser",
    "parse_args_with_config",
    "validate_args",
]
