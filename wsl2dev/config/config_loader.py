# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/config/config_loader.py
"""
YAML/JSON config loading.

Config files only provide defaults: they are merged in order (later files
override earlier ones) and applied onto the argparse parser, so anything
given on the command line still wins.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.utils import U


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, cfgs: List[str]) -> List[Path]:
        """Expand `~` and globs; missing files are fatal."""
        out: List[Path] = []
        for raw in cfgs:
            pat = str(Path(raw).expanduser())
            hits = sorted(glob.glob(pat)) if any(ch in pat for ch in "*?[") else [pat]
            if not hits:
                U.die(logger, f"Config pattern matched nothing: {raw}", 2)
            for h in hits:
                p = Path(h)
                if not p.is_file():
                    U.die(logger, f"Config file not found: {p}", 2)
                out.append(p)
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            U.die(logger, f"Failed to parse config {path}: {e}", 2)
        if not isinstance(data, dict):
            U.die(logger, f"Config {path} must contain a mapping at top level", 2)
        logger.debug("Loaded config %s (%d keys)", path, len(data))
        return Config.normalize(data)

    @staticmethod
    def normalize(data: Dict[str, Any]) -> Dict[str, Any]:
        """Accept kebab-case keys (`skip-font`) as argparse dests (`skip_font`)."""
        return {str(k).replace("-", "_"): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: List[Path]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for p in paths:
            merged.update(Config.load_one(logger, p))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """
        Push config values into parser defaults. Unknown keys are kept in
        `conf` (validators may read them) but reported at debug level.
        """
        known = {a.dest for a in parser._actions}
        defaults: Dict[str, Any] = {}
        for k, v in conf.items():
            if k in known:
                defaults[k] = v
            else:
                logger.debug("Config key %r has no matching CLI option", k)
        if defaults:
            parser.set_defaults(**defaults)
