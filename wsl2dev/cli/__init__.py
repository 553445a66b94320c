# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from .args import parse_args_with_config
from .credentials import resolve_credentials

__all__ = ["parse_args_with_config", "resolve_credentials"]
