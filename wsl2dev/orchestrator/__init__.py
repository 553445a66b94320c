# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from .orchestrator import Orchestrator, RunReport

__all__ = ["Orchestrator", "RunReport"]
