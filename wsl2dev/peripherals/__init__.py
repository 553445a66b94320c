# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""Windows-side and in-image extras run after provisioning; all best-effort."""
from .font import FontInstaller
from .prompt import PromptInstaller
from .settings_patch import EditorConfigPatcher, TerminalConfigPatcher

__all__ = [
    "EditorConfigPatcher",
    "FontInstaller",
    "PromptInstaller",
    "TerminalConfigPatcher",
]
