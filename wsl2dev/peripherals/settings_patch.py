# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/peripherals/settings_patch.py
"""
Font settings for Windows Terminal and VS Code.

Both products store settings as JSON with comments (JSONC) and tolerate
trailing commas. We read JSONC, set a few keys, and write plain JSON back;
comments in the file survive only in the timestamped backup.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config.context import RunContext
from ..core.file_ops import atomic_write, backup_file
from ..core.utils import U

_WT_PACKAGES = (
    "Microsoft.WindowsTerminal_8wekyb3d8bbwe",
    "Microsoft.WindowsTerminalPreview_8wekyb3d8bbwe",
)


def strip_jsonc(text: str) -> str:
    """
    Remove // and /* */ comments and trailing commas, leaving string
    literals untouched.
    """
    out: List[str] = []
    i, n = 0, len(text)
    in_str = False
    while i < n:
        ch = text[i]
        if in_str:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_str = False
            i += 1
            continue

        if ch == '"':
            in_str = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            j = text.find("\n", i)
            i = n if j < 0 else j
        elif text.startswith("/*", i):
            j = text.find("*/", i + 2)
            if j < 0:
                raise ValueError("unterminated block comment")
            i = j + 2
        elif ch == ",":
            # drop the comma when only whitespace separates it from } or ]
            j = i + 1
            while j < n and text[j] in " \t\r\n":
                j += 1
            if j < n and text[j] in "}]":
                i += 1
            else:
                out.append(ch)
                i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def load_jsonc(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8-sig")
    if not text.strip():
        return {}
    data = json.loads(strip_jsonc(text))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level JSON value is not an object")
    return data


def set_path(doc: Dict[str, Any], dotted: Sequence[str], value: Any) -> bool:
    """Set doc[a][b][c] = value, creating objects on the way. Returns True if changed."""
    node = doc
    for key in dotted[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    leaf = dotted[-1]
    if node.get(leaf) == value:
        return False
    node[leaf] = value
    return True


class SettingsPatcher:
    """
    Backup -> JSONC load -> set keys -> atomic write. Subclasses provide
    candidate paths, the key/value pairs, and what to do when no file exists.
    """

    label = "settings"
    backup_label = "settings"
    create_if_missing = False

    def __init__(self, logger: logging.Logger, ctx: RunContext, *, paths: Optional[Sequence[Path]] = None):
        self.logger = logger
        self.ctx = ctx
        self._paths = list(paths) if paths is not None else None

    def candidate_paths(self) -> List[Path]:
        raise NotImplementedError

    def settings(self) -> List[Tuple[Tuple[str, ...], Any]]:
        raise NotImplementedError

    def prepare(self, doc: Dict[str, Any]) -> None:
        """Hook for layout fixes before keys are set."""

    def _paths_or_default(self) -> List[Path]:
        return self._paths if self._paths is not None else self.candidate_paths()

    def locate(self) -> Optional[Path]:
        for p in self._paths_or_default():
            if p.is_file():
                return p
        return None

    def _write(self, path: Path, doc: Dict[str, Any]) -> None:
        U.ensure_dir(path.parent)
        with atomic_write(path) as tmp:
            tmp.write_text(json.dumps(doc, indent=4, ensure_ascii=False) + "\n", encoding="utf-8")

    def patch(self) -> bool:
        """Never raises; failures are warnings."""
        path = self.locate()
        try:
            if path is None:
                candidates = self._paths_or_default()
                if not self.create_if_missing or not candidates:
                    self.logger.warning("⚠️ %s not found; skipping", self.label)
                    return False
                path = candidates[0]
                doc: Dict[str, Any] = {}
                self.logger.info("📝 Creating %s at %s", self.label, path)
            else:
                bak = backup_file(path, self.ctx.backup_dir, label=f"{self.backup_label}-{path.name}")
                self.logger.debug("Backed up %s to %s", path, bak)
                doc = load_jsonc(path)

            self.prepare(doc)
            changed = False
            for dotted, value in self.settings():
                changed = set_path(doc, dotted, value) or changed

            if not changed and path.exists():
                self.logger.info("📝 %s already up to date", self.label)
                return True

            self._write(path, doc)
        except (OSError, ValueError) as e:
            self.logger.warning("⚠️ Could not update %s: %s", self.label, e)
            return False

        self.logger.info("📝 Updated %s (%s)", self.label, path)
        return True


class TerminalConfigPatcher(SettingsPatcher):
    label = "Windows Terminal settings"
    backup_label = "windows-terminal"
    create_if_missing = False

    def candidate_paths(self) -> List[Path]:
        local = U.env_path("LOCALAPPDATA")
        if local is None:
            return []
        paths = [local / "Packages" / pkg / "LocalState" / "settings.json" for pkg in _WT_PACKAGES]
        paths.append(local / "Microsoft" / "Windows Terminal" / "settings.json")
        return paths

    def prepare(self, doc: Dict[str, Any]) -> None:
        # Pre-1.0 settings keep profiles as a bare list.
        profiles = doc.get("profiles")
        if isinstance(profiles, list):
            doc["profiles"] = {"defaults": {}, "list": profiles}

    def settings(self) -> List[Tuple[Tuple[str, ...], Any]]:
        return [(("profiles", "defaults", "font", "face"), self.ctx.font_face)]

    def patch_terminal_config(self) -> bool:
        return self.patch()


class EditorConfigPatcher(SettingsPatcher):
    label = "VS Code settings"
    backup_label = "vscode"
    create_if_missing = True

    def candidate_paths(self) -> List[Path]:
        roaming = U.env_path("APPDATA")
        if roaming is None:
            return []
        return [roaming / "Code" / "User" / "settings.json"]

    def settings(self) -> List[Tuple[Tuple[str, ...], Any]]:
        # VS Code keys are flat strings containing dots, not nested objects.
        face = f"'{self.ctx.font_face}', Consolas, 'Courier New', monospace"
        return [
            (("editor.fontFamily",), face),
            (("terminal.integrated.fontFamily",), f"'{self.ctx.font_face}'"),
        ]

    def patch_editor_config(self) -> bool:
        return self.patch()
