# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/peripherals/font.py
"""
Per-user Nerd Font install on the Windows side.

Fonts go into %LOCALAPPDATA%\\Microsoft\\Windows\\Fonts and are registered
under HKCU, which needs no elevation and takes effect for new processes.
"""
from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
import zipfile
from pathlib import Path
from typing import List, Optional

import requests
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from ..config.context import RunContext
from ..core.utils import U

FONT_REG_KEY = r"HKCU\Software\Microsoft\Windows NT\CurrentVersion\Fonts"
FONT_EXTENSIONS = (".ttf", ".otf")
# Mono/Propo are spacing variants of the same face and are not installed.
SKIPPED_VARIANTS = ("NerdFontMono", "NerdFontPropo")

CHUNK_BYTES = 256 * 1024
CONNECT_TIMEOUT_S = 15
READ_TIMEOUT_S = 120


def user_fonts_dir() -> Optional[Path]:
    base = U.env_path("LOCALAPPDATA")
    if base is None:
        return None
    return base / "Microsoft" / "Windows" / "Fonts"


def font_files_in(archive: zipfile.ZipFile) -> List[str]:
    """Member names worth installing from a Nerd Font release zip."""
    out: List[str] = []
    for name in archive.namelist():
        if name.endswith("/") or name.startswith("__MACOSX/"):
            continue
        base = Path(name).name
        if not base.lower().endswith(FONT_EXTENSIONS):
            continue
        if any(v in base for v in SKIPPED_VARIANTS):
            continue
        out.append(name)
    return sorted(out)


def registry_value_name(font_file: Path) -> str:
    kind = "OpenType" if font_file.suffix.lower() == ".otf" else "TrueType"
    return f"{font_file.stem} ({kind})"


class FontInstaller:
    def __init__(
        self,
        logger: logging.Logger,
        ctx: RunContext,
        *,
        fonts_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ):
        self.logger = logger
        self.ctx = ctx
        self.fonts_dir = fonts_dir
        self.session = session or requests.Session()

    def download(self, url: str, dest: Path) -> int:
        """Stream `url` into `dest`; returns bytes written."""
        resp = self.session.get(url, stream=True, timeout=(CONNECT_TIMEOUT_S, READ_TIMEOUT_S), allow_redirects=True)
        resp.raise_for_status()
        total = resp.headers.get("Content-Length")
        expected = int(total) if total and total.isdigit() else None

        written = 0
        with Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            transient=True,
        ) as progress:
            task = progress.add_task(f"Downloading {dest.name}", total=expected)
            with open(dest, "wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_BYTES):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
                        progress.update(task, completed=written)

        if expected is not None and written != expected:
            raise OSError(f"download truncated: expected {expected} bytes, got {written}")
        return written

    def _register(self, font_file: Path) -> bool:
        cmd = [
            "reg.exe", "add", FONT_REG_KEY,
            "/v", registry_value_name(font_file),
            "/t", "REG_SZ",
            "/d", str(font_file),
            "/f",
        ]
        cp = U.run_cmd(self.logger, cmd, check=False, capture=True)
        if cp.returncode != 0:
            self.logger.warning("Could not register %s (reg.exe exit %d)", font_file.name, cp.returncode)
            return False
        return True

    def install_font(self) -> bool:
        """Never raises; failures are warnings."""
        fonts_dir = self.fonts_dir or user_fonts_dir()
        if fonts_dir is None:
            self.logger.warning("⚠️ LOCALAPPDATA is not set; skipping font install")
            return False

        try:
            U.ensure_dir(fonts_dir)
            with tempfile.TemporaryDirectory(prefix="wsl2dev-font-") as td:
                archive_path = Path(td) / (Path(self.ctx.font_url).name or "font.zip")
                self.logger.info("🔤 Downloading %s", self.ctx.font_url)
                n = self.download(self.ctx.font_url, archive_path)
                self.logger.debug("Downloaded %d bytes to %s", n, archive_path)

                with zipfile.ZipFile(archive_path) as zf:
                    members = font_files_in(zf)
                    if not members:
                        self.logger.warning("⚠️ No font files found in %s", archive_path.name)
                        return False

                    copied = skipped = 0
                    registered_all = True
                    for member in members:
                        target = fonts_dir / Path(member).name
                        if target.exists():
                            skipped += 1
                        else:
                            with zf.open(member) as src, open(target, "wb") as dst:
                                shutil.copyfileobj(src, dst)
                            copied += 1
                        registered_all = self._register(target) and registered_all

        except (requests.RequestException, OSError, zipfile.BadZipFile, subprocess.SubprocessError) as e:
            self.logger.warning("⚠️ Font install failed: %s", e)
            return False

        self.logger.info("🔤 Fonts: %d copied, %d already present in %s", copied, skipped, fonts_dir)
        if not registered_all:
            self.logger.warning("⚠️ Some fonts could not be registered; they may need a manual install")
        return registered_all
