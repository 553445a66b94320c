# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/core/file_ops.py
"""
Atomic write and backup helpers for the settings files we edit.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from .utils import U


@contextmanager
def atomic_write(
    target_path: Path,
    *,
    suffix: str = ".part",
    dir: Optional[Path] = None,
) -> Generator[Path, None, None]:
    """
    Context manager for atomic file writes using temporary file + rename.

    Creates a temporary file next to the target, yields its path for
    writing, then renames it over the target on success. The temp file is
    removed if the block raises.

    Example:
        with atomic_write(settings) as tmp:
            tmp.write_text(text, encoding="utf-8")
    """
    target_path = Path(target_path)
    temp_dir = Path(dir) if dir else target_path.parent
    temp_dir.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        suffix=suffix,
        prefix=f".{target_path.name}.",
        dir=str(temp_dir),
    )
    temp_path = Path(temp_name)

    try:
        os.close(fd)
        yield temp_path
        os.replace(temp_path, target_path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def backup_file(path: Path, backup_dir: Path, *, label: Optional[str] = None) -> Path:
    """
    Copy `path` into `backup_dir` as `<label or name>.<timestamp>.bak`.
    Returns the backup path. Raises OSError if the copy fails.
    """
    U.ensure_dir(backup_dir)
    dst = backup_dir / f"{label or path.name}.{U.now_ts()}.bak"
    n = 1
    while dst.exists():
        dst = backup_dir / f"{label or path.name}.{U.now_ts()}.{n}.bak"
        n += 1
    shutil.copy2(path, dst)
    return dst
