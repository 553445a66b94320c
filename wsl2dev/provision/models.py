# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/provision/models.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.secret import Secret

_USERNAME_RE = re.compile(r"^[a-z][a-z0-9]*$")
USERNAME_MAX_LEN = 32


def validate_username(username: str) -> str:
    """Lowercase alphanumeric, starting with a letter, at most 32 chars."""
    u = (username or "").strip()
    if not u:
        raise ValueError("username is empty")
    if len(u) > USERNAME_MAX_LEN:
        raise ValueError(f"username longer than {USERNAME_MAX_LEN} characters")
    if not _USERNAME_RE.match(u):
        raise ValueError(f"username {u!r} must be lowercase letters and digits, starting with a letter")
    if u == "root":
        raise ValueError("username must not be root")
    return u


@dataclass
class ProvisioningRequest:
    distro_name: str
    username: str
    password: Secret = field(repr=False)

    def __post_init__(self) -> None:
        self.distro_name = (self.distro_name or "").strip()
        if not self.distro_name:
            raise ValueError("distribution name is empty")
        self.username = validate_username(self.username)
        if not isinstance(self.password, Secret):
            raise TypeError("password must be a Secret")
        with self.password.reveal() as plain:
            # chpasswd reads one "user:password" line
            if any(c in plain for c in b"\r\n\x00"):
                raise ValueError("password must not contain line breaks or NUL characters")


@dataclass
class ProvisioningOutcome:
    success: bool
    distro_name: str
    username: str
    error_detail: Optional[str] = None

    # step flags for the report banner
    installed: bool = False
    user_created: bool = False
    default_bound: bool = False
    first_boot_ok: Optional[bool] = None

    @classmethod
    def failed(cls, request: ProvisioningRequest, detail: str, **flags: Any) -> "ProvisioningOutcome":
        return cls(False, request.distro_name, request.username, detail, **flags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "distro_name": self.distro_name,
            "username": self.username,
            "error_detail": self.error_detail,
            "installed": self.installed,
            "user_created": self.user_created,
            "default_bound": self.default_bound,
            "first_boot_ok": self.first_boot_ok,
        }
