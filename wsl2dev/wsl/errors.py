# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/wsl/errors.py
"""
WSL error translation.

wsl.exe reports failures as an exit code plus free text that usually embeds
an HRESULT ("Error code: Wsl/InstallDistro/0x80070652"). This table is the
only place those markers live; callers use classify() to branch and
translate() to tell the user what to do.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ErrorCause(str, Enum):
    CONCURRENT_OPERATION = "concurrent_operation"
    VIRTUALIZATION_DISABLED = "virtualization_disabled"
    COMPONENT_NOT_ENABLED = "component_not_enabled"
    KERNEL_OUTDATED = "kernel_outdated"
    ACCESS_DENIED = "access_denied"
    DISTRO_NOT_FOUND = "distro_not_found"
    NETWORK = "network"


@dataclass(frozen=True)
class ErrorRule:
    markers: Tuple[str, ...]
    cause: ErrorCause
    message: str


ERROR_TABLE: Tuple[ErrorRule, ...] = (
    ErrorRule(
        ("0x80070652",),
        ErrorCause.CONCURRENT_OPERATION,
        "Another WSL installation is already in progress. Wait for it to finish and try again.",
    ),
    ErrorRule(
        ("0x8000000d",),
        ErrorCause.CONCURRENT_OPERATION,
        "The distribution is busy: another operation on it is still in progress.",
    ),
    ErrorRule(
        ("0x80370102",),
        ErrorCause.VIRTUALIZATION_DISABLED,
        "Virtualization is not available: enable virtualization (VT-x/AMD-V) in the "
        "BIOS/UEFI firmware and the 'Virtual Machine Platform' Windows feature, then reboot.",
    ),
    ErrorRule(
        ("0x8007019e",),
        ErrorCause.COMPONENT_NOT_ENABLED,
        "The Windows Subsystem for Linux optional component is not enabled. Run "
        "'wsl --install --no-distribution' from an elevated prompt and reboot.",
    ),
    ErrorRule(
        ("0x800701bc",),
        ErrorCause.KERNEL_OUTDATED,
        "The WSL 2 kernel component is outdated. Run 'wsl --update' and try again.",
    ),
    ErrorRule(
        ("0x80070005",),
        ErrorCause.ACCESS_DENIED,
        "Access denied. Re-run from an elevated (Administrator) terminal.",
    ),
    ErrorRule(
        ("0x8007015b", "0x80070490"),
        ErrorCause.DISTRO_NOT_FOUND,
        "The distribution name is not recognized. Check 'wsl --list --online' for valid names.",
    ),
    ErrorRule(
        ("0x80072ee7", "0x80072efd", "0x80072f8f"),
        ErrorCause.NETWORK,
        "The distribution could not be downloaded. Check network/proxy settings or retry with --web-download.",
    ),
)


def _match(captured_text: str) -> Optional[ErrorRule]:
    text = (captured_text or "").lower()
    if not text:
        return None
    for rule in ERROR_TABLE:
        if any(m in text for m in rule.markers):
            return rule
    return None


def classify(exit_code: int, captured_text: str) -> Optional[ErrorCause]:
    """Known cause for a failure, or None."""
    rule = _match(captured_text)
    return rule.cause if rule else None


def translate(exit_code: int, captured_text: str) -> str:
    """Actionable one-line explanation for a failed wsl.exe invocation."""
    rule = _match(captured_text)
    if rule is not None:
        return rule.message
    return f"operation failed with exit code {exit_code}"


def is_contention(exit_code: int, captured_text: str) -> bool:
    return classify(exit_code, captured_text) is ErrorCause.CONCURRENT_OPERATION
