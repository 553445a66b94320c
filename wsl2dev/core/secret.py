# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wsl2dev/core/secret.py
"""
Scoped secret handle.

The password only ever leaves this object inside `reveal()` / `payload()`
blocks, as a mutable bytearray that is overwritten with zeros when the block
exits (normally or through an exception). Nothing here writes to disk or to
a logger; repr/str are redacted.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional


def _zero(buf: bytearray) -> None:
    for i in range(len(buf)):
        buf[i] = 0


class Secret:
    __slots__ = ("_buf", "_wiped")

    def __init__(self, value: Optional[bytes] = None):
        self._buf = bytearray(value or b"")
        self._wiped = False

    @classmethod
    def from_str(cls, value: str) -> "Secret":
        return cls(value.encode("utf-8"))

    def __repr__(self) -> str:
        return "Secret(<redacted>)"

    __str__ = __repr__

    def __len__(self) -> int:
        return len(self._buf)

    def __bool__(self) -> bool:
        return bool(self._buf) and not self._wiped

    @property
    def wiped(self) -> bool:
        return self._wiped

    def _check(self) -> None:
        if self._wiped:
            raise ValueError("secret has been wiped")

    @contextmanager
    def reveal(self) -> Generator[bytearray, None, None]:
        """Yield a plaintext copy that is zeroed on exit."""
        self._check()
        plain = bytearray(self._buf)
        try:
            yield plain
        finally:
            _zero(plain)

    @contextmanager
    def payload(self, prefix: bytes = b"", suffix: bytes = b"") -> Generator[bytearray, None, None]:
        """
        Yield `prefix + secret + suffix` as one zeroed-on-exit buffer.

        Used to feed `user:password\\n` to chpasswd on stdin without building
        an immutable str/bytes copy of the password.
        """
        self._check()
        buf = bytearray(prefix)
        buf.extend(self._buf)
        buf.extend(suffix)
        try:
            yield buf
        finally:
            _zero(buf)

    def wipe(self) -> None:
        _zero(self._buf)
        self._buf = bytearray()
        self._wiped = True
