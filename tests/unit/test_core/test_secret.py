# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from wsl2dev.core.secret import Secret


@pytest.mark.security
class TestSecret:
    def test_repr_is_redacted(self):
        s = Secret.from_str("hunter2")
        assert "hunter2" not in repr(s)
        assert "hunter2" not in str(s)

    def test_payload_is_zeroed_on_exit(self):
        s = Secret.from_str("pw")
        with s.payload(b"alice:", b"\n") as buf:
            assert bytes(buf) == b"alice:pw\n"
            held = buf
        assert bytes(held) == b"\x00" * len(b"alice:pw\n")

    def test_reveal_is_zeroed_even_on_exception(self):
        s = Secret.from_str("pw")
        held = None
        with pytest.raises(RuntimeError):
            with s.reveal() as plain:
                held = plain
                raise RuntimeError("boom")
        assert bytes(held) == b"\x00\x00"
        # the secret itself is still usable
        with s.reveal() as plain:
            assert bytes(plain) == b"pw"

    def test_wipe(self):
        s = Secret.from_str("pw")
        s.wipe()
        assert s.wiped and not s and len(s) == 0
        with pytest.raises(ValueError):
            with s.payload():
                pass
