# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from wsl2dev.provision import payload
from wsl2dev.provision.models import ProvisioningOutcome, ProvisioningRequest, validate_username
from wsl2dev.core.secret import Secret


@pytest.mark.unit
class TestScripts:
    def test_create_user_reads_password_from_stdin(self):
        s = payload.create_user_script("alice")
        assert "u=alice" in s
        assert "\nchpasswd\n" in s
        assert "useradd -m" in s
        assert "for g in sudo wheel" in s
        assert payload.SUDOERS_DROPIN not in s
        assert "NOPASSWD" not in s

    def test_create_user_writes_dropin_only_for_first_boot(self):
        s = payload.create_user_script("alice", first_boot_sudo=True)
        assert f"> {payload.SUDOERS_DROPIN}" in s
        assert f"chmod 0440 {payload.SUDOERS_DROPIN}" in s

    def test_default_user_conf_targets_wsl_conf(self):
        s = payload.default_user_conf_script("alice")
        assert "conf=/etc/wsl.conf" in s
        assert "[user]" in s and "default=" in s

    def test_first_boot_removes_dropin_on_exit(self):
        s = payload.first_boot_script(["git", "curl"])
        assert s.index("trap") < s.index("apt-get")
        assert f"rm -f {payload.SUDOERS_DROPIN}" in s
        assert 'pkgs="git curl"' in s
        assert "sudo -n" in s

    def test_first_boot_rejects_shell_metacharacters(self):
        with pytest.raises(ValueError):
            payload.first_boot_script(["git", "curl; rm -rf /"])

    def test_validate_packages_skips_blanks(self):
        assert payload.validate_packages(["git", " ", "python3-pip", "g++"]) == ["git", "python3-pip", "g++"]

    def test_prompt_script_is_idempotent_by_marker(self):
        s = payload.prompt_script("jandedobbeleer")
        assert payload.PROMPT_MARKER_BEGIN in s and payload.PROMPT_MARKER_END in s
        assert f"grep -qF '{payload.PROMPT_MARKER_BEGIN}'" in s
        assert "jandedobbeleer.omp.json" in s

    def test_prompt_theme_validated(self):
        with pytest.raises(ValueError):
            payload.prompt_script("../../etc/passwd")


@pytest.mark.unit
class TestModels:
    @pytest.mark.parametrize("name", ["alice", "dev2", "a" * 32])
    def test_valid_usernames(self, name):
        assert validate_username(name) == name

    @pytest.mark.parametrize("name", ["", "Alice", "2dev", "dev-user", "root", "a" * 33, "bob smith"])
    def test_invalid_usernames(self, name):
        with pytest.raises(ValueError):
            validate_username(name)

    def test_request_repr_hides_password(self):
        req = ProvisioningRequest("Ubuntu", "alice", Secret.from_str("hunter2"))
        assert "hunter2" not in repr(req)

    def test_request_requires_secret(self):
        with pytest.raises(TypeError):
            ProvisioningRequest("Ubuntu", "alice", "hunter2")

    @pytest.mark.parametrize("password", ["a\nb", "a\rb", "a\x00b", "trailing\n"])
    def test_request_rejects_line_breaks_and_nul_in_password(self, password):
        with pytest.raises(ValueError):
            ProvisioningRequest("Ubuntu", "alice", Secret.from_str(password))

    def test_rejected_password_is_not_echoed(self):
        with pytest.raises(ValueError) as ei:
            ProvisioningRequest("Ubuntu", "alice", Secret.from_str("hunter2\n"))
        assert "hunter2" not in str(ei.value)

    def test_failed_outcome(self):
        req = ProvisioningRequest("Ubuntu", "alice", Secret.from_str("x"))
        out = ProvisioningOutcome.failed(req, "boom", installed=True)
        assert out.to_dict()["success"] is False
        assert out.error_detail == "boom" and out.installed
