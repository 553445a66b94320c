# SPDX-License-Identifier: LGPL-3.0-or-later
"""Listing parsers against captured `wsl --list` output."""
from __future__ import annotations

import pytest

from fakes.fake_logger import FakeLogger
from fakes.fake_wsl import FakeDistro, FakeWsl
from wsl2dev.wsl.inspector import (
    DistributionInspector,
    DistributionRecord,
    DistributionState,
    match_distribution,
    parse_quiet_listing,
    parse_verbose_listing,
)
from wsl2dev.wsl.runner import WslResult

S = DistributionState

VERBOSE_FIXTURES = [
    (
        "single_default_running",
        "  NAME      STATE           VERSION\n* Ubuntu    Running         2\n",
        [("Ubuntu", S.RUNNING, True, 2)],
    ),
    (
        "mixed_states_crlf",
        "  NAME                   STATE           VERSION\r\n"
        "* Ubuntu-22.04           Stopped         2\r\n"
        "  docker-desktop         Running         2\r\n"
        "  Debian                 Installing      2\r\n"
        "  kali-linux             Uninstalling    1\r\n"
        "  openSUSE-Tumbleweed    Converting      2\r\n",
        [
            ("Ubuntu-22.04", S.STOPPED, True, 2),
            ("docker-desktop", S.RUNNING, False, 2),
            ("Debian", S.INSTALLING, False, 2),
            ("kali-linux", S.UNINSTALLING, False, 1),
            ("openSUSE-Tumbleweed", S.CONVERTING, False, 2),
        ],
    ),
    (
        "name_contains_state_word",
        "  NAME            STATE      VERSION\n  Running-Lab     Stopped    2\n* StoppedBox      Running    2\n",
        [("Running-Lab", S.STOPPED, False, 2), ("StoppedBox", S.RUNNING, True, 2)],
    ),
    (
        "no_default_marker_wsl1",
        "  NAME      STATE           VERSION\n  Alpine    Stopped         1\n",
        [("Alpine", S.STOPPED, False, 1)],
    ),
    (
        "header_and_noise_only",
        "  NAME      STATE           VERSION\n\nsomething unexpected\n",
        [],
    ),
    (
        "no_distributions_message",
        "Windows Subsystem for Linux has no installed distributions.\n"
        "Distributions can be installed by visiting the Microsoft Store:\nhttps://aka.ms/wslstore\n",
        [],
    ),
]


@pytest.mark.unit
@pytest.mark.parametrize("label,text,expected", VERBOSE_FIXTURES, ids=[f[0] for f in VERBOSE_FIXTURES])
def test_parse_verbose_listing(label, text, expected):
    records = parse_verbose_listing(text)
    assert [(r.name, r.state, r.is_default, r.version) for r in records] == expected


@pytest.mark.unit
def test_parse_quiet_listing():
    records = parse_quiet_listing("Ubuntu\n\ndocker-desktop  \n")
    assert [r.name for r in records] == ["Ubuntu", "docker-desktop"]
    assert all(r.state is S.UNKNOWN and not r.is_default for r in records)


@pytest.mark.unit
class TestMatchDistribution:
    records = [
        DistributionRecord("Ubuntu-22.04", S.STOPPED),
        DistributionRecord("ubuntu", S.RUNNING),
        DistributionRecord("Debian", S.STOPPED),
    ]

    def test_exact_match_wins_over_substring(self):
        assert match_distribution(self.records, "Ubuntu").name == "ubuntu"

    def test_substring_match(self):
        assert match_distribution(self.records[:1], "Ubuntu").name == "Ubuntu-22.04"

    def test_case_insensitive(self):
        assert match_distribution(self.records, "DEBIAN").name == "Debian"

    def test_no_match(self):
        assert match_distribution(self.records, "Fedora") is None
        assert match_distribution(self.records, "  ") is None


@pytest.mark.unit
class TestDistributionInspector:
    def test_lists_from_verbose(self):
        fake = FakeWsl({"Ubuntu": FakeDistro(state="Running"), "Debian": FakeDistro()})
        records = DistributionInspector(FakeLogger(), fake).list_distributions()
        assert [(r.name, r.state) for r in records] == [("Ubuntu", S.RUNNING), ("Debian", S.STOPPED)]
        assert fake.count("--list") == 1

    def test_empty_host_is_empty_list(self):
        fake = FakeWsl()
        assert DistributionInspector(FakeLogger(), fake).list_distributions() == []

    def test_falls_back_to_quiet_when_verbose_unparseable(self):
        fake = FakeWsl({"Ubuntu": FakeDistro()})
        real_run = fake.run

        def run(args, **kw):
            if list(args) == ["--list", "--verbose"]:
                fake.calls.append(list(args))
                return WslResult(["wsl"] + list(args), 0, "garbled output", "")
            return real_run(args, **kw)

        fake.run = run
        records = DistributionInspector(FakeLogger(), fake).list_distributions()
        assert [(r.name, r.state) for r in records] == [("Ubuntu", S.UNKNOWN)]

    def test_never_raises_when_wsl_missing(self):
        fake = FakeWsl()
        fake.run = lambda *a, **k: (_ for _ in ()).throw(FileNotFoundError("wsl.exe not found"))
        log = FakeLogger()
        assert DistributionInspector(log, fake).list_distributions() == []
        assert log.messages("warning")

    def test_find_uses_loose_match(self):
        fake = FakeWsl({"Ubuntu-24.04": FakeDistro()})
        log = FakeLogger()
        rec = DistributionInspector(log, fake).find("ubuntu")
        assert rec.name == "Ubuntu-24.04"
        assert any("matched installed image" in m for m in log.messages("info"))

    def test_no_caching_between_calls(self):
        fake = FakeWsl()
        insp = DistributionInspector(FakeLogger(), fake)
        assert insp.find("Ubuntu") is None
        fake.distros["Ubuntu"] = FakeDistro()
        assert insp.find("Ubuntu") is not None
