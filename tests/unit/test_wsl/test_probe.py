# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest

from fakes.fake_logger import FakeLogger
from fakes.fake_wsl import FakeWsl
from wsl2dev.wsl.probe import NOT_INSTALLED, SubsystemProbe, SubsystemStatus, parse_version


class TestSubsystemProbe(unittest.TestCase):
    def test_not_installed_when_entry_point_missing(self):
        fake = FakeWsl()
        fake._resolved = None
        fake._explicit = "definitely-not-wsl.exe"
        status = SubsystemProbe(FakeLogger(), fake).probe()
        self.assertEqual(status, NOT_INSTALLED)
        self.assertEqual(fake.calls, [])

    def test_installed_but_disabled(self):
        fake = FakeWsl(status_rc=1)
        status = SubsystemProbe(FakeLogger(), fake).probe()
        self.assertTrue(status.installed)
        self.assertFalse(status.enabled)

    def test_enabled_with_version(self):
        status = SubsystemProbe(FakeLogger(), FakeWsl(version="2.3.26.0")).probe()
        self.assertEqual(status, SubsystemStatus(True, True, "2.3.26.0"))
        self.assertFalse(status.supports((2, 4, 4)))

    def test_inbox_wsl_without_version_flag(self):
        status = SubsystemProbe(FakeLogger(), FakeWsl(version=None)).probe()
        self.assertTrue(status.enabled)
        self.assertIsNone(status.version)
        self.assertFalse(status.supports((2, 4, 4)))

    def test_status_oserror_is_not_installed(self):
        fake = FakeWsl()
        fake.status = lambda: (_ for _ in ()).throw(OSError("access denied"))
        self.assertEqual(SubsystemProbe(FakeLogger(), fake).probe(), NOT_INSTALLED)


class TestVersionHelpers(unittest.TestCase):
    def test_parse_version(self):
        self.assertEqual(parse_version("WSL version: 2.4.4.0\nKernel version: 5.15.167.4-1"), "2.4.4.0")
        self.assertIsNone(parse_version("Invalid command line option"))

    def test_supports(self):
        self.assertTrue(SubsystemStatus(True, True, "2.4.4.0").supports((2, 4, 4)))
        self.assertTrue(SubsystemStatus(True, True, "2.10.0").supports((2, 4, 4)))
        self.assertFalse(SubsystemStatus(True, True, "2.4.3.0").supports((2, 4, 4)))

    def test_describe(self):
        self.assertEqual(NOT_INSTALLED.describe(), "not installed")
        self.assertIn("2.4.4", SubsystemStatus(True, True, "2.4.4").describe())


if __name__ == "__main__":
    unittest.main()
