# SPDX-License-Identifier: LGPL-3.0-or-later
import tempfile
import unittest
from pathlib import Path

from wsl2dev.core.file_ops import atomic_write, backup_file


class TestAtomicWrite(unittest.TestCase):
    def test_replaces_target(self):
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "settings.json"
            target.write_text("old", encoding="utf-8")
            with atomic_write(target) as tmp:
                tmp.write_text("new", encoding="utf-8")
            self.assertEqual(target.read_text(encoding="utf-8"), "new")
            self.assertEqual(sorted(p.name for p in Path(td).iterdir()), ["settings.json"])

    def test_failure_keeps_original_and_cleans_temp(self):
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "settings.json"
            target.write_text("old", encoding="utf-8")
            with self.assertRaises(RuntimeError):
                with atomic_write(target) as tmp:
                    tmp.write_text("partial", encoding="utf-8")
                    raise RuntimeError("boom")
            self.assertEqual(target.read_text(encoding="utf-8"), "old")
            self.assertEqual(len(list(Path(td).iterdir())), 1)


class TestBackupFile(unittest.TestCase):
    def test_backups_never_overwrite(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "settings.json"
            src.write_text("{}", encoding="utf-8")
            bdir = Path(td) / "backups"
            first = backup_file(src, bdir, label="vscode-settings.json")
            second = backup_file(src, bdir, label="vscode-settings.json")
            self.assertNotEqual(first, second)
            self.assertTrue(first.name.startswith("vscode-settings.json."))
            self.assertTrue(first.name.endswith(".bak"))
            self.assertEqual(second.read_text(encoding="utf-8"), "{}")


if __name__ == "__main__":
    unittest.main()
