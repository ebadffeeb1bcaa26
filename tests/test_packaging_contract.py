"""Static tests for packaging contracts (installation expectations)."""

from __future__ import annotations

import unittest
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]


class TestPackagingContract(unittest.TestCase):
    def setUp(self):
        self.pyproject = (PROJECT_ROOT / "pyproject.toml").read_text(encoding="utf-8")

    def test_test_extra_is_declared(self):
        self.assertIn("test = [", self.pyproject)

    def test_console_script_is_declared(self):
        self.assertIn('gaitlab = "gaitlab.cli:main"', self.pyproject)

    def test_runtime_dependencies(self):
        for dep in ("numpy", "scipy", "pandas"):
            self.assertIn(f'"{dep}', self.pyproject)

    def test_spreadsheet_support_is_optional(self):
        self.assertIn('xlsx = ["openpyxl', self.pyproject)

    def test_sources_live_under_python_src(self):
        self.assertTrue((PROJECT_ROOT / "python" / "src" / "gaitlab" / "__init__.py").exists())


if __name__ == "__main__":
    unittest.main()
