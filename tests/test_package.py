"""Unit tests for package metadata and version lookup."""

from importlib.metadata import PackageNotFoundError
from pathlib import Path

import stressmap

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _missing(name):
    raise PackageNotFoundError(name)


class TestVersionLookup:

    def test_get_version_when_installed_then_prefers_metadata(self, monkeypatch):
        monkeypatch.setattr(stressmap, "pkg_version", lambda name: "9.9.9")
        assert stressmap._get_version() == "9.9.9"

    def test_get_version_when_not_installed_then_reads_checkout_pyproject(self, monkeypatch):
        monkeypatch.setattr(stressmap, "pkg_version", _missing)
        expected = next(
            line.split("=")[1].strip().strip('"')
            for line in PYPROJECT.read_text(encoding="utf-8").splitlines()
            if line.startswith("version")
        )
        assert stressmap._get_version() == expected


class TestPyproject:

    def test_pyproject_declares_runtime_stack_and_no_readme(self):
        content = PYPROJECT.read_text(encoding="utf-8")
        for dep in ("requests", "jsonschema", "Pillow", "PySide6"):
            assert f'"{dep}>=' in content
        assert "readme" not in content
