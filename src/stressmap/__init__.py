"""Top-level package for the Stress Map toolkit.

Provides subpackages:
- stressmap.body – parametric body regions, coordinates and hit testing
- stressmap.session – marker store, local cache and remote history
- stressmap.protocols – region to remediation suggestion catalog
- stressmap.report – report composition and export templates
- stressmap.gui – PySide6 host widget
"""

from importlib.metadata import PackageNotFoundError, version as pkg_version
from pathlib import Path


def _get_version() -> str:
    """Get version from importlib.metadata (installed) or the source tree's pyproject.toml."""
    try:
        return pkg_version("stressmap")
    except PackageNotFoundError:
        pass

    # Uninstalled checkout: only trust a pyproject.toml that describes this project
    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    try:
        content = pyproject.read_text(encoding="utf-8")
    except OSError:
        return "0.0.0"
    if 'name = "stressmap"' not in content:
        return "0.0.0"
    for line in content.splitlines():
        if line.strip().startswith("version"):
            # Parse: version = "0.3.0"
            return line.split("=")[1].strip().strip('"').strip("'")
    return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__"]
