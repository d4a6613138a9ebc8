"""ctclsite: resolve JSON-declared pages into render contexts and a static asset tree."""

from __future__ import annotations

import tomllib
from importlib import metadata
from pathlib import Path

from .context import build_context
from .site import SiteConfig, load_site_config

__all__ = ["__version__", "SiteConfig", "build_context", "load_site_config"]

_UNKNOWN_VERSION = "0.0.0"


def _checkout_version() -> str:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    if not pyproject.is_file():
        return _UNKNOWN_VERSION
    with pyproject.open("rb") as handle:
        project = tomllib.load(handle).get("project", {})
    return str(project.get("version", _UNKNOWN_VERSION))


def _package_version() -> str:
    """Installed distribution version, or the one declared by a source checkout."""
    try:
        return metadata.version(__name__)
    except metadata.PackageNotFoundError:
        return _checkout_version()


__version__ = _package_version()
