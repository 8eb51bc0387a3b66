"""Minimal version helper for the rotary_knob package."""

from importlib import metadata
import json
from os import PathLike
from pathlib import Path
import sys

PACKAGE_NAME = "rotary_knob"
DISTRIBUTION_NAME = "rotary-knob"
VERSION_FILENAME = "version.json"


def get_embedded_path(name: str | PathLike[str]) -> Path:
    """Return the path to an embedded resource shipped with a frozen host."""

    base = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent))
    return base / Path(name)


def get_version() -> str:
    """
    Get version for the library.

    Frozen hosts ship a ``version.json``; installed copies read the
    distribution metadata; source checkouts ask setuptools_scm.

    :return: Version number.
    """
    if getattr(sys, "frozen", False):  # bundled into an executable
        with open(get_embedded_path(VERSION_FILENAME), "r") as f:
            return str(json.load(f)["version"])
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:  # dev checkout, not installed
        import setuptools_scm  # type: ignore[import-untyped]

        root = Path(__file__).resolve().parents[2]
        return str(setuptools_scm.get_version(root=str(root), fallback_version="0.1.0"))


__all__ = ["get_version", "get_embedded_path"]
