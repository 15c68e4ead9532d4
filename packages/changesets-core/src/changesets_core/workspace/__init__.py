"""Workspace package discovery."""

from changesets_core.workspace.discovery import discover_packages
from changesets_core.workspace.models import Package, PackageJson, Packages, Tool

__all__ = [
    "Package",
    "PackageJson",
    "Packages",
    "Tool",
    "discover_packages",
]
