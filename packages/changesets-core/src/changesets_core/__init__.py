"""Changesets Core - git change detection and release config for JavaScript monorepos."""

from changesets_core.config import DEFAULT_CONFIG, Config, parse, read
from changesets_core.errors import (
    ChangesetsError,
    ConfigReadError,
    ConfigValidationError,
    DivergenceLookupError,
    VcsError,
    WorkspaceError,
)
from changesets_core.process import ProcessResult, ProcessRunner, spawn
from changesets_core.vcs import GitRepo
from changesets_core.workspace import Package, Packages, discover_packages

__version__ = "0.1.0"

__all__ = [
    "ChangesetsError",
    "Config",
    "ConfigReadError",
    "ConfigValidationError",
    "DEFAULT_CONFIG",
    "DivergenceLookupError",
    "GitRepo",
    "Package",
    "Packages",
    "ProcessResult",
    "ProcessRunner",
    "VcsError",
    "WorkspaceError",
    "discover_packages",
    "parse",
    "read",
    "spawn",
]
