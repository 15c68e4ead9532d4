"""Discover the packages of a JavaScript monorepo from its manifests."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from changesets_core.errors import WorkspaceError
from changesets_core.workspace.models import Package, PackageJson, Packages, Tool

logger = logging.getLogger(__name__)


def _read_package_json(directory: Path) -> dict[str, Any]:
    path = directory / "package.json"
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise WorkspaceError(f"No package.json found in {directory}") from e
    except json.JSONDecodeError as e:
        raise WorkspaceError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise WorkspaceError(f"{path} must contain a JSON object")
    return data


def _make_package(directory: Path, data: dict[str, Any]) -> Package:
    try:
        return Package(dir=directory, package_json=PackageJson(**data))
    except ValidationError as e:
        raise WorkspaceError(f"Invalid package.json in {directory}: {e}") from e


def _workspace_globs(root: Path, manifest: dict[str, Any]) -> tuple[Tool, list[str]]:
    """Work out the tooling flavour and its workspace globs.

    Checked in order: pnpm-workspace.yaml, package.json ``workspaces``,
    package.json ``bolt.workspaces``, lerna.json ``packages``.
    """
    pnpm_file = root / "pnpm-workspace.yaml"
    if pnpm_file.is_file():
        try:
            pnpm = yaml.safe_load(pnpm_file.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise WorkspaceError(f"Invalid YAML in {pnpm_file}: {e}") from e
        return "pnpm", _as_globs(pnpm.get("packages") if isinstance(pnpm, dict) else None)

    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if workspaces is not None:
        tool: Tool = "npm" if (root / "package-lock.json").is_file() else "yarn"
        return tool, _as_globs(workspaces)

    bolt = manifest.get("bolt")
    if isinstance(bolt, dict) and bolt.get("workspaces") is not None:
        return "bolt", _as_globs(bolt["workspaces"])

    lerna_file = root / "lerna.json"
    if lerna_file.is_file():
        try:
            lerna = json.loads(lerna_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise WorkspaceError(f"Invalid JSON in {lerna_file}: {e}") from e
        if isinstance(lerna, dict) and lerna.get("packages") is not None:
            return "lerna", _as_globs(lerna["packages"])

    return "root", []


def _as_globs(value: object) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(g, str) for g in value):
        raise WorkspaceError(f"Workspace globs must be a list of strings, got {value!r}")
    return value


def _expand_globs(root: Path, globs: list[str]) -> list[Path]:
    """Resolve workspace globs to package directories, honouring ``!`` excludes."""
    included: set[Path] = set()
    excluded: set[Path] = set()
    for pattern in globs:
        target = excluded if pattern.startswith("!") else included
        pattern = pattern.lstrip("!").rstrip("/")
        if not pattern:
            continue
        if Path(pattern).anchor:
            raise WorkspaceError(f"Workspace glob {pattern!r} must be relative to {root}")
        for match in root.glob(pattern):
            if match.is_dir() and (match / "package.json").is_file():
                target.add(Path(os.path.normpath(match)))
    return sorted(included - excluded)


def discover_packages(root: str | Path) -> Packages:
    """Build the package set for the monorepo rooted at *root*.

    Raises:
        WorkspaceError: if a manifest is missing or malformed, or two
            packages share a name.
    """
    root = Path(os.path.abspath(root))
    manifest = _read_package_json(root)
    root_package = _make_package(root, manifest)

    tool, globs = _workspace_globs(root, manifest)
    if tool == "root":
        packages = [root_package]
    else:
        packages = [
            _make_package(directory, _read_package_json(directory))
            for directory in _expand_globs(root, globs)
        ]

    seen: set[str] = set()
    for pkg in packages:
        if pkg.name in seen:
            raise WorkspaceError(f'The package "{pkg.name}" is defined more than once in {root}')
        seen.add(pkg.name)

    logger.debug("Discovered %d %s package(s) in %s", len(packages), tool, root)
    return Packages(root=root_package, tool=tool, packages=packages)
