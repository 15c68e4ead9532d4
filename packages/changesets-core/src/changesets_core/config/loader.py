"""Read .changeset/config.json from disk."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from changesets_core.config.models import Config
from changesets_core.config.parser import DEFAULT_CONFIG, parse
from changesets_core.errors import ConfigReadError
from changesets_core.workspace import Packages, discover_packages


def config_path(cwd: str | Path) -> Path:
    """Location of the config document for the repository at *cwd*."""
    return Path(cwd) / ".changeset" / "config.json"


def _load_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise ConfigReadError(path, e.strerror or str(e)) from e
    except json.JSONDecodeError as e:
        raise ConfigReadError(path, f"invalid JSON: {e}") from e


async def read(cwd: str | Path, packages: Packages | None = None) -> Config:
    """Load and validate the config for the repository at *cwd*.

    When *packages* is omitted the workspace at *cwd* is discovered.

    Raises:
        ConfigReadError: if the document is missing or not valid JSON.
        ConfigValidationError: if the document's contents are invalid.
    """
    written = await asyncio.to_thread(_load_json, config_path(cwd))
    if packages is None:
        packages = await asyncio.to_thread(discover_packages, cwd)
    return parse(written, packages)


async def read_or_default(cwd: str | Path, packages: Packages | None = None) -> Config:
    """Like :func:`read`, but fall back to ``DEFAULT_CONFIG`` when no document exists."""
    if not config_path(cwd).exists():
        return DEFAULT_CONFIG
    return await read(cwd, packages)
