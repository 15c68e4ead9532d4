"""Pydantic models for monorepo packages."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Tool = Literal["yarn", "npm", "pnpm", "bolt", "lerna", "root"]


class PackageJson(BaseModel):
    """The parts of a package.json this library reads; other keys are kept."""

    model_config = ConfigDict(extra="allow")

    name: str
    version: str = ""


class Package(BaseModel):
    """A package in the workspace, identified by its directory and name."""

    dir: Path = Field(description="Absolute, normalised package directory")
    package_json: PackageJson

    @property
    def name(self) -> str:
        return self.package_json.name

    def contains(self, path: str | Path) -> bool:
        """True when *path* is this package's directory or lies beneath it.

        Compares path components, so ``packages/foo`` does not contain
        ``packages/foo-bar/index.js``.
        """
        return Path(path).is_relative_to(self.dir)


class Packages(BaseModel):
    """A discovered package set plus the workspace root and tooling flavour."""

    root: Package
    tool: Tool
    packages: list[Package] = Field(default_factory=list)

    @property
    def names(self) -> set[str]:
        return {pkg.name for pkg in self.packages}
