"""Tests for package discovery across yarn, npm, pnpm, bolt and lerna layouts."""

import json

import pytest

from _helpers import make_package, write_files
from changesets_core.errors import WorkspaceError
from changesets_core.workspace import discover_packages


def _pkg(name: str, version: str = "1.0.0") -> str:
    return json.dumps({"name": name, "version": version})


def _root_manifest(**extra) -> str:
    return json.dumps({"name": "root", "private": True, **extra})


# ── Package ────────────────────────────────────────────────────────


class TestPackageContains:
    def test_directory_boundary(self, tmp_path):
        foo = make_package(tmp_path, "packages/foo", "foo")
        assert foo.contains(tmp_path / "packages" / "foo" / "index.js")
        assert foo.contains(tmp_path / "packages" / "foo")
        assert not foo.contains(tmp_path / "packages" / "foo-bar" / "index.js")
        assert not foo.contains(tmp_path / "README.md")

    def test_accepts_strings(self, tmp_path):
        foo = make_package(tmp_path, "packages/foo", "foo")
        assert foo.contains(str(tmp_path / "packages" / "foo" / "src" / "a.js"))


# ── Tooling flavours ───────────────────────────────────────────────


class TestDiscoverPackages:
    def test_single_package_root(self, tmp_path):
        write_files(tmp_path, {"package.json": _pkg("solo")})
        result = discover_packages(tmp_path)
        assert result.tool == "root"
        assert [p.name for p in result.packages] == ["solo"]
        assert result.root.dir == tmp_path

    def test_yarn_workspaces(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(workspaces=["packages/*"]),
                "packages/b/package.json": _pkg("pkg-b"),
                "packages/a/package.json": _pkg("pkg-a", "2.0.0"),
            },
        )
        result = discover_packages(tmp_path)
        assert result.tool == "yarn"
        assert [p.name for p in result.packages] == ["pkg-a", "pkg-b"]
        assert result.packages[0].package_json.version == "2.0.0"
        assert result.packages[0].dir == tmp_path / "packages" / "a"
        assert result.names == {"pkg-a", "pkg-b"}

    def test_yarn_workspaces_object_form(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(workspaces={"packages": ["packages/*"]}),
                "packages/a/package.json": _pkg("pkg-a"),
            },
        )
        assert discover_packages(tmp_path).names == {"pkg-a"}

    def test_npm_when_lockfile_present(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(workspaces=["packages/*"]),
                "package-lock.json": "{}",
                "packages/a/package.json": _pkg("pkg-a"),
            },
        )
        assert discover_packages(tmp_path).tool == "npm"

    def test_pnpm_workspace_file(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(),
                "pnpm-workspace.yaml": "packages:\n  - 'apps/*'\n  - 'libs/*'\n",
                "apps/web/package.json": _pkg("web"),
                "libs/util/package.json": _pkg("util"),
            },
        )
        result = discover_packages(tmp_path)
        assert result.tool == "pnpm"
        assert [p.name for p in result.packages] == ["web", "util"]

    def test_bolt_workspaces(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(bolt={"workspaces": ["packages/*"]}),
                "packages/a/package.json": _pkg("pkg-a"),
            },
        )
        result = discover_packages(tmp_path)
        assert result.tool == "bolt"
        assert result.names == {"pkg-a"}

    def test_lerna_packages(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(),
                "lerna.json": json.dumps({"packages": ["modules/*"]}),
                "modules/x/package.json": _pkg("x"),
            },
        )
        result = discover_packages(tmp_path)
        assert result.tool == "lerna"
        assert result.names == {"x"}

    def test_excludes_and_directories_without_manifest(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(workspaces=["packages/*", "!packages/internal"]),
                "packages/a/package.json": _pkg("pkg-a"),
                "packages/internal/package.json": _pkg("internal"),
                "packages/docs/README.md": "no manifest here",
            },
        )
        assert discover_packages(tmp_path).names == {"pkg-a"}

    def test_relative_root_is_made_absolute(self, tmp_path, monkeypatch):
        write_files(tmp_path, {"package.json": _pkg("solo")})
        monkeypatch.chdir(tmp_path)
        result = discover_packages(".")
        assert result.root.dir.is_absolute()
        assert result.root.dir.resolve() == tmp_path.resolve()


# ── Failures ───────────────────────────────────────────────────────


class TestDiscoveryErrors:
    def test_missing_root_manifest(self, tmp_path):
        with pytest.raises(WorkspaceError, match="No package.json"):
            discover_packages(tmp_path)

    def test_invalid_root_manifest(self, tmp_path):
        write_files(tmp_path, {"package.json": "{ nope"})
        with pytest.raises(WorkspaceError, match="Invalid JSON"):
            discover_packages(tmp_path)

    def test_manifest_without_name(self, tmp_path):
        write_files(tmp_path, {"package.json": json.dumps({"version": "1.0.0"})})
        with pytest.raises(WorkspaceError, match="Invalid package.json"):
            discover_packages(tmp_path)

    def test_duplicate_package_names(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(workspaces=["packages/*"]),
                "packages/a/package.json": _pkg("same"),
                "packages/b/package.json": _pkg("same"),
            },
        )
        with pytest.raises(WorkspaceError, match='"same" is defined more than once'):
            discover_packages(tmp_path)

    def test_workspace_globs_must_be_strings(self, tmp_path):
        write_files(tmp_path, {"package.json": _root_manifest(workspaces=[1, 2])})
        with pytest.raises(WorkspaceError, match="list of strings"):
            discover_packages(tmp_path)

    def test_absolute_workspace_glob_rejected(self, tmp_path):
        write_files(
            tmp_path,
            {
                "package.json": _root_manifest(workspaces=[str(tmp_path / "packages" / "*")]),
                "packages/a/package.json": _pkg("pkg-a"),
            },
        )
        with pytest.raises(WorkspaceError, match="must be relative"):
            discover_packages(tmp_path)
