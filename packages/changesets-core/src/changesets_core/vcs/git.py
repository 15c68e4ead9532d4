"""Git queries for change detection: what changed since a baseline, and when
files were first added.

All commands shell out through a ``ProcessRunner`` so tests can substitute a
fake. The repository is assumed to be rooted at ``cwd``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import warnings
from collections.abc import Sequence
from pathlib import Path

from changesets_core.errors import DivergenceLookupError, VcsError
from changesets_core.process import ProcessResult, ProcessRunner, spawn
from changesets_core.vcs.models import FileCommitInfo
from changesets_core.workspace import Package, Packages, discover_packages

logger = logging.getLogger(__name__)

# A markdown file directly inside the top-level .changeset directory
CHANGESET_FILE_PATTERN = re.compile(r"^\.changeset/[^/]+\.md$")

# Number of commits fetched per round when a shallow clone hides an add event
DEEPEN_INCREMENT = 50


def _split_paths(output: str) -> list[str]:
    """Split NUL-terminated `-z` output; git leaves such paths unquoted."""
    return [path for path in output.split("\0") if path]


class GitRepo:
    """Change-detection queries against the git repository at *cwd*."""

    def __init__(self, cwd: str | Path, runner: ProcessRunner = spawn) -> None:
        self.cwd = Path(cwd)
        self._runner = runner

    async def _git(self, *args: str) -> ProcessResult:
        return await self._runner("git", list(args), cwd=self.cwd)

    # ------------------------------------------------------------------
    # Staging, committing, tagging
    # ------------------------------------------------------------------

    async def add(self, path: str) -> bool:
        """Stage *path*. Returns whether git succeeded."""
        result = await self._git("add", path)
        if not result.ok:
            logger.warning("git add %s failed: %s", path, result.stderr_text.strip())
        return result.ok

    async def commit(self, message: str) -> bool:
        """Commit staged changes; an empty commit still succeeds."""
        result = await self._git("commit", "-m", message, "--allow-empty")
        return result.ok

    async def tag(self, name: str) -> bool:
        """Create an annotated tag on HEAD.

        Must be annotated: ``git push --follow-tags`` skips lightweight tags.
        """
        result = await self._git("tag", name, "-m", name)
        return result.ok

    # ------------------------------------------------------------------
    # Divergence and diffs
    # ------------------------------------------------------------------

    async def get_diverged_commit(self, ref: str) -> str:
        """Return the merge-base of *ref* and HEAD.

        Raises:
            DivergenceLookupError: if git cannot compute the merge-base.
        """
        result = await self._git("merge-base", ref, "HEAD")
        if not result.ok:
            raise DivergenceLookupError(ref)
        return result.stdout_text.strip()

    async def get_changed_files_since(self, ref: str, full_path: bool = False) -> list[str]:
        """List files that differ between the divergence point and the working tree.

        Args:
            ref: Baseline ref (branch, tag, or commit).
            full_path: Return absolute paths instead of paths relative to cwd.

        Raises:
            DivergenceLookupError: if the merge-base or the diff fails.
        """
        diverged_at = await self.get_diverged_commit(ref)
        result = await self._git("diff", "--name-only", "-z", diverged_at)
        if not result.ok:
            raise DivergenceLookupError(
                ref,
                f"Failed to diff against {diverged_at}. Is {diverged_at} a valid ref?",
            )
        files = _split_paths(result.stdout_text)
        if not full_path:
            return files
        return [os.path.normpath(os.path.join(os.path.abspath(self.cwd), f)) for f in files]

    async def get_changed_changeset_files_since_ref(self, ref: str) -> list[str]:
        """List changeset files added or modified since the divergence point.

        Deleted files are excluded. A failing git diff is treated as "no
        changesets"; a missing baseline ref still raises.
        """
        try:
            diverged_at = await self.get_diverged_commit(ref)
            args = ["diff", "--name-only", "-z", "--diff-filter=d", diverged_at]
            result = await self._git(*args)
            if not result.ok:
                raise VcsError(["git", *args], result.code, result.stderr_text)
        except VcsError as e:
            logger.debug("Treating changeset lookup failure as no changesets: %s", e)
            return []
        return [
            f for f in _split_paths(result.stdout_text) if CHANGESET_FILE_PATTERN.search(f)
        ]

    async def get_changed_packages_since_ref(
        self, ref: str, packages: Packages | None = None
    ) -> list[Package]:
        """Return the unique packages owning at least one changed file.

        A file under nested package directories belongs to the innermost one.
        When *packages* is omitted the workspace at cwd is discovered.
        """
        changed_files = await self.get_changed_files_since(ref, full_path=True)
        if packages is None:
            packages = discover_packages(self.cwd)

        owners: dict[str, Package] = {}
        for pkg in packages.packages:
            for file_name in changed_files:
                if not pkg.contains(file_name):
                    continue
                current = owners.get(file_name)
                if current is None or len(pkg.dir.parts) > len(current.dir.parts):
                    owners[file_name] = pkg

        unique: dict[Path, Package] = {}
        for pkg in owners.values():
            unique.setdefault(pkg.dir, pkg)
        return list(unique.values())

    # ------------------------------------------------------------------
    # Add-commit lookup with shallow clone deepening
    # ------------------------------------------------------------------

    async def get_commits_that_add_files(self, paths: Sequence[str]) -> list[str | None]:
        """Return the short SHA of the commit that added each path.

        Results line up with *paths*; a path git has never seen added maps
        to None. Commits without a visible parent might just be the edge of
        a shallow clone, so while any remain and the repository is shallow,
        history is deepened by ``DEEPEN_INCREMENT`` commits and only those
        paths are looked up again. Each round either settles every pending
        path or grows the visible history, and a clone that stops being
        shallow ends the loop.
        """
        resolved: dict[str, str] = {}
        remaining = list(dict.fromkeys(paths))

        while remaining:
            infos = await asyncio.gather(*(self._find_commit_and_parent(p) for p in remaining))

            missing_parents: list[FileCommitInfo] = []
            for info in infos:
                if info.settled:
                    resolved[info.path] = info.commit_sha
                elif info.found:
                    missing_parents.append(info)
                else:
                    logger.debug("No commit adds %s", info.path)

            if not missing_parents:
                break

            if await self.is_shallow():
                logger.info(
                    "Deepening shallow clone by %d commits to resolve %d path(s)",
                    DEEPEN_INCREMENT,
                    len(missing_parents),
                )
                await self.deepen(DEEPEN_INCREMENT)
            else:
                # Full history: these really are root commits
                for info in missing_parents:
                    resolved[info.path] = info.commit_sha
                break

            remaining = [info.path for info in missing_parents]

        return [resolved.get(p) for p in paths]

    async def get_commit_that_adds_file(self, path: str) -> str | None:
        """Single-path form of :meth:`get_commits_that_add_files`.

        .. deprecated::
            Use the bulk ``get_commits_that_add_files`` instead.
        """
        warnings.warn(
            "get_commit_that_adds_file is deprecated; use the bulk "
            "get_commits_that_add_files instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return (await self.get_commits_that_add_files([path]))[0]

    async def _find_commit_and_parent(self, path: str) -> FileCommitInfo:
        result = await self._git(
            "log", "--diff-filter=A", "--max-count=1", "--pretty=format:%h:%p", "--", path
        )
        if not result.ok:
            logger.debug("git log failed for %s: %s", path, result.stderr_text.strip())
            return FileCommitInfo(path=path)
        return FileCommitInfo.from_log_line(path, result.stdout_text)

    async def is_shallow(self) -> bool:
        result = await self._git("rev-parse", "--is-shallow-repository")
        return result.stdout_text.strip() == "true"

    async def deepen(self, by: int) -> None:
        """Fetch *by* more commits of history into a shallow clone.

        Raises:
            VcsError: if the fetch fails, since retrying could never finish.
        """
        args = ["fetch", f"--deepen={by}"]
        result = await self._git(*args)
        if not result.ok:
            raise VcsError(["git", *args], result.code, result.stderr_text)
