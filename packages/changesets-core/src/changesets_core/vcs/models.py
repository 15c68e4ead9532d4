"""Data models for git history queries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileCommitInfo:
    """The commit that added a file, and that commit's parent.

    ``commit_sha`` is None when git has no add event for the path.
    ``parent_sha`` is None when the parent is unknown, which is either a
    true root commit or the boundary of a shallow clone.
    """

    path: str
    commit_sha: str | None = None
    parent_sha: str | None = None

    @classmethod
    def from_log_line(cls, path: str, line: str) -> FileCommitInfo:
        """Parse ``git log --pretty=format:%h:%p`` output for one path."""
        line = line.strip()
        if not line:
            return cls(path=path)
        commit_sha, _, parents = line.partition(":")
        return cls(path=path, commit_sha=commit_sha or None, parent_sha=parents.strip() or None)

    @property
    def found(self) -> bool:
        return self.commit_sha is not None

    @property
    def settled(self) -> bool:
        """A commit with a known parent cannot be a shallow-clone boundary."""
        return self.commit_sha is not None and self.parent_sha is not None
