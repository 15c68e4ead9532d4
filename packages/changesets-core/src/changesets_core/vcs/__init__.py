"""Git history queries for change detection."""

from changesets_core.vcs.git import CHANGESET_FILE_PATTERN, DEEPEN_INCREMENT, GitRepo
from changesets_core.vcs.models import FileCommitInfo

__all__ = [
    "CHANGESET_FILE_PATTERN",
    "DEEPEN_INCREMENT",
    "FileCommitInfo",
    "GitRepo",
]
