"""Exception hierarchy for changesets-core."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ChangesetsError(Exception):
    """Base class for every error raised by changesets-core."""


class VcsError(ChangesetsError):
    """A git command exited non-zero where the operation cannot continue."""

    def __init__(self, command: Sequence[str], exit_code: int, stderr: str = "") -> None:
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr
        msg = f"`{' '.join(self.command)}` exited with code {exit_code}"
        if stderr.strip():
            msg += f": {stderr.strip()}"
        super().__init__(msg)


class DivergenceLookupError(ChangesetsError):
    """The baseline ref could not be used to find or diff against a merge-base."""

    def __init__(self, ref: str, message: str | None = None) -> None:
        self.ref = ref
        super().__init__(
            message or f"Failed to find where HEAD diverged from {ref}. Does {ref} exist?"
        )


class ConfigValidationError(ChangesetsError):
    """One or more problems were found in a written changesets config.

    Carries every collected message so a user sees all problems at once.
    """

    HEADER = "Some errors occurred when validating the changesets config:"

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        super().__init__("\n".join([self.HEADER, *self.messages]))


class ConfigReadError(ChangesetsError):
    """The config document is missing, unreadable, or not valid JSON."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not read changesets config at {path}: {reason}")


class WorkspaceError(ChangesetsError):
    """Package discovery failed for a repository root."""
