"""Async external-command runner used by the git layer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of a finished command."""

    code: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.code == 0

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs one external command and waits for it to exit."""

    async def __call__(
        self, command: str, args: Sequence[str], *, cwd: str | Path
    ) -> ProcessResult: ...


async def spawn(command: str, args: Sequence[str], *, cwd: str | Path) -> ProcessResult:
    """Run *command* with *args* in *cwd*, capturing stdout and stderr.

    A non-zero exit is reported through ``ProcessResult.code``, never raised.
    Failing to start the process at all (missing executable, bad cwd)
    propagates as ``OSError``.
    """
    logger.debug("spawn %s %s (cwd=%s)", command, " ".join(args), cwd)
    proc = await asyncio.create_subprocess_exec(
        command,
        *args,
        cwd=str(cwd),
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    return ProcessResult(code=proc.returncode, stdout=stdout, stderr=stderr)
