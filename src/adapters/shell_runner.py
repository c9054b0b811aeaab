"""Shell command runners.

`ShellCommandRunner` executes commands through `asyncio` subprocesses.
`DryRunCommandRunner` only records and prints them (used by `--dry-run`).

Neither raises on failure: non-zero exits and spawn errors are logged and
returned as a `CommandResult`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Sequence

from core.domain.models import CommandResult
from core.interfaces.command_runner import CommandRunner, redact

logger = logging.getLogger(__name__)


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class ShellCommandRunner(CommandRunner):
    """Runs commands with `/bin/sh` (or the platform shell), capturing output."""

    def __init__(self, *, cwd: Path | None = None, echo: Callable[[str], None] | None = None) -> None:
        self._cwd = cwd
        self._echo = echo

    async def run(self, command: str, *, sensitive: Sequence[str] = ()) -> CommandResult:
        shown = redact(command, sensitive)
        logger.info("$ %s", shown)

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self._cwd) if self._cwd else None,
            )
            stdout, stderr = await process.communicate()
        except OSError as exc:
            logger.error("Could not start `%s`: %s", shown, redact(str(exc), sensitive))
            return CommandResult(command=shown, stderr=redact(str(exc), sensitive), exit_code=None)

        returncode = process.returncode
        result = CommandResult(
            command=shown,
            stdout=redact(_decode(stdout), sensitive),
            stderr=redact(_decode(stderr), sensitive),
            exit_code=returncode,
            signal=-returncode if returncode is not None and returncode < 0 else None,
        )

        if result.stdout and self._echo:
            self._echo(result.stdout.rstrip())
        if result.stderr:
            logger.warning("%s", result.stderr.rstrip())
        if not result.ok:
            if result.signal is not None:
                logger.error("`%s` was killed by signal %d", shown, result.signal)
            else:
                logger.error("`%s` exited with code %s", shown, result.exit_code)
        return result


class DryRunCommandRunner(CommandRunner):
    """Records redacted commands instead of executing them."""

    def __init__(self, *, echo: Callable[[str], None] | None = None) -> None:
        self._echo = echo
        self.commands: list[str] = []

    async def run(self, command: str, *, sensitive: Sequence[str] = ()) -> CommandResult:
        shown = redact(command, sensitive)
        self.commands.append(shown)
        if self._echo:
            self._echo(shown)
        else:
            logger.info("[dry-run] %s", shown)
        return CommandResult(command=shown)
