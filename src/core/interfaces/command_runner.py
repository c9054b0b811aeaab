"""Command runner contract.

Rules:
- `run` is async: the caller is suspended until the process exits.
- `run` never raises for a non-zero exit or a spawn failure; the outcome is
  reported through the returned `CommandResult`.
- Values in `sensitive` must not appear in logs or in `CommandResult.command`.
"""

from __future__ import annotations

import shlex
from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    async def run(self, command: str, *, sensitive: Sequence[str] = ()) -> CommandResult:
        """Execute `command` through the shell and capture its output."""

        ...


def redact(command: str, sensitive: Sequence[str]) -> str:
    """Mask every sensitive value present in `command`.

    Both the raw value and its shell-quoted form are masked.
    """

    for secret in sensitive:
        if not secret:
            continue
        for form in (shlex.quote(secret), secret):
            command = command.replace(form, "***")
    return command
