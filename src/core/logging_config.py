"""Logging setup.

One `RichHandler` on stderr, installed once on the root logger. Modules log
through `logging.getLogger(__name__)`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "subgraph-deployer"


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> logging.Logger:
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        return root

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    return root
