"""Shared consoles for the ollamakit CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from ollamakit.ui.theme import THEME

_CONSOLE = Console(theme=THEME, highlight=False)
_ERR_CONSOLE = Console(theme=THEME, highlight=False, stderr=True)


def get_console() -> Console:
    return _CONSOLE


def get_error_console() -> Console:
    return _ERR_CONSOLE


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr through rich."""
    handler = RichHandler(console=_ERR_CONSOLE, show_path=False, rich_tracebacks=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
