"""Rich theme for the ollamakit CLI."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_magenta",
        "title": "bold bright_magenta",
        "subtitle": "dim",
        "info": "dim",
        "fragment": "white",
        "warning": "yellow3",
        "success": "green3",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
        "border": "grey50",
    }
)
