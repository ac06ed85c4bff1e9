"""Render helpers for the ollamakit CLI."""

from __future__ import annotations

from typing import Mapping

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ollamakit.endpoint.types import CallResult, Fragment
from ollamakit.ui.console import get_console, get_error_console


def render_info(text: str) -> None:
    get_error_console().print(text, style="info", markup=False)


def render_success(text: str) -> None:
    get_error_console().print(text, style="success", markup=False)


def render_error(text: str) -> None:
    panel = Panel(
        Text(text, style="error"),
        box=box.ROUNDED,
        border_style="error",
        padding=(0, 2),
        expand=True,
    )
    get_error_console().print(panel)


def render_fragment(fragment: Fragment) -> None:
    # Tokens arrive without separators, so print them inline.
    get_console().print(fragment.text, style="fragment", markup=False, end="", soft_wrap=True)
    if fragment.final:
        get_console().print()


def render_response(text: str) -> None:
    get_console().print(text, style="value", markup=False, soft_wrap=True)


def render_call_summary(result: CallResult) -> None:
    render_summary_table(
        {
            "Status": str(result.http_status_code),
            "Response time": f"{result.response_time_ms} ms",
            "Characters": str(len(result.response)),
        },
        title="Call",
    )


def render_summary_table(rows: Mapping[str, object], title: str = "Summary") -> None:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")
    for key, value in rows.items():
        table.add_row(Text(str(key), style="label"), Text(str(value), style="value"))

    panel = Panel(
        table,
        title=Text(title, style="title"),
        title_align="left",
        border_style="border",
        box=box.ROUNDED,
        padding=(0, 2),
        expand=False,
    )
    get_error_console().print(panel)
