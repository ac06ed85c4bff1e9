"""CLI entrypoint for ollamakit."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import json
from typing import Any

import typer

from ollamakit.client import OllamaClient
from ollamakit.config import ClientConfig, resolve_config
from ollamakit.endpoint.async_call import AsyncCall
from ollamakit.errors import OllamaError
from ollamakit.mock import MockOllama
from ollamakit.models import ChatMessage
from ollamakit.ui.console import configure_logging, get_error_console
from ollamakit.ui.render import (
    render_call_summary,
    render_error,
    render_fragment,
    render_info,
    render_response,
    render_success,
    render_summary_table,
)

app = typer.Typer(add_completion=False, help="Talk to an Ollama server from the terminal.")
config_app = typer.Typer(add_completion=False, help="Inspect resolved configuration.")
app.add_typer(config_app, name="config")


@dataclass
class CliState:
    config: ClientConfig
    mock: MockOllama | None

    def client(self) -> OllamaClient:
        if self.mock is None:
            return OllamaClient.from_config(self.config)
        transport = self.mock.transport()
        return OllamaClient.from_config(self.config, transport=transport, async_transport=transport)


@app.callback()
def root(
    ctx: typer.Context,
    host: str = typer.Option(None, "--host", help="Server URL, e.g. http://localhost:11434."),
    timeout: float = typer.Option(None, "--timeout", help="Connect/read timeout in seconds."),
    mock: bool = typer.Option(False, "--mock", help="Answer from the built-in mock server."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """ollamakit command line."""
    configure_logging(verbose)
    try:
        config = resolve_config(host=host, timeout_s=timeout, mode="mock" if mock else None)
    except ValueError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc
    ctx.obj = CliState(config=config, mock=MockOllama() if config.mode == "mock" else None)


@app.command("ping")
def ping(ctx: typer.Context) -> None:
    """Check that the server is reachable."""
    state: CliState = ctx.obj
    if state.client().ping():
        render_success(f"{state.config.host} is reachable.")
        return
    render_error(f"{state.config.host} is not reachable.")
    raise typer.Exit(code=1)


@app.command("generate")
def generate(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Model name."),
    prompt: str = typer.Argument(..., help="Prompt text."),
    stream: bool = typer.Option(False, "--stream", help="Print tokens as they arrive."),
    option: list[str] = typer.Option([], "--option", "-o", help="Model option as key=value."),
) -> None:
    """Generate a completion."""
    state: CliState = ctx.obj
    options = _parse_options(option)
    try:
        result = state.client().generate(
            model,
            prompt,
            options=options or None,
            on_fragment=render_fragment if stream else None,
        )
    except OllamaError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc
    if not stream:
        render_response(result.response)
    render_call_summary(result)


@app.command("generate-async")
def generate_async(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Model name."),
    prompt: str = typer.Argument(..., help="Prompt text."),
    poll_interval: float = typer.Option(0.05, "--poll-interval", help="Seconds between status polls."),
) -> None:
    """Generate in the background, printing fragments while polling the call."""
    state: CliState = ctx.obj
    call = asyncio.run(_poll(state.client(), model, prompt, poll_interval))
    if not call.is_succeeded():
        render_error(call.response)
        raise typer.Exit(code=1)
    render_summary_table(
        {
            "Status": call.http_status_code,
            "Response time": f"{call.response_time_ms} ms",
            "Characters": len(call.response),
        },
        title="Async call",
    )


@app.command("chat")
def chat(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Model name."),
    prompt: str = typer.Argument(..., help="User message."),
    system: str = typer.Option(None, "--system", help="System message sent first."),
    stream: bool = typer.Option(False, "--stream", help="Print tokens as they arrive."),
) -> None:
    """Send a single chat turn."""
    state: CliState = ctx.obj
    messages = []
    if system:
        messages.append(ChatMessage(role="system", content=system))
    messages.append(ChatMessage(role="user", content=prompt))
    try:
        result = state.client().chat(model, messages, on_fragment=render_fragment if stream else None)
    except OllamaError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc
    if not stream:
        render_response(result.response)
    render_call_summary(result)
    render_info(f"History holds {len(result.chat_history)} messages.")


@app.command("embed")
def embed(
    ctx: typer.Context,
    model: str = typer.Argument(..., help="Model name."),
    prompt: str = typer.Argument(..., help="Text to embed."),
) -> None:
    """Print the embedding vector for a prompt as JSON."""
    state: CliState = ctx.obj
    try:
        vector = state.client().embeddings(model, prompt)
    except OllamaError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc
    render_response(json.dumps(vector))
    render_info(f"{len(vector)} dimensions.")


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the resolved configuration."""
    state: CliState = ctx.obj
    render_summary_table(state.config.to_dict(), title="Configuration")


async def _poll(client: OllamaClient, model: str, prompt: str, poll_interval: float) -> AsyncCall:
    call = client.generate_async(model, prompt)
    with get_error_console().status("Waiting for response", spinner="dots", spinner_style="accent"):
        while not call.is_complete():
            for fragment in call.drain():
                if not fragment.error:
                    render_fragment(fragment)
            await asyncio.sleep(poll_interval)
    for fragment in call.drain():
        if not fragment.error:
            render_fragment(fragment)
    return call


def _parse_options(pairs: list[str]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}.", param_hint="--option")
        key, raw = pair.split("=", 1)
        try:
            options[key.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            options[key.strip()] = raw
    return options


def main() -> None:
    app()


if __name__ == "__main__":
    main()
