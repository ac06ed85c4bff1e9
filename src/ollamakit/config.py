"""Client configuration resolved from `.env`, the environment and explicit overrides."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Mapping

from ollamakit.endpoint.types import BasicAuth

DEFAULT_HOST = "http://localhost:11434"
DEFAULT_TIMEOUT_S = 10.0
MODES = ("remote", "mock")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ClientConfig:
    host: str = DEFAULT_HOST
    timeout_s: float = DEFAULT_TIMEOUT_S
    verbose: bool = True
    username: str | None = None
    password: str | None = None
    mode: str = "remote"

    @property
    def basic_auth(self) -> BasicAuth | None:
        if self.username is None:
            return None
        return BasicAuth(self.username, self.password or "")

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "timeout_s": self.timeout_s,
            "verbose": self.verbose,
            "username": self.username,
            "password": "***" if self.password else None,
            "mode": self.mode,
        }


def read_dotenv(path: str | Path = ".env") -> dict[str, str]:
    """Parse KEY=VALUE lines; missing or unreadable files yield nothing."""
    env_path = Path(path)
    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return {}

    values: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, value = (part.strip() for part in line.split("=", 1))
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if key and value:
            values[key] = value
    return values


def resolve_config(
    environ: Mapping[str, str] | None = None,
    *,
    dotenv_path: str | Path | None = ".env",
    **overrides: Any,
) -> ClientConfig:
    env: dict[str, str] = read_dotenv(dotenv_path) if dotenv_path is not None else {}
    env.update(os.environ if environ is None else environ)

    config = ClientConfig(
        host=env.get("OLLAMA_HOST", DEFAULT_HOST),
        timeout_s=_parse_float(env, "OLLAMAKIT_TIMEOUT_S", DEFAULT_TIMEOUT_S),
        verbose=_parse_bool(env, "OLLAMAKIT_VERBOSE", True),
        username=env.get("OLLAMAKIT_USERNAME"),
        password=env.get("OLLAMAKIT_PASSWORD"),
        mode=env.get("OLLAMAKIT_MODE", "remote").lower(),
    )
    explicit = {key: value for key, value in overrides.items() if value is not None}
    if explicit:
        config = replace(config, **explicit)

    if not config.host.startswith(("http://", "https://")):
        config = replace(config, host=f"http://{config.host}")
    if config.timeout_s <= 0:
        raise ValueError("Timeout must be positive.")
    if config.mode not in MODES:
        raise ValueError(f"Unsupported mode: {config.mode}")
    return config


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}.") from exc


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}.")
