from __future__ import annotations

import os
from pathlib import Path
import subprocess
import sys

from ollamakit.mock import mock_text

SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(tmp_path: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith(("OLLAMA_", "OLLAMAKIT_"))}
    env["PYTHONDONTWRITEBYTECODE"] = "1"
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "ollamakit.cli", *args],
        capture_output=True,
        text=True,
        env=env,
        cwd=tmp_path,
    )


def test_generate_with_mock(tmp_path: Path) -> None:
    result = _run_cli(tmp_path, "--mock", "generate", "mock-llama", "hello")
    assert result.returncode == 0, result.stderr
    assert mock_text("mock-llama", "hello") in result.stdout


def test_streamed_and_async_generate_with_mock(tmp_path: Path) -> None:
    streamed = _run_cli(tmp_path, "--mock", "generate", "mock-llama", "hello", "--stream")
    assert streamed.returncode == 0, streamed.stderr
    assert mock_text("mock-llama", "hello") in streamed.stdout

    background = _run_cli(tmp_path, "--mock", "generate-async", "mock-llama", "hello")
    assert background.returncode == 0, background.stderr
    assert mock_text("mock-llama", "hello") in background.stdout


def test_exit_codes(tmp_path: Path) -> None:
    assert _run_cli(tmp_path, "--mock", "ping").returncode == 0
    assert _run_cli(tmp_path, "--mock", "chat", "mock-chat", "hi").returncode == 0
    assert _run_cli(tmp_path, "--mock", "generate", "missing", "hi").returncode == 1
    assert _run_cli(tmp_path, "--mock", "generate-async", "missing", "hi").returncode == 1


def test_embed_with_mock(tmp_path: Path) -> None:
    result = _run_cli(tmp_path, "--mock", "embed", "mock-llama", "sky")
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip().startswith("[")
    assert "8 dimensions." in result.stderr
    assert _run_cli(tmp_path, "--mock", "embed", "missing", "sky").returncode == 1
