from __future__ import annotations

from typing import Any

import pytest

from ollamakit.endpoint.types import Endpoint


@pytest.fixture
def endpoint() -> Endpoint:
    return Endpoint(host="http://ollama.test/", path="/api/generate", timeout_s=5.0, verbose=False)


@pytest.fixture
def body() -> dict[str, Any]:
    return {"model": "llama3", "prompt": "Say hello", "stream": True}
