"""Shared fixtures for prompt-refiner-client tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List

import httpx
import pytest

from prompt_refiner_client.client import RefinerClient
from prompt_refiner_client.config import RetryConfig


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary config file for testing."""
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("""
client:
  base_url: http://refiner.internal:9000/
  timeout_seconds: 5

retry:
  max_retries: 4
  initial_delay: 0.05
  max_delay: 1.0
  multiplier: 3.0
""")
    yield config_file


@pytest.fixture
def success_body() -> Dict[str, Any]:
    """Body returned by the service for a successful refinement."""
    return {
        "refined_prompt": "Enhanced: test",
        "detected_topics": ["Topic1", "Topic2"],
        "recommended_references": ["Ref1", "Ref2"],
    }


@pytest.fixture
def fast_retry() -> RetryConfig:
    """Retry policy with small delays."""
    return RetryConfig(max_retries=2, initial_delay=0.01, max_delay=0.05, multiplier=2.0)


class RecordingHandler:
    """MockTransport handler that records requests and replays scripted replies.

    Each reply is either an ``httpx.Response`` or an exception instance to
    raise. The last reply repeats once the script runs out.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.replies)) - 1
        reply = self.replies[index]
        if isinstance(reply, Exception):
            raise reply
        # replies may repeat, hand out a fresh copy each time
        return httpx.Response(reply.status_code, headers=reply.headers, content=reply.content)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def payload(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def handler() -> Callable[..., RecordingHandler]:
    """Factory for RecordingHandler instances."""
    return RecordingHandler


@pytest.fixture
def sleeps() -> List[float]:
    """Delays passed to the client's sleep function."""
    return []


@pytest.fixture
def make_client(sleeps: List[float]) -> Generator[Callable[..., RefinerClient], None, None]:
    """Build clients wired to a RecordingHandler with sleeps recorded instead of slept."""
    clients: List[RefinerClient] = []

    def _make(handler: RecordingHandler, **kwargs: Any) -> RefinerClient:
        kwargs.setdefault('timeout', 1)
        kwargs.setdefault('sleep', sleeps.append)
        client = RefinerClient(
            "http://refiner.test",
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
