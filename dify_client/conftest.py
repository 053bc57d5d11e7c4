"""
Shared fixtures: a transport that records requests instead of sending them.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import pytest

from dify_client.dispatcher import ClientConfig, RequestDispatcher
from dify_client.http_client import HttpClient, HttpMethod

TEST_BASE_URL = "https://api.example.test/v1"


@dataclass
class RecordedRequest:
    """Everything a transport was asked to send."""
    method: HttpMethod
    url: str
    headers: Dict[str, str]
    content: Optional[bytes] = None
    data: Optional[Dict[str, str]] = None
    files: Optional[Dict[str, Any]] = None
    timeout: Any = None

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def query(self) -> str:
        return urlsplit(self.url).query

    def json(self) -> Any:
        return json.loads(self.content.decode("utf-8"))


@dataclass
class FakeResponse:
    status_code: int = 200
    body: str = '{"result": "success"}'
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})


class RecordingHttpClient(HttpClient):
    """HttpClient that stores each request and replies with a canned response"""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.requests: List[RecordedRequest] = []
        self.response = response or FakeResponse()
        self.error = error
        self.closed = False

    def request(self, method, url, headers, *, content=None, data=None, files=None, timeout):
        self.requests.append(RecordedRequest(
            method=method, url=url, headers=dict(headers), content=content,
            data=data, files=files, timeout=timeout,
        ))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def recorder() -> RecordingHttpClient:
    return RecordingHttpClient()


@pytest.fixture
def dispatcher(recorder) -> RequestDispatcher:
    return RequestDispatcher(ClientConfig(api_key="key-1", base_url=TEST_BASE_URL), recorder)
