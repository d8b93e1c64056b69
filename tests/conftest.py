"""
Shared fixtures: a recording stand-in for the billing services.
"""

import json
import logging
from typing import Any, List, Optional

import httpx
import pytest

EXPECTED_REPORT = (
    "MODEL      \tSERVICES \tSPENT\tALLOCATED\tBY       \tUSAGE\n"
    "model.joe  \tmysql    \t200  \t1200     \tuser.joe \t42%  \n"
    "           \twordpress\t300  \t         \t         \n"
    "model.jess \tlandscape\t600  \t1000     \tuser.jess\t60%  \n"
    "           \t         \t     \t         \t         \n"
    "TOTAL      \t         \t1100 \t2200     \t         \t50%  \n"
    "BUDGET     \t         \t     \t4000     \t         \n"
    "UNALLOCATED\t         \t     \t1800     \t         \n"
)

ENTRIES = [
    {
        "owner": "user.joe",
        "limit": "1200",
        "consumed": "500",
        "usage": "42%",
        "model": "model.joe",
        "services": {"wordpress": {"consumed": "300"}, "mysql": {"consumed": "200"}},
    },
    {
        "owner": "user.jess",
        "limit": "1000",
        "consumed": "600",
        "usage": "60%",
        "model": "model.jess",
        "services": {"landscape": {"consumed": "600"}},
    },
]


class RecordingService:
    """MockTransport handler that records requests and answers with one canned response."""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: Optional[bytes] = None,
        error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def calls(self):
        """(method, url) of every recorded request."""
        return [(r.method, str(r.url)) for r in self.requests]

    def last_body(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def service():
    return RecordingService()


@pytest.fixture(autouse=True)
def reset_tallyman_logging():
    """Drop handlers the command line installs so they don't outlive the test."""
    yield
    logging.getLogger("tallyman").handlers.clear()
