from __future__ import annotations

import json
from typing import Any, List, Optional

import pytest

from ymprices import exporter
from ymprices.config import Config
from ymprices.types import Credential


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        return json.loads(self._text)


class FakeSession:
    """Stands in for requests.Session; replays queued responses and records calls."""

    def __init__(self, responses: Optional[List[FakeResponse]] = None):
        self.responses = list(responses or [])
        self.calls: List[dict] = []

    def _next(self) -> FakeResponse:
        assert self.responses, "unexpected extra request"
        return self.responses.pop(0)

    def get(self, url, params=None, timeout=None):
        self.calls.append({"method": "GET", "url": url, "params": dict(params or {})})
        return self._next()

    def post(self, url, json=None, timeout=None):
        self.calls.append({"method": "POST", "url": url, "json": json})
        return self._next()


def offers_payload(offers, next_token=None) -> dict:
    return {"status": "OK", "result": {"offers": offers, "paging": {"nextPageToken": next_token}}}


@pytest.fixture
def config() -> Config:
    return Config(
        credential=Credential(token="secret-token"),
        campaign_id="12345678",
        base_url="https://api.example.test",
    )


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    recorded: List[float] = []
    monkeypatch.setattr(exporter.time, "sleep", recorded.append)
    return recorded
