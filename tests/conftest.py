from __future__ import annotations

import json
from typing import Any, List, Optional, Union

import pytest

from novaexchange_client.api_client import NovaExchangeAPI


class RecordingTransport:
    def __init__(
        self,
        payload: Any = None,
        status: int = 200,
        body: Optional[bytes] = None,
        error: Optional[OSError] = None,
    ) -> None:
        self.status = status
        self.body = json.dumps(payload if payload is not None else {}).encode() if body is None else body
        self.error = error
        self.calls: List[dict] = []

    def request(self, method, url, headers, data, timeout):  # type: ignore[override]
        self.calls.append({
            "method": method,
            "url": url,
            "headers": headers,
            "data": data,
            "timeout": timeout,
        })
        if self.error is not None:
            raise self.error
        return self.status, self.body


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport({"status": "success"})


@pytest.fixture
def api(transport: RecordingTransport):
    client = NovaExchangeAPI(api_key="key", api_secret="secret", transport=transport)
    yield client
    client.close()


@pytest.fixture
def frozen_time(monkeypatch):
    now = {"value": 1700000000.75}
    monkeypatch.setattr("novaexchange_client.api_client.time.time", lambda: now["value"])
    return now


def make_api(transport: RecordingTransport, **kwargs: Union[str, bool, float]) -> NovaExchangeAPI:
    kwargs.setdefault("api_key", "key")
    kwargs.setdefault("api_secret", "secret")
    return NovaExchangeAPI(transport=transport, **kwargs)
