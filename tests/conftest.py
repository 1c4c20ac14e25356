"""Shared fixtures: a stub HTTP session standing in for requests.Session."""
import json
from urllib.parse import parse_qs

import pytest
import requests


class FakeResponse:
    """Minimal requests.Response look-alike."""

    def __init__(self, payload=None, status_code=200, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """
    Records every request and answers from a table keyed by command.

    Values in the table are payloads, FakeResponse objects, or exceptions
    to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        call = {
            "method": method,
            "url": url,
            "params": params,
            "data": data,
            "headers": headers,
            "timeout": timeout,
        }
        self.calls.append(call)

        if params and "command" in params:
            command = params["command"]
        else:
            command = parse_qs(data or "")["command"][0]

        answer = self.routes[command]
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, FakeResponse):
            return answer
        return FakeResponse(answer)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    """Create an empty stub session."""
    return FakeSession()
