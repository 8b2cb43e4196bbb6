import json
import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx
import pytest

from mackerel_sendgrid.plugin.sendgrid import SendgridPlugin

FIXED_NOW = datetime(2025, 3, 1, 0, 30, 0)


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code=200, body=b"[]", exc=None):
        self.status_code = status_code
        self.body = body if isinstance(body, bytes) else body.encode("utf-8")
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc(f"simulated {self.exc.__name__}", request=request)
        return httpx.Response(self.status_code, content=self.body)


def stats_body(*days):
    return json.dumps(list(days))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("METRIC_KEY_PREFIX", "SENDGRID_APIKEY", "MACKEREL_AGENT_PLUGIN_META"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_plugin():
    def _make(recorder, prefix="sendgrid", api_key="SG.test-key"):
        return SendgridPlugin(
            prefix=prefix,
            api_key=api_key,
            transport=httpx.MockTransport(recorder),
            clock=lambda: FIXED_NOW,
        )
    return _make
