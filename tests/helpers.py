"""Test helpers: a fake AI gateway and a deterministic clock."""
import json
from datetime import datetime, timedelta, timezone

import httpx

OWNER_ID = 1
OTHER_OWNER_ID = 2


def gateway_reply(content: str | None = None, status_code: int = 200, body=None, calls: list | None = None):
    """MockTransport answering like an OpenAI-compatible chat completions endpoint."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if body is not None:
            return httpx.Response(status_code, json=body)
        if status_code >= 400:
            return httpx.Response(status_code, text="upstream says no")
        return httpx.Response(
            status_code,
            json={"choices": [{"message": {"role": "assistant", "content": content}}]},
        )

    return httpx.MockTransport(handler)


def alternatives_json(*items: str) -> str:
    return json.dumps({"alternatives": list(items)})


class FakeClock:
    """Deterministic clock that moves `step` (one second by default) per call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        self.now += self.step
        return self.now
