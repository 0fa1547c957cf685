"""Test doubles for the LCIA client."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from birds_nest.client.transport import RawResponse


@dataclass
class SentRequest:
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[str]


class ScriptedTransport:
    """In-memory transport that replays canned responses in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests: List[SentRequest] = []

    def send(self, method, url, headers, body=None):
        self.requests.append(SentRequest(method, url, dict(headers), body))
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeClock:
    """Monotonic clock that only advances when the recorded sleep runs."""

    def __init__(self, sleep: RecordingSleep):
        self._sleep = sleep

    def __call__(self) -> float:
        return float(sum(self._sleep.calls))


def response(status: int, body: str = "", **headers: str) -> RawResponse:
    return RawResponse(status=status, headers=dict(headers), body=body)
