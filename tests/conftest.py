"""Shared fixtures: an in-memory stand-in for the engine."""

import json
from typing import Any, List

import pytest


class FakeEngine:
    """
    Records every request and replays queued results in order.

    Version requests are answered from `version` without touching the
    queue; set it to an Exception to make the version call fail. When
    the queue is empty every command succeeds with the bare "Success".
    """

    def __init__(self, version: Any = "0.0.1") -> None:
        self.version = version
        self.requests: List[dict] = []
        self.raw_requests: List[str] = []
        self._results: List[Any] = []

    def queue(self, *results: Any) -> "FakeEngine":
        """Queue results; str values are returned verbatim as the raw response."""
        self._results.extend(results)
        return self

    def execute(self, request: str) -> str:
        self.raw_requests.append(request)
        envelope = json.loads(request)
        self.requests.append(envelope)

        if envelope["command"][0] == "Version":
            if isinstance(self.version, Exception):
                raise self.version
            return json.dumps([{"Success": {"Version": self.version}}])

        result = self._results.pop(0) if self._results else {"Success": "Success"}
        if isinstance(result, str):
            return result
        return json.dumps([result])

    @property
    def commands(self) -> List[Any]:
        """Commands sent, excluding version checks."""
        return [r["command"][0] for r in self.requests if r["command"][0] != "Version"]

    @property
    def last_command(self) -> Any:
        return self.commands[-1]


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_engine():
    return FakeEngine


def wire_id(z=1, i=0, f="Any", x="Any", y="Any", t="Any") -> dict:
    return {"z": z, "f": f, "x": x, "y": y, "i": i, "t": t}


@pytest.fixture
def wire_space_time_id():
    return wire_id
