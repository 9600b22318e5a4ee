"""
tests.fakes

In-process stand-ins for the policy engine and decision instrumentation.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from fastapi import FastAPI, Request

POLICY_PATH = "/v1/data/catalog/authz"
POLICY_URI = f"http://policy-engine{POLICY_PATH}"


class RecordingObserver:
    def __init__(self) -> None:
        self.requests: list[Mapping[str, Any]] = []
        self.responses: list[Mapping[str, Any]] = []

    def on_request(self, payload: Mapping[str, Any]) -> None:
        self.requests.append(payload)

    def on_response(self, payload: Mapping[str, Any]) -> None:
        self.responses.append(payload)

    @property
    def last_input(self) -> Mapping[str, Any]:
        return self.requests[-1]["input"]


def build_fake_engine(decide: Callable[[dict[str, Any]], bool]) -> FastAPI:
    """
    Minimal policy engine: evaluates `decide(input)` and records what it received.
    """

    app = FastAPI()
    app.state.inputs = []
    app.state.authorization_headers = []

    @app.post(POLICY_PATH)
    async def evaluate(request: Request) -> dict[str, Any]:
        body = await request.json()
        app.state.inputs.append(body["input"])
        app.state.authorization_headers.append(request.headers.get("authorization"))
        return {
            "decision_id": f"d-{len(app.state.inputs)}",
            "result": {"allow": decide(body["input"])},
        }

    return app
