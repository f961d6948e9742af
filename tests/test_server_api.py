from __future__ import annotations

import asyncio
import time
from typing import Any

from fastapi.testclient import TestClient
from support import make_report, make_run_result, make_step

from useragent.config import Settings
from useragent.core.types import SessionConfig, SessionOutcome
from useragent.runner import RunResult
from useragent.server.api import UNAUTHORIZED, create_app
from useragent.server.registry import SessionRegistry

PAYLOAD = {
    "url": "https://shop.example.com",
    "persona": "Marie, 72, retired nurse",
    "intent": "Buy a winter coat",
    "maxSteps": 4,
    "budgetCZK": 2,
    "credentials": {"email": "marie@example.com"},
}


class RecordingRunner:
    def __init__(self, outcome: SessionOutcome = SessionOutcome.COMPLETED, error: Exception | None = None) -> None:
        self.configs: list[SessionConfig] = []
        self._outcome = outcome
        self._error = error

    async def __call__(self, config: SessionConfig) -> RunResult:
        self.configs.append(config)
        await asyncio.sleep(0)
        if self._error is not None:
            raise self._error
        error = "browser crashed" if self._outcome is SessionOutcome.FAILED else None
        step = make_step(1, notes=["The button is broken and confusing"])
        report = make_report([step], outcome=self._outcome, error=error)
        return make_run_result(report)


def _wait_for_terminal(client: TestClient, session_id: str, headers: dict[str, str] | None = None) -> dict[str, Any]:
    for _ in range(200):
        body = client.get(f"/sessions/{session_id}", headers=headers or {}).json()
        if body["status"] in ("completed", "failed"):
            return body
        time.sleep(0.01)
    raise AssertionError(f"session {session_id} did not finish")


def test_health(settings: Settings) -> None:
    with TestClient(create_app(settings, runner=RecordingRunner())) as client:
        response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["uptime"] >= 0


def test_session_runs_to_completion(settings: Settings) -> None:
    runner = RecordingRunner()
    with TestClient(create_app(settings, runner=runner)) as client:
        created = client.post("/sessions", json=PAYLOAD)
        assert created.status_code == 201
        session_id = created.json()["sessionId"]
        assert created.json()["status"] == "pending"

        body = _wait_for_terminal(client, session_id)

    assert body["status"] == "completed"
    assert body["report"].startswith("# UserAgent Session Report")
    assert body["jsonReport"]["issues"][0]["id"] == "UX-INT-001"
    assert body["startedAt"] is not None
    assert body["completedAt"] >= body["createdAt"]
    assert body["config"] == {
        "url": "https://shop.example.com",
        "persona": "Marie, 72, retired nurse",
        "intent": "Buy a winter coat",
        "maxSteps": 4,
        "timeout": settings.timeout_seconds,
        "waitBetweenActions": settings.wait_between_actions,
        "budgetCZK": 2,
    }
    (config,) = runner.configs
    assert dict(config.credentials) == {"email": "marie@example.com"}
    assert config.output_path is not None and config.output_path.endswith(f"{session_id}.md")
    assert config.json_output_path is not None and config.json_output_path.endswith(f"{session_id}.json")


def test_failed_outcome_marks_session_failed(settings: Settings) -> None:
    with TestClient(create_app(settings, runner=RecordingRunner(SessionOutcome.FAILED))) as client:
        session_id = client.post("/sessions", json=PAYLOAD).json()["sessionId"]
        body = _wait_for_terminal(client, session_id)

    assert body["status"] == "failed"
    assert body["error"] == "browser crashed"
    assert body["report"] is not None


def test_runner_exception_marks_session_failed(settings: Settings) -> None:
    runner = RecordingRunner(error=RuntimeError("playwright not installed"))
    with TestClient(create_app(settings, runner=runner)) as client:
        session_id = client.post("/sessions", json=PAYLOAD).json()["sessionId"]
        body = _wait_for_terminal(client, session_id)

    assert body["status"] == "failed"
    assert body["error"] == "playwright not installed"
    assert body["report"] is None


def test_list_sessions(settings: Settings) -> None:
    registry = SessionRegistry()
    with TestClient(create_app(settings, registry=registry, runner=RecordingRunner())) as client:
        first = client.post("/sessions", json=PAYLOAD).json()["sessionId"]
        _wait_for_terminal(client, first)
        listed = client.get("/sessions").json()

    assert [item["id"] for item in listed] == [first]
    assert listed[0]["url"] == "https://shop.example.com"
    assert "credentials" not in listed[0]


def test_validation_errors_are_400(settings: Settings) -> None:
    with TestClient(create_app(settings, runner=RecordingRunner())) as client:
        bad_url = client.post("/sessions", json={**PAYLOAD, "url": "not a url"})
        too_many_steps = client.post("/sessions", json={**PAYLOAD, "maxSteps": 51})
        blank_persona = client.post("/sessions", json={**PAYLOAD, "persona": "   "})
        missing = client.post("/sessions", json={"url": "https://shop.example.com"})

    for response in (bad_url, too_many_steps, blank_persona, missing):
        assert response.status_code == 400
        assert "error" in response.json()
    assert "url" in bad_url.json()["error"]
    assert "maxSteps" in too_many_steps.json()["error"]


def test_unknown_session_is_404(settings: Settings) -> None:
    with TestClient(create_app(settings, runner=RecordingRunner())) as client:
        response = client.get("/sessions/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Session not found"}


def test_api_key_is_required_when_configured(settings: Settings) -> None:
    settings = settings.model_copy(update={"server_api_key": "s3cret"})
    with TestClient(create_app(settings, runner=RecordingRunner())) as client:
        anonymous = client.post("/sessions", json=PAYLOAD)
        wrong = client.get("/sessions", headers={"X-API-Key": "nope"})
        with_header = client.get("/sessions", headers={"X-API-Key": "s3cret"})
        with_bearer = client.get("/sessions", headers={"Authorization": "Bearer s3cret"})
        health = client.get("/health")

    assert anonymous.status_code == 401
    assert anonymous.json() == {"error": UNAUTHORIZED}
    assert wrong.status_code == 401
    assert with_header.status_code == 200
    assert with_bearer.status_code == 200
    assert health.status_code == 200
