from __future__ import annotations

from pathlib import Path

import pytest
from support import FakeBrowser, FakeClock, FakeLLM, FakeVision

from useragent.core.cost import CostTracker, TokenUsage
from useragent.core.step import StepExecutor
from useragent.core.types import SessionConfig, SessionContext, TypeAction
from useragent.logging_utils import ArtifactRecorder


def _executor(
    llm: FakeLLM,
    browser: FakeBrowser,
    *,
    tracker: CostTracker | None = None,
    clock: FakeClock | None = None,
    artifacts: ArtifactRecorder | None = None,
) -> tuple[StepExecutor, FakeVision]:
    vision = FakeVision()
    executor = StepExecutor(
        llm=llm,
        vision=vision,
        browser=browser,
        cost_tracker=tracker or CostTracker(5.0),
        artifacts=artifacts,
        sleep=(clock or FakeClock()).sleep,
    )
    return executor, vision


CONFIG = SessionConfig(
    url="https://shop.example.com",
    persona="Busy parent",
    intent="Order diapers",
    wait_between_actions=2.5,
    credentials={"email": "parent@example.com"},
)


@pytest.mark.asyncio
async def test_step_runs_full_cycle() -> None:
    action = TypeAction(element_id="but-1", value="diapers")
    llm = FakeLLM(results=["partial"], action=action)
    browser = FakeBrowser()
    clock = FakeClock(start=0)
    executor, vision = _executor(llm, browser, clock=clock)

    result = await executor.execute(step_number=4, config=CONFIG, context=SessionContext(intent="Order diapers"))

    assert llm.calls == ["analyze", "decide", "evaluate"]
    assert browser.actions == [action]
    assert browser.snapshots[0][0].id == "but-1"
    assert clock.now == 2.5
    assert vision.captures == 2
    assert result.step_number == 4
    assert result.screenshot == b"shot-1"
    assert result.timestamp == 1_700_000_000_001
    assert result.action == action
    assert result.evaluation.result == "partial"
    assert result.expectation.what == "Results appear"


@pytest.mark.asyncio
async def test_step_usage_is_tracked() -> None:
    tracker = CostTracker(5.0)
    llm = FakeLLM(
        usage={
            "analyze": TokenUsage(input_tokens=1000, output_tokens=100),
            "decide": TokenUsage(input_tokens=500, output_tokens=50),
            "evaluate": TokenUsage(input_tokens=800, output_tokens=80),
        }
    )
    executor, _ = _executor(llm, FakeBrowser(), tracker=tracker)

    await executor.execute(step_number=1, config=CONFIG, context=SessionContext())

    assert tracker.input_tokens == 2300
    assert tracker.output_tokens == 230


@pytest.mark.asyncio
async def test_step_saves_artifacts_when_enabled(tmp_path: Path) -> None:
    artifacts = ArtifactRecorder(tmp_path, enabled=True)
    executor, _ = _executor(FakeLLM(), FakeBrowser(), artifacts=artifacts)

    await executor.execute(step_number=2, config=CONFIG, context=SessionContext())

    assert (tmp_path / "screenshots" / "step-002-before.png").read_bytes() == b"shot-1"
    assert (tmp_path / "screenshots" / "step-002-after.png").read_bytes() == b"shot-2"
    assert sorted(path.name for path in (tmp_path / "llm-responses").iterdir()) == [
        "step-002-analyze.json",
        "step-002-decide.json",
        "step-002-evaluate.json",
    ]


@pytest.mark.asyncio
async def test_disabled_artifacts_write_nothing(tmp_path: Path) -> None:
    artifacts = ArtifactRecorder(tmp_path, enabled=False)
    executor, _ = _executor(FakeLLM(), FakeBrowser(), artifacts=artifacts)

    await executor.execute(step_number=1, config=CONFIG, context=SessionContext())

    assert list(tmp_path.iterdir()) == []
    assert artifacts.screenshot_paths() == []
