"""One perceive, decide, act and evaluate cycle."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from useragent.browser.actions import describe_action
from useragent.browser.manager import BrowserManager
from useragent.core.cost import CostTracker
from useragent.core.types import SessionConfig, SessionContext, StepResult
from useragent.llm.types import LLMProvider, LLMResponse
from useragent.logging_utils import ArtifactRecorder
from useragent.vision.capture import Vision

Sleep = Callable[[float], Awaitable[None]]


class StepExecutor:
    """Runs a single step against the collaborators of one session.

    Collaborator exceptions propagate to the orchestrator. A failed browser
    action does not: it is recorded in the step and still evaluated.
    """

    def __init__(
        self,
        *,
        llm: LLMProvider,
        vision: Vision,
        browser: BrowserManager,
        cost_tracker: CostTracker,
        artifacts: ArtifactRecorder | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._llm = llm
        self._vision = vision
        self._browser = browser
        self._cost_tracker = cost_tracker
        self._artifacts = artifacts
        self._sleep = sleep

    def _track[T](self, step_number: int, kind: str, response: LLMResponse[T]) -> T:
        self._cost_tracker.add_usage(response.usage)
        if self._artifacts is not None:
            self._artifacts.save_response(step_number, kind, {"data": response.data, "usage": response.usage})
        return response.data

    def _save_screenshot(self, step_number: int, name: str, data: bytes) -> None:
        if self._artifacts is not None:
            self._artifacts.save_screenshot(step_number, name, data)

    async def execute(self, *, step_number: int, config: SessionConfig, context: SessionContext) -> StepResult:
        before = await self._vision.capture()
        self._save_screenshot(step_number, "before", before.screenshot)

        analysis = self._track(
            step_number,
            "analyze",
            await self._llm.analyze_screen(
                screenshot=before.screenshot,
                elements=before.elements,
                persona=config.persona,
                context=context,
            ),
        )
        decision = self._track(
            step_number,
            "decide",
            await self._llm.expect_and_decide(
                analysis=analysis,
                elements=before.elements,
                persona=config.persona,
                context=context,
                credentials=config.credentials,
            ),
        )
        action = decision.action
        logger.info("session.step.action step={} action={}", step_number, describe_action(action))

        self._browser.set_snapshot(before.elements)
        action_result = await self._browser.execute_action(action)
        if not action_result.success:
            logger.warning("session.step.action_failed step={} error={}", step_number, action_result.error)

        await self._sleep(config.wait_between_actions)

        after = await self._vision.capture()
        self._save_screenshot(step_number, "after", after.screenshot)

        evaluation = self._track(
            step_number,
            "evaluate",
            await self._llm.evaluate_result(
                expectation=decision.expectation,
                action=action,
                action_result=action_result,
                before_screenshot=before.screenshot,
                after_screenshot=after.screenshot,
                persona=config.persona,
                context=context,
            ),
        )
        logger.info("session.step.evaluated step={} result={}", step_number, evaluation.result)

        return StepResult(
            step_number=step_number,
            timestamp=before.timestamp,
            screenshot=before.screenshot,
            analysis=analysis,
            expectation=decision.expectation,
            action=action,
            evaluation=evaluation,
            action_result=action_result,
        )
