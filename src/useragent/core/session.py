"""Session orchestration: setup, bounded step loop, teardown and report assembly."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger
from playwright.async_api import Page

from useragent.browser.manager import BrowserManager
from useragent.core.context import create_initial_context, update_context
from useragent.core.cost import CostTracker
from useragent.core.score import generate_summary
from useragent.core.step import Sleep, StepExecutor
from useragent.core.types import SessionConfig, SessionContext, SessionOutcome, SessionReport, StepResult
from useragent.errors import BrowserNotLaunchedError
from useragent.llm.types import LLMProvider
from useragent.logging_utils import ArtifactRecorder
from useragent.vision.capture import PageVision, Vision

VisionFactory = Callable[[Page], Vision]
Clock = Callable[[], float]


@dataclass
class _RunState:
    context: SessionContext
    steps: list[StepResult] = field(default_factory=list)
    outcome: SessionOutcome = SessionOutcome.COMPLETED
    error: str | None = None


@dataclass(frozen=True)
class SessionDependencies:
    """Collaborators owned by exactly one session."""

    llm: LLMProvider
    browser: BrowserManager
    cost_tracker: CostTracker
    vision_factory: VisionFactory = PageVision
    artifacts: ArtifactRecorder | None = None


class SessionOrchestrator:
    """Drives one session from browser launch to the final report.

    The orchestrator never raises for session failures: every run produces a
    report whose outcome says how it ended. The browser is closed exactly once.
    """

    def __init__(
        self,
        *,
        llm: LLMProvider,
        browser: BrowserManager,
        cost_tracker: CostTracker,
        vision_factory: VisionFactory = PageVision,
        artifacts: ArtifactRecorder | None = None,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._llm = llm
        self._browser = browser
        self._cost_tracker = cost_tracker
        self._vision_factory = vision_factory
        self._artifacts = artifacts
        self._clock = clock
        self._sleep = sleep

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def run(self, config: SessionConfig) -> SessionReport:
        start_time = self._now_ms()
        state = _RunState(context=create_initial_context(config.intent))
        logger.info(
            "session.start url={} mode={} max_steps={} budget_czk={}",
            config.url,
            "explore" if config.explore else "intent",
            config.max_steps,
            config.budget_czk,
        )

        try:
            vision = await self._setup(config, state)
            await self._run_steps(config, vision, state)
        except Exception as exc:
            logger.exception("session.failed url={} steps={}", config.url, len(state.steps))
            state.outcome = SessionOutcome.FAILED
            state.error = str(exc) or type(exc).__name__
        finally:
            await self._close_browser()

        video_path = self._browser.video_path()
        if video_path:
            logger.info("session.video path={}", video_path)
        screenshots = tuple(self._artifacts.screenshot_paths()) if self._artifacts is not None else ()

        report = SessionReport(
            config=config,
            start_time=start_time,
            end_time=self._now_ms(),
            steps=tuple(state.steps),
            summary=generate_summary(state.steps, state.context.issues_found),
            cost=self._cost_tracker.summary(),
            outcome=state.outcome,
            error=state.error,
            video_path=video_path,
            screenshots=screenshots,
        )
        logger.info(
            "session.finish outcome={} steps={} score={} cost_czk={:.2f}",
            report.outcome,
            len(report.steps),
            report.summary.intuitiveness_score,
            report.cost.total_cost_czk,
        )
        return report

    async def _setup(self, config: SessionConfig, state: _RunState) -> Vision:
        record_video_dir = None
        if config.debug == "ultra" and self._artifacts is not None:
            record_video_dir = str(self._artifacts.root / "videos")
        await self._browser.launch(record_video_dir=record_video_dir)
        await self._browser.navigate(config.url)

        page = self._browser.get_page()
        if page is None:
            raise BrowserNotLaunchedError("browser has no page after launch")
        vision = self._vision_factory(page)

        initial = await vision.capture()
        response = await self._llm.get_page_context(screenshot=initial.screenshot, elements=initial.elements)
        self._cost_tracker.add_usage(response.usage)
        logger.info("session.page_context context={}", response.data)

        state.context = create_initial_context(config.intent, response.data)
        return vision

    async def _run_steps(self, config: SessionConfig, vision: Vision, state: _RunState) -> None:
        executor = StepExecutor(
            llm=self._llm,
            vision=vision,
            browser=self._browser,
            cost_tracker=self._cost_tracker,
            artifacts=self._artifacts,
            sleep=self._sleep,
        )
        loop_started = self._clock()

        for step_number in range(1, config.max_steps + 1):
            if self._clock() - loop_started > config.timeout:
                logger.info("session.timeout step={} timeout={}s", step_number, config.timeout)
                state.outcome = SessionOutcome.TIMEOUT
                return
            if self._cost_tracker.is_over_budget():
                logger.info(
                    "session.budget_exceeded step={} cost_czk={:.2f} budget_czk={}",
                    step_number,
                    self._cost_tracker.total_cost_czk(),
                    config.budget_czk,
                )
                state.outcome = SessionOutcome.BUDGET
                return

            logger.info("session.step.start step={}/{}", step_number, config.max_steps)
            result = await executor.execute(step_number=step_number, config=config, context=state.context)
            state.steps.append(result)

            if step_number < config.max_steps:
                summary = await self._llm.summarize_context(
                    previous_summary=state.context.current_summary,
                    action=result.action,
                    evaluation=result.evaluation,
                    persona=config.persona,
                )
                self._cost_tracker.add_usage(summary.usage)
                state.context = update_context(state.context, result, summary.data)
            else:
                # No further prompt needs a summary, but issues from the last step still count.
                state.context = update_context(state.context, result, state.context.current_summary)

    async def _close_browser(self) -> None:
        try:
            await self._browser.close()
        except Exception:
            logger.exception("session.browser.close_failed")


async def run_session(config: SessionConfig, deps: SessionDependencies) -> SessionReport:
    orchestrator = SessionOrchestrator(
        llm=deps.llm,
        browser=deps.browser,
        cost_tracker=deps.cost_tracker,
        vision_factory=deps.vision_factory,
        artifacts=deps.artifacts,
    )
    return await orchestrator.run(config)
