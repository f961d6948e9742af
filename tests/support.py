from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from useragent.core.cost import TokenUsage
from useragent.core.score import generate_summary
from useragent.core.types import (
    Action,
    ActionResult,
    ClickAction,
    CostSummary,
    Evaluation,
    EvaluationResult,
    Expectation,
    ScreenAnalysis,
    SessionConfig,
    SessionContext,
    SessionOutcome,
    SessionReport,
    StepResult,
)
from useragent.errors import ModelCallError
from useragent.llm.types import Decision, LLMResponse
from useragent.report.json_report import build_json_report
from useragent.report.markdown import render_markdown
from useragent.runner import RunResult
from useragent.vision.capture import Capture
from useragent.vision.snapshot import InteractiveElement

SEARCH_BUTTON = InteractiveElement(id="but-1", role="button", name="Search")


def make_step(
    step_number: int = 1,
    result: EvaluationResult = "met",
    *,
    notes: Sequence[str] = (),
    suggestions: Sequence[str] = (),
    user_quote: str | None = None,
    action: Action | None = None,
    action_result: ActionResult | None = None,
) -> StepResult:
    return StepResult(
        step_number=step_number,
        timestamp=1_700_000_000_000 + step_number,
        screenshot=b"png",
        analysis=ScreenAnalysis(description="A search page", main_elements=("Search button",)),
        expectation=Expectation(what="Results appear", expected_time="instant"),
        action=action or ClickAction(element_id="but-1", reasoning="Search looks like the way in"),
        evaluation=Evaluation(
            result=result,
            reality="Results appeared",
            notes=tuple(notes),
            suggestions=tuple(suggestions),
            user_quote=user_quote,
        ),
        action_result=action_result or ActionResult(success=True, duration_ms=12),
    )


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.now += seconds


class FakeVision:
    def __init__(self) -> None:
        self.captures = 0

    async def capture(self) -> Capture:
        self.captures += 1
        return Capture(
            screenshot=f"shot-{self.captures}".encode(),
            elements=(SEARCH_BUTTON,),
            timestamp=1_700_000_000_000 + self.captures,
        )


class FakeBrowser:
    def __init__(
        self,
        *,
        action_result: ActionResult | None = None,
        launch_error: Exception | None = None,
        close_error: Exception | None = None,
        video_path: str | None = None,
    ) -> None:
        self.launches = 0
        self.closes = 0
        self.navigated: list[str] = []
        self.actions: list[Action] = []
        self.snapshots: list[tuple[InteractiveElement, ...]] = []
        self.record_video_dir: str | None = None
        self._action_result = action_result or ActionResult(success=True, duration_ms=5)
        self._launch_error = launch_error
        self._close_error = close_error
        self._video_path = video_path
        self._page: object | None = None

    async def launch(self, *, record_video_dir: str | None = None) -> None:
        self.launches += 1
        self.record_video_dir = record_video_dir
        if self._launch_error is not None:
            raise self._launch_error
        self._page = object()

    async def navigate(self, url: str) -> None:
        self.navigated.append(url)

    def set_snapshot(self, elements: Sequence[InteractiveElement]) -> None:
        self.snapshots.append(tuple(elements))

    async def execute_action(self, action: Action) -> ActionResult:
        self.actions.append(action)
        return self._action_result

    def get_page(self) -> Any:
        return self._page

    def video_path(self) -> str | None:
        return self._video_path

    async def close(self) -> None:
        self.closes += 1
        self._page = None
        if self._close_error is not None:
            raise self._close_error


class FakeLLM:
    """Scripted provider; `results` are consumed one per evaluation, the last one repeats."""

    def __init__(
        self,
        *,
        results: Sequence[EvaluationResult] = ("met",),
        notes: Sequence[str] = (),
        suggestions: Sequence[str] = (),
        usage: Mapping[str, TokenUsage] | None = None,
        analyze_error_at: int | None = None,
        action: Action | None = None,
    ) -> None:
        self.calls: list[str] = []
        self.contexts: list[SessionContext] = []
        self.action_results: list[ActionResult] = []
        self.summaries_requested: list[str] = []
        self._results = list(results)
        self._notes = tuple(notes)
        self._suggestions = tuple(suggestions)
        self._usage = dict(usage or {})
        self._analyze_error_at = analyze_error_at
        self._action = action or ClickAction(element_id="but-1", reasoning="Search looks like the way in")
        self._evaluations = 0
        self._analyses = 0

    def _respond(self, operation: str, data: Any) -> LLMResponse[Any]:
        self.calls.append(operation)
        return LLMResponse(data=data, usage=self._usage.get(operation, TokenUsage()))

    async def get_page_context(self, *, screenshot: bytes, elements: Sequence[InteractiveElement]) -> LLMResponse[str]:
        return self._respond("page_context", "An online shop")

    async def analyze_screen(
        self,
        *,
        screenshot: bytes,
        elements: Sequence[InteractiveElement],
        persona: str,
        context: SessionContext,
    ) -> LLMResponse[ScreenAnalysis]:
        self._analyses += 1
        self.contexts.append(context)
        if self._analyze_error_at == self._analyses:
            self.calls.append("analyze")
            raise ModelCallError("model unreachable")
        return self._respond("analyze", ScreenAnalysis(description="Homepage with a search box"))

    async def expect_and_decide(
        self,
        *,
        analysis: ScreenAnalysis,
        elements: Sequence[InteractiveElement],
        persona: str,
        context: SessionContext,
        credentials: Mapping[str, str],
    ) -> LLMResponse[Decision]:
        decision = Decision(expectation=Expectation(what="Results appear"), action=self._action)
        return self._respond("decide", decision)

    async def evaluate_result(
        self,
        *,
        expectation: Expectation,
        action: Action,
        action_result: ActionResult,
        before_screenshot: bytes,
        after_screenshot: bytes,
        persona: str,
        context: SessionContext,
    ) -> LLMResponse[Evaluation]:
        self.action_results.append(action_result)
        result = self._results[min(self._evaluations, len(self._results) - 1)]
        self._evaluations += 1
        evaluation = Evaluation(
            result=result,
            reality="Something happened",
            notes=self._notes,
            suggestions=self._suggestions,
        )
        return self._respond("evaluate", evaluation)

    async def summarize_context(
        self,
        *,
        previous_summary: str,
        action: Action,
        evaluation: Evaluation,
        persona: str,
    ) -> LLMResponse[str]:
        self.summaries_requested.append(previous_summary)
        return self._respond("summarize", f"summary after {len(self.summaries_requested)} steps")


def make_report(
    steps: Sequence[StepResult] = (),
    *,
    persona: str = "Marie, 72, retired nurse who shops online once a month",
    intent: str | None = "Buy a winter coat",
    issues_found: Sequence[str] = (),
    outcome: SessionOutcome = SessionOutcome.COMPLETED,
    error: str | None = None,
    video_path: str | None = None,
) -> SessionReport:
    steps = tuple(steps)
    return SessionReport(
        config=SessionConfig(url="https://shop.example.com", persona=persona, intent=intent),
        start_time=1_700_000_000_000,
        end_time=1_700_000_083_000,
        steps=steps,
        summary=generate_summary(steps, issues_found),
        cost=CostSummary(input_tokens=12_000, output_tokens=1_500, total_cost_usd=0.0585, total_cost_czk=1.37),
        outcome=outcome,
        error=error,
        video_path=video_path,
    )


def make_run_result(report: SessionReport) -> RunResult:
    return RunResult(report=report, json=build_json_report(report), markdown=render_markdown(report))
