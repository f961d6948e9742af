"""LLM collaborator contract."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from useragent.core.cost import TokenUsage
from useragent.core.types import Action, ActionResult, Evaluation, Expectation, ScreenAnalysis, SessionContext
from useragent.vision.snapshot import InteractiveElement


@dataclass(frozen=True)
class LLMResponse[T]:
    data: T
    usage: TokenUsage


@dataclass(frozen=True)
class Decision:
    """Combined expectation and chosen action from one model call."""

    expectation: Expectation
    action: Action


class LLMProvider(Protocol):
    async def get_page_context(
        self, *, screenshot: bytes, elements: Sequence[InteractiveElement]
    ) -> LLMResponse[str]: ...

    async def analyze_screen(
        self,
        *,
        screenshot: bytes,
        elements: Sequence[InteractiveElement],
        persona: str,
        context: SessionContext,
    ) -> LLMResponse[ScreenAnalysis]: ...

    async def expect_and_decide(
        self,
        *,
        analysis: ScreenAnalysis,
        elements: Sequence[InteractiveElement],
        persona: str,
        context: SessionContext,
        credentials: Mapping[str, str],
    ) -> LLMResponse[Decision]: ...

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
    ) -> LLMResponse[Evaluation]: ...

    async def summarize_context(
        self,
        *,
        previous_summary: str,
        action: Action,
        evaluation: Evaluation,
        persona: str,
    ) -> LLMResponse[str]: ...
