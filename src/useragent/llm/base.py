"""Shared prompt/parse/retry plumbing for text-completion providers."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from loguru import logger
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_incrementing

from useragent.core.cost import TokenUsage
from useragent.core.types import Action, ActionResult, Evaluation, Expectation, ScreenAnalysis, SessionContext
from useragent.errors import ModelOutputError
from useragent.llm import prompts
from useragent.llm.parsing import parse_analysis, parse_decision, parse_evaluation
from useragent.llm.types import Decision, LLMResponse
from useragent.vision.snapshot import InteractiveElement

DEFAULT_ATTEMPTS = 3
DEFAULT_RETRY_WAIT_SECONDS = 1.0


def _plain_text(text: str) -> str:
    return text.strip()


class PromptedProvider:
    """Implements every LLM operation on top of one `_complete` primitive.

    Unparseable answers are retried with a linearly growing wait; transport
    errors propagate immediately. Token usage of failed attempts is still
    counted because it was paid for.
    """

    name = "prompted"

    def __init__(self, *, attempts: int = DEFAULT_ATTEMPTS, retry_wait: float = DEFAULT_RETRY_WAIT_SECONDS) -> None:
        self._attempts = max(1, attempts)
        self._retry_wait = retry_wait

    async def _complete(self, prompt: str, *, image: bytes | None = None) -> tuple[str, TokenUsage]:
        raise NotImplementedError

    async def _ask[T](
        self,
        operation: str,
        prompt: str,
        parse: Callable[[str], T],
        *,
        image: bytes | None = None,
    ) -> LLMResponse[T]:
        input_tokens = 0
        output_tokens = 0
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_incrementing(start=self._retry_wait, increment=self._retry_wait),
            retry=retry_if_exception_type(ModelOutputError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                text, usage = await self._complete(prompt, image=image)
                input_tokens += usage.input_tokens
                output_tokens += usage.output_tokens
                try:
                    data = parse(text)
                except ModelOutputError:
                    logger.warning(
                        "llm.output.invalid provider={} operation={} attempt={}",
                        self.name,
                        operation,
                        attempt.retry_state.attempt_number,
                    )
                    raise
        logger.debug(
            "llm.call provider={} operation={} input_tokens={} output_tokens={}",
            self.name,
            operation,
            input_tokens,
            output_tokens,
        )
        return LLMResponse(data=data, usage=TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens))

    async def get_page_context(
        self, *, screenshot: bytes, elements: Sequence[InteractiveElement]
    ) -> LLMResponse[str]:
        prompt = prompts.page_context_prompt(elements)
        return await self._ask("page_context", prompt, _plain_text, image=screenshot)

    async def analyze_screen(
        self,
        *,
        screenshot: bytes,
        elements: Sequence[InteractiveElement],
        persona: str,
        context: SessionContext,
    ) -> LLMResponse[ScreenAnalysis]:
        prompt = prompts.analyze_prompt(persona, context, elements)
        return await self._ask("analyze", prompt, parse_analysis, image=screenshot)

    async def expect_and_decide(
        self,
        *,
        analysis: ScreenAnalysis,
        elements: Sequence[InteractiveElement],
        persona: str,
        context: SessionContext,
        credentials: Mapping[str, str],
    ) -> LLMResponse[Decision]:
        prompt = prompts.expect_and_decide_prompt(persona, analysis, elements, context, credentials)
        return await self._ask("expect_and_decide", prompt, parse_decision)

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
        # Only the post-action screen is sent; the expectation already describes the "before".
        prompt = prompts.evaluate_prompt(persona, expectation, action, action_result, context)
        return await self._ask("evaluate", prompt, parse_evaluation, image=after_screenshot)

    async def summarize_context(
        self,
        *,
        previous_summary: str,
        action: Action,
        evaluation: Evaluation,
        persona: str,
    ) -> LLMResponse[str]:
        prompt = prompts.summarize_prompt(previous_summary, action, evaluation)
        return await self._ask("summarize", prompt, _plain_text)
