"""LLM provider backed by a Republic chat client."""

from __future__ import annotations

import asyncio
import base64
from typing import Any

from republic import LLM

from useragent.core.cost import TokenUsage
from useragent.errors import ModelCallError
from useragent.llm.base import DEFAULT_ATTEMPTS, DEFAULT_RETRY_WAIT_SECONDS, PromptedProvider


def _extract_text(response: Any) -> str:
    if isinstance(response, str):
        return response
    choices = getattr(response, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    if message is None:
        return ""
    return getattr(message, "content", "") or ""


def _extract_usage(response: Any) -> TokenUsage:
    usage = getattr(response, "usage", None)
    if usage is None:
        return TokenUsage()
    input_tokens = getattr(usage, "prompt_tokens", None) or getattr(usage, "input_tokens", 0) or 0
    output_tokens = getattr(usage, "completion_tokens", None) or getattr(usage, "output_tokens", 0) or 0
    return TokenUsage(input_tokens=int(input_tokens), output_tokens=int(output_tokens))


def build_messages(prompt: str, image: bytes | None) -> list[dict[str, Any]]:
    if image is None:
        return [{"role": "user", "content": prompt}]
    data_url = f"data:image/png;base64,{base64.b64encode(image).decode('ascii')}"
    return [
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": data_url}},
                {"type": "text", "text": prompt},
            ],
        }
    ]


class RepublicProvider(PromptedProvider):
    """Vision-capable provider for any `provider:model` Republic understands."""

    name = "republic"

    def __init__(
        self,
        model: str,
        *,
        api_key: str | None = None,
        api_base: str | None = None,
        max_tokens: int = 1024,
        attempts: int = DEFAULT_ATTEMPTS,
        retry_wait: float = DEFAULT_RETRY_WAIT_SECONDS,
        llm: Any | None = None,
    ) -> None:
        super().__init__(attempts=attempts, retry_wait=retry_wait)
        self._max_tokens = max_tokens
        self._llm = llm if llm is not None else LLM(model, api_key=api_key, api_base=api_base)

    async def _complete(self, prompt: str, *, image: bytes | None = None) -> tuple[str, TokenUsage]:
        try:
            response = await asyncio.to_thread(
                self._llm.chat.raw,
                messages=build_messages(prompt, image),
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            raise ModelCallError(f"republic call failed: {exc}") from exc
        return _extract_text(response), _extract_usage(response)
