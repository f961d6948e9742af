"""LLM provider that shells out to the `claude` command line tool."""

from __future__ import annotations

import asyncio
import math

from loguru import logger

from useragent.core.cost import TokenUsage
from useragent.errors import ModelCallError
from useragent.llm.base import DEFAULT_ATTEMPTS, DEFAULT_RETRY_WAIT_SECONDS, PromptedProvider

DEFAULT_TIMEOUT_SECONDS = 60.0
CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


class ClaudeCliProvider(PromptedProvider):
    """Text-only provider; screenshots are not forwarded and the element list carries the page.

    The CLI reports no usage, so tokens are estimated from character counts.
    """

    name = "claude-cli"

    def __init__(
        self,
        *,
        command: str = "claude",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        attempts: int = DEFAULT_ATTEMPTS,
        retry_wait: float = DEFAULT_RETRY_WAIT_SECONDS,
    ) -> None:
        super().__init__(attempts=attempts, retry_wait=retry_wait)
        self._command = command
        self._timeout_seconds = timeout_seconds

    async def _complete(self, prompt: str, *, image: bytes | None = None) -> tuple[str, TokenUsage]:
        try:
            process = await asyncio.create_subprocess_exec(
                self._command,
                "-p",
                prompt,
                "--output-format",
                "text",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ModelCallError(f"failed to spawn {self._command}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout_seconds)
        except TimeoutError as exc:
            process.kill()
            await process.wait()
            logger.warning("llm.cli.timeout command={} timeout={}s", self._command, self._timeout_seconds)
            raise ModelCallError(f"{self._command} timed out after {self._timeout_seconds:g}s") from exc

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ModelCallError(f"{self._command} exited with code {process.returncode}: {detail}")

        text = stdout.decode("utf-8", errors="replace")
        return text, TokenUsage(input_tokens=estimate_tokens(prompt), output_tokens=estimate_tokens(text))
