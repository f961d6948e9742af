"""Page state capture: screenshot plus interactive elements."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Protocol

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from useragent.errors import CaptureError
from useragent.vision.snapshot import InteractiveElement, parse_aria_snapshot


@dataclass(frozen=True)
class Capture:
    screenshot: bytes
    elements: tuple[InteractiveElement, ...]
    timestamp: int


class Vision(Protocol):
    async def capture(self) -> Capture: ...


class PageVision:
    """Captures the current state of one Playwright page."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def capture(self) -> Capture:
        try:
            screenshot, snapshot = await asyncio.gather(
                self._page.screenshot(type="png", full_page=False),
                self._page.locator("body").aria_snapshot(),
            )
        except PlaywrightError as exc:
            raise CaptureError(f"page capture failed: {exc}") from exc

        elements = tuple(parse_aria_snapshot(snapshot or ""))
        logger.debug("vision.capture elements={} bytes={}", len(elements), len(screenshot))
        return Capture(screenshot=screenshot, elements=elements, timestamp=int(time.time() * 1000))
