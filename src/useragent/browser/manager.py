"""Playwright browser lifecycle for one session."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from loguru import logger
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from useragent.browser.actions import execute_action
from useragent.core.types import Action, ActionResult
from useragent.errors import BrowserNotLaunchedError
from useragent.vision.snapshot import InteractiveElement


class BrowserManager(Protocol):
    async def launch(self, *, record_video_dir: str | None = None) -> None: ...

    async def navigate(self, url: str) -> None: ...

    def set_snapshot(self, elements: Sequence[InteractiveElement]) -> None: ...

    async def execute_action(self, action: Action) -> ActionResult: ...

    def get_page(self) -> Page | None: ...

    def video_path(self) -> str | None: ...

    async def close(self) -> None: ...


class PlaywrightBrowser:
    """Exclusively owned Chromium instance with a single page."""

    def __init__(self, *, headless: bool = True, viewport: tuple[int, int] = (1280, 720)) -> None:
        self._headless = headless
        self._viewport = {"width": viewport[0], "height": viewport[1]}
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None
        self._elements: tuple[InteractiveElement, ...] = ()
        self._video_path: str | None = None

    async def launch(self, *, record_video_dir: str | None = None) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self._headless)
        if record_video_dir:
            Path(record_video_dir).mkdir(parents=True, exist_ok=True)
            self._context = await self._browser.new_context(
                viewport=self._viewport,
                record_video_dir=record_video_dir,
                record_video_size=self._viewport,
            )
        else:
            self._context = await self._browser.new_context(viewport=self._viewport)
        self._page = await self._context.new_page()
        logger.info("browser.launch headless={} video={}", self._headless, bool(record_video_dir))

    def _require_page(self) -> Page:
        if self._page is None:
            raise BrowserNotLaunchedError("browser not launched")
        return self._page

    async def navigate(self, url: str) -> None:
        await self._require_page().goto(url, wait_until="domcontentloaded")

    def set_snapshot(self, elements: Sequence[InteractiveElement]) -> None:
        self._elements = tuple(elements)

    async def execute_action(self, action: Action) -> ActionResult:
        return await execute_action(self._require_page(), action, self._elements)

    def get_page(self) -> Page | None:
        return self._page

    def video_path(self) -> str | None:
        return self._video_path

    async def close(self) -> None:
        page, context, browser, playwright = self._page, self._context, self._browser, self._playwright
        self._page = self._context = self._browser = self._playwright = None
        try:
            if context is not None:
                # The video file is finalized when its context closes.
                await context.close()
                if page is not None and page.video is not None:
                    self._video_path = str(await page.video.path())
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()
