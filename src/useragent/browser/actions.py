"""Execution of decided actions against a Playwright page."""

from __future__ import annotations

import time
from collections.abc import Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from useragent.core.types import (
    Action,
    ActionResult,
    ClickAction,
    FillAction,
    NavigateAction,
    ReadAction,
    ScrollAction,
    TypeAction,
    WaitAction,
)
from useragent.vision.snapshot import INTERACTIVE_ROLES, InteractiveElement, find_element

ACTION_TIMEOUT_MS = 10_000
DEFAULT_WAIT_MS = 1_000
SCROLL_STEP_PX = 300


class ActionFailed(Exception):
    """Ordinary action failure reported back in the ActionResult."""


def locate(page: Page, element: InteractiveElement) -> Locator:
    role = element.role.lower()
    if role in INTERACTIVE_ROLES and element.name:
        locator = page.get_by_role(role, name=element.name, exact=False)  # type: ignore[arg-type]
    elif element.name:
        locator = page.get_by_text(element.name, exact=False)
    elif role in INTERACTIVE_ROLES:
        locator = page.get_by_role(role)  # type: ignore[arg-type]
    else:
        raise ActionFailed(f"cannot locate element {element.id}")
    return locator.nth(element.nth_index)


def _require(elements: Sequence[InteractiveElement], element_id: str) -> InteractiveElement:
    element = find_element(elements, element_id)
    if element is None:
        raise ActionFailed(f"element not found: {element_id}")
    return element


async def _perform(page: Page, action: Action, elements: Sequence[InteractiveElement]) -> None:
    match action:
        case ClickAction(element_id=element_id):
            await locate(page, _require(elements, element_id)).click(timeout=ACTION_TIMEOUT_MS, force=True)
        case TypeAction(element_id=element_id, value=value):
            await locate(page, _require(elements, element_id)).fill(value, timeout=ACTION_TIMEOUT_MS)
        case FillAction(inputs=inputs):
            if not inputs:
                raise ActionFailed("fill action requires at least one input")
            for item in inputs:
                await locate(page, _require(elements, item.element_id)).fill(item.value, timeout=ACTION_TIMEOUT_MS)
        case ScrollAction(element_id=None):
            await page.evaluate(f"window.scrollBy(0, {SCROLL_STEP_PX})")
        case ScrollAction(element_id=element_id):
            await locate(page, _require(elements, element_id)).scroll_into_view_if_needed(timeout=ACTION_TIMEOUT_MS)
        case WaitAction(milliseconds=milliseconds):
            await page.wait_for_timeout(milliseconds if milliseconds is not None else DEFAULT_WAIT_MS)
        case NavigateAction(url=url):
            await page.goto(url)
        case ReadAction():
            return
        case _:
            raise ActionFailed(f"unknown action: {action!r}")


async def execute_action(page: Page, action: Action, elements: Sequence[InteractiveElement]) -> ActionResult:
    """Run one action; ordinary failures are returned, never raised."""
    started = time.monotonic()
    error: str | None = None
    try:
        await _perform(page, action, elements)
    except (ActionFailed, PlaywrightError) as exc:
        error = str(exc)
    duration_ms = int((time.monotonic() - started) * 1000)
    return ActionResult(success=error is None, duration_ms=duration_ms, error=error)


def describe_action(action: Action) -> str:
    match action:
        case FillAction(inputs=inputs):
            return f"fill {len(inputs)} fields [{', '.join(item.element_id for item in inputs)}]"
        case _ if action.target:
            return f"{action.kind} on [{action.target}]"
        case _:
            return action.kind

