"""Page perception helpers."""

from useragent.vision.capture import Capture, PageVision, Vision
from useragent.vision.snapshot import (
    INTERACTIVE_ROLES,
    InteractiveElement,
    find_element,
    format_elements_for_llm,
    parse_aria_snapshot,
)

__all__ = [
    "INTERACTIVE_ROLES",
    "Capture",
    "InteractiveElement",
    "PageVision",
    "Vision",
    "find_element",
    "format_elements_for_llm",
    "parse_aria_snapshot",
]
