"""Conversion of raw model text into session data types."""

from __future__ import annotations

import json
import re
from typing import Any

from useragent.core.types import (
    EVALUATION_RESULTS,
    Action,
    ClickAction,
    Evaluation,
    Expectation,
    FieldInput,
    FillAction,
    NavigateAction,
    ReadAction,
    ScreenAnalysis,
    ScrollAction,
    TypeAction,
    WaitAction,
)
from useragent.errors import ModelOutputError
from useragent.llm.types import Decision

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_CONFIDENCE = {"high", "medium", "low"}


def parse_json_response(text: str) -> dict[str, Any]:
    """Extract the outermost JSON object from mixed model text."""
    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        raise ModelOutputError(f"Failed to parse JSON from response: {text[:200]}")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ModelOutputError(f"Failed to parse JSON from response: {exc}") from exc
    if not isinstance(payload, dict):
        raise ModelOutputError("Failed to parse JSON from response: top level is not an object")
    return payload


def _text(payload: dict[str, Any], key: str, default: str = "") -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else default


def _strings(payload: dict[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key)
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if not isinstance(value, list):
        return ()
    return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())


def parse_analysis(text: str) -> ScreenAnalysis:
    payload = parse_json_response(text)
    description = _text(payload, "description")
    if not description:
        raise ModelOutputError("screen analysis is missing 'description'")
    return ScreenAnalysis(
        description=description,
        main_elements=_strings(payload, "mainElements"),
        observations=_strings(payload, "observations"),
    )


def parse_expectation(payload: dict[str, Any]) -> Expectation:
    what = _text(payload, "what")
    if not what:
        raise ModelOutputError("expectation is missing 'what'")
    confidence = _text(payload, "confidence", "medium").lower()
    return Expectation(
        what=what,
        expected_time=_text(payload, "expectedTime") or None,
        confidence=confidence if confidence in _CONFIDENCE else "medium",  # type: ignore[arg-type]
    )


def parse_action(payload: dict[str, Any]) -> Action:
    kind = _text(payload, "action").lower()
    reasoning = _text(payload, "reasoning")
    element_id = _text(payload, "elementId") or None
    value = payload.get("value")
    value = str(value).strip() if value is not None else ""

    match kind:
        case "click" if element_id:
            return ClickAction(element_id=element_id, reasoning=reasoning)
        case "type" if element_id:
            return TypeAction(element_id=element_id, value=value, reasoning=reasoning)
        case "fill":
            return FillAction(inputs=_field_inputs(payload), reasoning=reasoning)
        case "scroll":
            return ScrollAction(element_id=element_id, reasoning=reasoning)
        case "wait":
            milliseconds = int(value) if value.isascii() and value.isdigit() else None
            return WaitAction(milliseconds=milliseconds, reasoning=reasoning)
        case "navigate" if value:
            return NavigateAction(url=value, reasoning=reasoning)
        case "read":
            return ReadAction(reasoning=reasoning)
        case "click" | "type" | "navigate":
            raise ModelOutputError(f"action {kind!r} is missing its required target")
        case _:
            raise ModelOutputError(f"unknown action: {kind!r}")


def _field_inputs(payload: dict[str, Any]) -> tuple[FieldInput, ...]:
    raw = payload.get("inputs")
    if not isinstance(raw, list):
        return ()
    inputs: list[FieldInput] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        element_id = _text(item, "elementId")
        value = item.get("value")
        if element_id and value is not None:
            inputs.append(FieldInput(element_id=element_id, value=str(value)))
    return tuple(inputs)


def parse_decision(text: str) -> Decision:
    payload = parse_json_response(text)
    expectation = payload.get("expectation")
    decision = payload.get("decision")
    if not isinstance(expectation, dict) or not isinstance(decision, dict):
        raise ModelOutputError("response must contain 'expectation' and 'decision' objects")
    return Decision(expectation=parse_expectation(expectation), action=parse_action(decision))


def parse_evaluation(text: str) -> Evaluation:
    payload = parse_json_response(text)
    result = _text(payload, "result").lower()
    if result not in EVALUATION_RESULTS:
        raise ModelOutputError(f"unknown evaluation result: {result!r}")
    return Evaluation(
        result=result,  # type: ignore[arg-type]
        reality=_text(payload, "reality"),
        notes=_strings(payload, "notes"),
        suggestions=_strings(payload, "suggestions"),
        user_quote=_text(payload, "userQuote") or None,
    )
