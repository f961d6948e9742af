"""Prompt builders for every model call of a session."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from useragent.core.types import (
    Action,
    ActionResult,
    ClickAction,
    Evaluation,
    Expectation,
    ScreenAnalysis,
    SessionContext,
    TypeAction,
)
from useragent.vision.snapshot import InteractiveElement, format_elements_for_llm


def page_context_prompt(elements: Sequence[InteractiveElement]) -> str:
    return f"""Analyze this webpage and describe what kind of website/application this is.

Page elements:
{format_elements_for_llm(elements)}

Provide a brief 1-2 sentence description of what this website is about and what it's used for.
This will be used as context for the rest of the session.

Respond with just the description text, no JSON."""


def analyze_prompt(persona: str, context: SessionContext, elements: Sequence[InteractiveElement]) -> str:
    page = f"This is: {context.page_context}" if context.page_context else ""
    progress = f"Progress: {context.current_summary}" if context.current_summary else "First visit."
    goal = context.intent or "Exploring freely."

    return f"""You are: {persona}
Goal: {goal}
{page}
{progress}

Page elements:
{format_elements_for_llm(elements)}

As this specific person, describe what you see on screen NOW. Consider:
- What would catch THIS persona's attention first?
- What might be confusing or unclear for someone with their background?
- What's relevant to their goal?

Respond in JSON (use the persona's language):
{{"description":"what you see now from this persona's perspective","mainElements":["key elements you notice"],"observations":["UX observations relevant to this user type"]}}"""


def _credentials_block(credentials: Mapping[str, str]) -> str:
    if not credentials:
        return ""
    pairs = "\n".join(f"- {key}: {value}" for key, value in credentials.items())
    return f"If the page asks you to log in, use these credentials:\n{pairs}\n"


def expect_and_decide_prompt(
    persona: str,
    analysis: ScreenAnalysis,
    elements: Sequence[InteractiveElement],
    context: SessionContext,
    credentials: Mapping[str, str],
) -> str:
    goal = context.intent or "exploring"
    page = f"Page: {context.page_context}\n" if context.page_context else ""
    progress = f"Progress: {context.current_summary}\n" if context.current_summary else ""

    return f"""You are: {persona}
Goal: {goal}
{page}{progress}You see: {analysis.description}

Available elements:
{format_elements_for_llm(elements)}

{_credentials_block(credentials)}Do TWO things:

1. EXPECTATION: As this persona, what do you expect will happen when you interact with what you see? Consider what would realistically happen, what might confuse this user, etc.

2. DECISION: Choose ONE action to perform:
- click: click an element (elementId required)
- type: type text into a SINGLE field (elementId + value required, value is the actual text)
- fill: fill MULTIPLE form fields at once (login, registration, search filters)
- scroll: scroll the page (optional elementId to scroll into view)
- wait: wait for something (optional value in milliseconds)
- read: read the content on the page without interacting
- navigate: go to a different URL (value = the URL)

Do not repeat actions that already failed; try a different approach instead.

Respond in JSON:
{{
  "expectation": {{
    "what": "what you expect to happen (in persona's language)",
    "expectedTime": "instant/1-2s/slow",
    "confidence": "high/medium/low"
  }},
  "decision": {{
    "action": "click|type|fill|scroll|wait|read|navigate",
    "elementId": "element ID if needed",
    "value": "text value if needed",
    "inputs": [{{"elementId": "...", "value": "..."}}],
    "reasoning": "why this action"
  }}
}}

Include "inputs" only for "fill", "elementId"+"value" only for "type"."""


def _action_description(action: Action) -> str:
    match action:
        case TypeAction(value=value):
            return f'typed "{value}" into field'
        case ClickAction():
            return "clicked on element"
        case _ if action.target:
            return f"{action.kind} on element"
        case _:
            return action.kind


def evaluate_prompt(
    persona: str,
    expectation: Expectation,
    action: Action,
    action_result: ActionResult,
    context: SessionContext,
) -> str:
    page = f"On: {context.page_context}\n" if context.page_context else ""
    outcome = "" if action_result.success else f"The action FAILED: {action_result.error}\n"

    return f"""You are: {persona}
{page}Expected: {expectation.what}
Action taken: {_action_description(action)}
Reasoning: {action.reasoning}
{outcome}
Look at the screenshot and compare expectation vs reality. What happened after the action?

Respond in JSON:
{{"result":"met/unmet/partial/surprised","reality":"describe what you see now","notes":["observation"],"suggestions":["improvement"],"userQuote":"As user I..."}}"""


def summarize_prompt(previous_summary: str, action: Action, evaluation: Evaluation) -> str:
    previous = previous_summary or "Started session"
    details = f'typed "{action.value}"' if isinstance(action, TypeAction) else action.kind

    return f"""Previous: {previous}
Action: {details} - {evaluation.result}
Result: {evaluation.reality}

Summarize progress in 1-2 sentences. Include:
1. What was attempted and the outcome
2. If the action failed, what didn't work (so it is not repeated)
Just text, no JSON."""
