"""Intuitiveness scoring and session summary aggregation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from useragent.core.types import SessionSummary, StepResult

MAX_SCORE = 10.0
EMPTY_SESSION_SCORE = 5.0
OUTCOME_PENALTIES: dict[str, float] = {
    "met": 0.0,
    "partial": 1.0,
    "unmet": 2.0,
    "surprised": 1.5,
}


def calculate_intuitiveness_score(steps: Sequence[StepResult]) -> float:
    """Reduce step outcomes to one score in [0, 10].

    An empty session scores 5.0 so that "no data" is distinguishable from a
    perfect run.
    """
    if not steps:
        return EMPTY_SESSION_SCORE
    penalty = sum(OUTCOME_PENALTIES[step.evaluation.result] for step in steps)
    score = min(MAX_SCORE, max(0.0, MAX_SCORE - penalty))
    return round(score, 1)


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def generate_summary(steps: Sequence[StepResult], issues_found: Iterable[str]) -> SessionSummary:
    improvements: list[str] = []
    quotes: list[str] = []
    for step in steps:
        improvements.extend(step.evaluation.suggestions)
        if step.evaluation.user_quote:
            quotes.append(step.evaluation.user_quote)

    return SessionSummary(
        total_steps=len(steps),
        intuitiveness_score=calculate_intuitiveness_score(steps),
        issues_found=_unique(issues_found),
        improvements=_unique(improvements),
        user_quotes=_unique(quotes),
    )
