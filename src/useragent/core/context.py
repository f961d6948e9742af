"""Rolling per-session context."""

from __future__ import annotations

from dataclasses import replace

from useragent.core.types import SessionContext, StepResult

# English and Czech fragments that mark an evaluation note as a UX issue.
ISSUE_KEYWORDS: tuple[str, ...] = (
    "confus",
    "unclear",
    "difficult",
    "hidden",
    "missing",
    "frustrat",
    "broken",
    "inconsistent",
    "unusable",
    "poor",
    "bad",
    "problem",
    "error",
    "fail",
    "wrong",
    "bug",
    "issue",
    "doesn't work",
    "not work",
    "hard to",
    "cannot",
    "can't",
    "impossible",
    "unintuitive",
    "nekonzistent",
    "chybí",
    "problém",
    "špatně",
    "špatná",
    "špatný",
    "nefunguje",
    "nereaguje",
    "matoucí",
    "nejasn",
    "nelogick",
    "obtížn",
    "komplikovan",
    "zmatek",
    "nepoužiteln",
    "nepřehled",
)


def create_initial_context(intent: str | None = None, page_context: str | None = None) -> SessionContext:
    return SessionContext(intent=intent, page_context=page_context)


def is_issue_note(note: str) -> bool:
    lowered = note.lower()
    return any(keyword in lowered for keyword in ISSUE_KEYWORDS)


def extract_issues(notes: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    return tuple(note for note in notes if is_issue_note(note))


def update_context(context: SessionContext, step_result: StepResult, new_summary: str) -> SessionContext:
    """Fold one step into the context.

    The summary and last step are replaced, the step counter moves by one and
    issue-like notes are appended. Previously found issues are never dropped.
    """
    return replace(
        context,
        current_summary=new_summary,
        last_step_result=step_result,
        step_count=context.step_count + 1,
        issues_found=(*context.issues_found, *extract_issues(step_result.evaluation.notes)),
    )
