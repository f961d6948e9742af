"""Findings synthesis and the machine-readable JSON report."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

from useragent.core.types import FillAction, SessionReport, SessionSummary, StepResult
from useragent.report.classifier import KeywordNoteClassifier, NoteClassifier
from useragent.report.schema import (
    Artifacts,
    Evidence,
    JsonReport,
    JsonReportIssue,
    JsonReportObservation,
    JsonReportPositive,
    JsonReportStep,
    PersonaInfo,
    ResultCounts,
    StepResultTag,
)

MIN_NOTE_LENGTH = 15
MIN_SUGGESTION_LENGTH = 20
MIN_SESSION_ISSUE_LENGTH = 21
MAX_TITLE_LENGTH = 100
DEDUP_PREFIX_LENGTH = 20
MAX_STEP_NOTES = 5
MAX_ISSUES = 20
MAX_POSITIVES = 10
MAX_OBSERVATIONS = 10

NOTE_FALLBACK_RECOMMENDATION = "Investigate and address this issue"
SESSION_FALLBACK_RECOMMENDATION = "Address this UX issue"

_RESULT_TAGS: dict[str, StepResultTag] = {
    "met": "met",
    "partial": "partial",
    "surprised": "surprised",
    "unmet": "failed",
}

_NAME_RE = re.compile(r"^([A-ZÁ-Ž][a-zá-ž]+)")
_CZECH_NAME_RE = re.compile(r"jm[eé]no\s+je\s+([A-ZÁ-Ž][a-zá-ž]+)", re.IGNORECASE)
_WORD_SPLIT_RE = re.compile(r"[,.\s]+")


@dataclass(frozen=True)
class Findings:
    issues: tuple[JsonReportIssue, ...]
    positives: tuple[JsonReportPositive, ...]
    observations: tuple[JsonReportObservation, ...]


def finding_id(prefix: str, category: str, ordinal: int) -> str:
    return f"{prefix}-{category[:3].upper()}-{ordinal:03d}"


def _first_sentence(text: str) -> str:
    for sentence in text.split("."):
        sentence = sentence.strip()
        if sentence:
            return sentence[:MAX_TITLE_LENGTH]
    return text.strip()[:MAX_TITLE_LENGTH]


def titles_overlap(left: str, right: str) -> bool:
    """Crude textual similarity: either lowercase title contains the other's prefix.

    Blank titles never overlap.
    """
    left, right = left.strip().lower(), right.strip().lower()
    if not left or not right:
        return False
    return right[:DEDUP_PREFIX_LENGTH] in left or left[:DEDUP_PREFIX_LENGTH] in right


class _FindingsBuilder:
    def __init__(self, classifier: NoteClassifier) -> None:
        self._classifier = classifier
        self.issues: list[JsonReportIssue] = []
        self.positives: list[JsonReportPositive] = []
        self.observations: list[JsonReportObservation] = []

    def _is_duplicate(self, title: str) -> bool:
        return any(titles_overlap(existing.title, title) for existing in self.issues)

    def add_issue(self, *, text: str, title: str, evidence: Evidence, recommendation: str, category: str) -> None:
        if self._is_duplicate(title):
            return
        self.issues.append(
            JsonReportIssue(
                # Numbered on acceptance so dropped duplicates leave no gaps.
                id=finding_id("UX", category, len(self.issues) + 1),
                severity=self._classifier.severity(text, category),
                category=category,
                title=title,
                evidence=evidence,
                recommendation=recommendation,
                acceptance_criteria=self._classifier.acceptance_criteria(text, category),
            )
        )

    def add_note(self, step: StepResult, note: str) -> None:
        sentiment = self._classifier.sentiment(note)
        category = self._classifier.category(note)
        evidence = Evidence(step=step.step_number, description=note)
        if sentiment == "negative":
            self.add_issue(
                text=note,
                title=_first_sentence(note),
                evidence=evidence,
                recommendation=self._step_recommendation(step, category),
                category=category,
            )
        elif sentiment == "positive":
            self.positives.append(
                JsonReportPositive(
                    id=finding_id("OK", category, len(self.positives) + 1),
                    category=category,
                    title=_first_sentence(note),
                    evidence=evidence,
                )
            )
        else:
            self.observations.append(JsonReportObservation(step=step.step_number, text=note))

    def add_suggestion(self, step: StepResult, suggestion: str) -> None:
        self.add_issue(
            text=suggestion,
            title=_first_sentence(suggestion),
            evidence=Evidence(step=step.step_number, description=f"Suggestion from evaluation: {suggestion}"),
            recommendation=suggestion,
            category=self._classifier.category(suggestion),
        )

    def add_session_issue(self, issue: str, improvements: Sequence[str]) -> None:
        category = self._classifier.category(issue)
        recommendation = next(
            (item for item in improvements if self._classifier.category(item) == category),
            SESSION_FALLBACK_RECOMMENDATION,
        )
        self.add_issue(
            text=issue,
            title=issue[:MAX_TITLE_LENGTH],
            evidence=Evidence(step=0, description=issue),
            recommendation=recommendation,
            category=category,
        )

    def _step_recommendation(self, step: StepResult, category: str) -> str:
        suggestions = step.evaluation.suggestions
        for suggestion in suggestions:
            if self._classifier.category(suggestion) == category:
                return suggestion
        return suggestions[0] if suggestions else NOTE_FALLBACK_RECOMMENDATION


def classify_findings(
    steps: Sequence[StepResult],
    summary: SessionSummary,
    classifier: NoteClassifier | None = None,
) -> Findings:
    """Turn step notes, suggestions and session issues into deduplicated findings.

    Encounter order is step order; within a step notes come before
    suggestions, and session-level issues come last with evidence step 0.
    Pure function of its inputs.
    """
    builder = _FindingsBuilder(classifier or KeywordNoteClassifier())
    for step in steps:
        for note in step.evaluation.notes:
            if len(note) >= MIN_NOTE_LENGTH:
                builder.add_note(step, note)
        for suggestion in step.evaluation.suggestions:
            if len(suggestion) >= MIN_SUGGESTION_LENGTH:
                builder.add_suggestion(step, suggestion)
    for issue in summary.issues_found:
        if len(issue) >= MIN_SESSION_ISSUE_LENGTH:
            builder.add_session_issue(issue, summary.improvements)

    return Findings(
        issues=tuple(builder.issues[:MAX_ISSUES]),
        positives=tuple(builder.positives[:MAX_POSITIVES]),
        observations=tuple(builder.observations[:MAX_OBSERVATIONS]),
    )


def extract_persona_name(persona: str) -> PersonaInfo:
    match = _NAME_RE.match(persona) or _CZECH_NAME_RE.search(persona)
    if match:
        return PersonaInfo(name=match.group(1), description=persona)
    words = " ".join(word for word in _WORD_SPLIT_RE.split(persona)[:2] if word)
    return PersonaInfo(name=words or "User", description=persona)


def make_run_id(start_time_ms: int) -> str:
    started = datetime.fromtimestamp(start_time_ms / 1000, tz=UTC)
    iso = f"{started:%Y-%m-%dT%H:%M:%S}.{started.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def _step_entry(step: StepResult) -> JsonReportStep:
    action = step.action
    if isinstance(action, FillAction):
        value = json.dumps([item.value for item in action.inputs], ensure_ascii=False) if action.inputs else None
    else:
        value = action.value or None
    return JsonReportStep(
        step=step.step_number,
        action=action.kind,
        target=action.target,
        value=value,
        result=_RESULT_TAGS[step.evaluation.result],
        notes=list(step.evaluation.notes[:MAX_STEP_NOTES]),
    )


def build_json_report(report: SessionReport, classifier: NoteClassifier | None = None) -> JsonReport:
    steps = [_step_entry(step) for step in report.steps]
    findings = classify_findings(report.steps, report.summary, classifier)

    return JsonReport(
        run_id=make_run_id(report.start_time),
        url=report.config.url,
        persona=extract_persona_name(report.config.persona),
        intent=report.config.intent or None,
        duration_ms=report.duration_ms,
        intuitiveness_score=report.summary.intuitiveness_score,
        outcome=str(report.outcome),
        error=report.error,
        artifacts=Artifacts(video=report.video_path, screenshots=list(report.screenshots)),
        steps=steps,
        issues=list(findings.issues),
        positives=list(findings.positives),
        observations=list(findings.observations),
        summary=ResultCounts(
            total_steps=len(steps),
            met=sum(1 for step in steps if step.result == "met"),
            partial=sum(1 for step in steps if step.result == "partial"),
            failed=sum(1 for step in steps if step.result in ("failed", "surprised")),
        ),
    )


def write_json_report(json_report: JsonReport, output_path: Path | str) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json_report.to_dict()
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("report.json.saved path={} issues={}", path, len(payload["issues"]))
    return path


def save_json_report(report: SessionReport, output_path: Path | str) -> Path:
    return write_json_report(build_json_report(report), output_path)
