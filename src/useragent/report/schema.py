"""Machine-readable JSON report contract."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from useragent.report.classifier import Severity

StepResultTag = Literal["met", "partial", "surprised", "failed"]


class Evidence(BaseModel):
    step: int = Field(..., description="Step number, 0 for session-level findings")
    description: str


class JsonReportStep(BaseModel):
    step: int
    action: str
    target: str | None = None
    value: str | None = None
    result: StepResultTag
    notes: list[str] = Field(default_factory=list)


class JsonReportIssue(BaseModel):
    id: str
    severity: Severity
    category: str
    title: str
    evidence: Evidence
    recommendation: str
    acceptance_criteria: list[str]


class JsonReportPositive(BaseModel):
    id: str
    category: str
    title: str
    evidence: Evidence


class JsonReportObservation(BaseModel):
    step: int
    text: str


class PersonaInfo(BaseModel):
    name: str
    description: str


class Artifacts(BaseModel):
    video: str | None = None
    screenshots: list[str] = Field(default_factory=list)


class ResultCounts(BaseModel):
    total_steps: int
    met: int
    partial: int
    failed: int


class JsonReport(BaseModel):
    run_id: str
    url: str
    persona: PersonaInfo
    intent: str | None
    duration_ms: int
    intuitiveness_score: float
    outcome: str
    error: str | None = None
    artifacts: Artifacts
    steps: list[JsonReportStep]
    issues: list[JsonReportIssue]
    positives: list[JsonReportPositive]
    observations: list[JsonReportObservation]
    summary: ResultCounts

    def to_dict(self) -> dict[str, Any]:
        """Dump to plain JSON types, omitting the optional `value` and `video` keys when unset."""
        data = self.model_dump(mode="json")
        if data["artifacts"]["video"] is None:
            del data["artifacts"]["video"]
        for step in data["steps"]:
            if step["value"] is None:
                del step["value"]
        return data
