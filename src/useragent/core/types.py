"""Session data model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Literal

from useragent.config import DebugLevel

EvaluationResult = Literal["met", "unmet", "partial", "surprised"]
Confidence = Literal["high", "medium", "low"]
EVALUATION_RESULTS: frozenset[str] = frozenset({"met", "unmet", "partial", "surprised"})


@dataclass(frozen=True)
class SessionConfig:
    """Immutable run parameters for one session."""

    url: str
    persona: str
    intent: str | None = None
    max_steps: int = 10
    timeout: float = 300
    wait_between_actions: float = 3.0
    credentials: Mapping[str, str] = field(default_factory=dict)
    budget_czk: float = 5.0
    output_path: str | None = None
    json_output_path: str | None = None
    debug: DebugLevel = "off"

    def __post_init__(self) -> None:
        object.__setattr__(self, "credentials", MappingProxyType(dict(self.credentials)))

    @property
    def explore(self) -> bool:
        return self.intent is None


@dataclass(frozen=True)
class ScreenAnalysis:
    description: str
    main_elements: tuple[str, ...] = ()
    observations: tuple[str, ...] = ()


@dataclass(frozen=True)
class Expectation:
    what: str
    expected_time: str | None = None
    confidence: Confidence = "medium"


# Action sum type: one case per action kind, each carrying only its own fields.


@dataclass(frozen=True)
class ClickAction:
    element_id: str
    reasoning: str = ""
    kind: Literal["click"] = field(default="click", init=False)

    @property
    def target(self) -> str | None:
        return self.element_id

    @property
    def value(self) -> str | None:
        return None


@dataclass(frozen=True)
class TypeAction:
    element_id: str
    value: str
    reasoning: str = ""
    kind: Literal["type"] = field(default="type", init=False)

    @property
    def target(self) -> str | None:
        return self.element_id


@dataclass(frozen=True)
class FieldInput:
    element_id: str
    value: str


@dataclass(frozen=True)
class FillAction:
    inputs: tuple[FieldInput, ...]
    reasoning: str = ""
    kind: Literal["fill"] = field(default="fill", init=False)

    @property
    def target(self) -> str | None:
        return ", ".join(item.element_id for item in self.inputs) or None

    @property
    def value(self) -> str | None:
        return ", ".join(item.value for item in self.inputs) or None


@dataclass(frozen=True)
class ScrollAction:
    element_id: str | None = None
    reasoning: str = ""
    kind: Literal["scroll"] = field(default="scroll", init=False)

    @property
    def target(self) -> str | None:
        return self.element_id

    @property
    def value(self) -> str | None:
        return None


@dataclass(frozen=True)
class WaitAction:
    milliseconds: int | None = None
    reasoning: str = ""
    kind: Literal["wait"] = field(default="wait", init=False)

    @property
    def target(self) -> str | None:
        return None

    @property
    def value(self) -> str | None:
        return None if self.milliseconds is None else str(self.milliseconds)


@dataclass(frozen=True)
class NavigateAction:
    url: str
    reasoning: str = ""
    kind: Literal["navigate"] = field(default="navigate", init=False)

    @property
    def target(self) -> str | None:
        return None

    @property
    def value(self) -> str | None:
        return self.url


@dataclass(frozen=True)
class ReadAction:
    reasoning: str = ""
    kind: Literal["read"] = field(default="read", init=False)

    @property
    def target(self) -> str | None:
        return None

    @property
    def value(self) -> str | None:
        return None


type Action = ClickAction | TypeAction | FillAction | ScrollAction | WaitAction | NavigateAction | ReadAction


@dataclass(frozen=True)
class ActionResult:
    """Outcome of executing one action in the browser."""

    success: bool
    duration_ms: int = 0
    error: str | None = None


@dataclass(frozen=True)
class Evaluation:
    result: EvaluationResult
    reality: str
    notes: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    user_quote: str | None = None


@dataclass(frozen=True)
class StepResult:
    """One executed perceive/decide/act/evaluate cycle."""

    step_number: int
    timestamp: int
    screenshot: bytes
    analysis: ScreenAnalysis
    expectation: Expectation
    action: Action
    evaluation: Evaluation
    action_result: ActionResult = field(default_factory=lambda: ActionResult(success=True))


@dataclass(frozen=True)
class SessionContext:
    """Rolling context handed to every prompt."""

    intent: str | None = None
    page_context: str | None = None
    current_summary: str = ""
    last_step_result: StepResult | None = None
    step_count: int = 0
    issues_found: tuple[str, ...] = ()


class SessionOutcome(StrEnum):
    COMPLETED = "completed"
    TIMEOUT = "timeout"
    BUDGET = "budget"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionSummary:
    total_steps: int
    intuitiveness_score: float
    issues_found: tuple[str, ...] = ()
    improvements: tuple[str, ...] = ()
    user_quotes: tuple[str, ...] = ()


@dataclass(frozen=True)
class CostSummary:
    input_tokens: int
    output_tokens: int
    total_cost_usd: float
    total_cost_czk: float


@dataclass(frozen=True)
class SessionReport:
    """Terminal aggregate of one session, created exactly once."""

    config: SessionConfig
    start_time: int
    end_time: int
    steps: tuple[StepResult, ...]
    summary: SessionSummary
    cost: CostSummary
    outcome: SessionOutcome = SessionOutcome.COMPLETED
    error: str | None = None
    video_path: str | None = None
    screenshots: tuple[str, ...] = ()

    @property
    def duration_ms(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_complete(self) -> bool:
        return self.outcome is not SessionOutcome.FAILED
