"""Session core: data model, orchestration, context, cost and scoring."""

from useragent.core.context import create_initial_context, update_context
from useragent.core.cost import CostTracker, TokenUsage
from useragent.core.score import calculate_intuitiveness_score, generate_summary
from useragent.core.session import SessionDependencies, SessionOrchestrator, run_session
from useragent.core.step import StepExecutor
from useragent.core.types import SessionConfig, SessionContext, SessionOutcome, SessionReport, StepResult

__all__ = [
    "CostTracker",
    "SessionConfig",
    "SessionContext",
    "SessionDependencies",
    "SessionOrchestrator",
    "SessionOutcome",
    "SessionReport",
    "StepExecutor",
    "StepResult",
    "TokenUsage",
    "calculate_intuitiveness_score",
    "create_initial_context",
    "generate_summary",
    "run_session",
    "update_context",
]
