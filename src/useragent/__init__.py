"""UserAgent - simulate real people using a website to find UX blind spots."""

__version__ = "0.1.0"

from useragent.core import SessionConfig, SessionOrchestrator, SessionReport, run_session  # noqa: E402
from useragent.runner import RunOptions, RunResult, run_test, run_tests  # noqa: E402

__all__ = [
    "RunOptions",
    "RunResult",
    "SessionConfig",
    "SessionOrchestrator",
    "SessionReport",
    "__version__",
    "run_session",
    "run_test",
    "run_tests",
]
