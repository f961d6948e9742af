"""Logging setup and debug artifact dumps."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, is_dataclass
from logging import Handler
from pathlib import Path
from typing import Any, Literal

from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "cli"]

_DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"
_CONFIGURED: tuple[LogProfile, str] | None = None


def _build_cli_handler() -> Handler:
    return RichHandler(
        console=get_console(),
        show_level=True,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def configure_logging(*, level: str = "INFO", profile: LogProfile = "default") -> None:
    """Configure process-level logging once per (profile, level)."""
    global _CONFIGURED
    level = level.upper()
    if _CONFIGURED == (profile, level):
        return

    logger.remove()
    if profile == "cli":
        logger.add(_build_cli_handler(), level=level, format="{message}", backtrace=False, diagnose=False)
    else:
        logger.add(sys.stderr, level=level, format=_DEFAULT_FORMAT, backtrace=False, diagnose=False)
    _CONFIGURED = (profile, level)


class ArtifactRecorder:
    """Writes per-step screenshots and raw model responses for ultra debug runs."""

    def __init__(self, root: Path | str, *, enabled: bool) -> None:
        self.root = Path(root)
        self.enabled = enabled
        self._screenshots: list[Path] = []

    @property
    def screenshots_dir(self) -> Path:
        return self.root / "screenshots"

    @property
    def responses_dir(self) -> Path:
        return self.root / "llm-responses"

    def save_screenshot(self, step_number: int, name: str, data: bytes) -> Path | None:
        if not self.enabled:
            return None
        self.screenshots_dir.mkdir(parents=True, exist_ok=True)
        path = self.screenshots_dir / f"step-{step_number:03d}-{name}.png"
        path.write_bytes(data)
        self._screenshots.append(path)
        return path

    def save_response(self, step_number: int, kind: str, payload: Any) -> Path | None:
        if not self.enabled:
            return None
        self.responses_dir.mkdir(parents=True, exist_ok=True)
        path = self.responses_dir / f"step-{step_number:03d}-{kind}.json"
        path.write_text(json.dumps(_jsonable(payload), ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    def screenshot_paths(self) -> list[str]:
        """Screenshots written by this recorder, in the order they were saved."""
        return [str(path) for path in self._screenshots]


def _jsonable(payload: Any) -> Any:
    if is_dataclass(payload) and not isinstance(payload, type):
        return _jsonable(asdict(payload))
    if isinstance(payload, dict):
        return {str(key): _jsonable(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_jsonable(item) for item in payload]
    if isinstance(payload, bytes):
        return f"<{len(payload)} bytes>"
    return payload
