"""In-memory session arena for the HTTP control surface."""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from loguru import logger

from useragent.core.types import SessionConfig


class SessionStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.FAILED})


def new_session_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class SessionRecord:
    """Immutable snapshot of one server-side session."""

    id: str
    status: SessionStatus
    config: SessionConfig
    created_at: int
    started_at: int | None = None
    completed_at: int | None = None
    report: str | None = None
    json_report: dict[str, Any] | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class SessionRegistry:
    """Keyed arena of session records.

    Records are replaced, never mutated, so readers always hold consistent
    snapshots. Only the task that owns a session moves it between states.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._records: dict[str, SessionRecord] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def create(self, config: SessionConfig, *, session_id: str | None = None) -> SessionRecord:
        record = SessionRecord(
            id=session_id or new_session_id(),
            status=SessionStatus.PENDING,
            config=config,
            created_at=self._now_ms(),
        )
        async with self._lock:
            self._records[record.id] = record
        return record

    async def get(self, session_id: str) -> SessionRecord | None:
        async with self._lock:
            return self._records.get(session_id)

    async def list_sessions(self) -> list[SessionRecord]:
        async with self._lock:
            records = list(self._records.values())
        return sorted(records, key=lambda record: record.created_at, reverse=True)

    async def _update(self, session_id: str, **changes: Any) -> SessionRecord | None:
        async with self._lock:
            record = self._records.get(session_id)
            if record is None:
                # Purged or unknown; the owning task has nothing left to write to.
                return None
            updated = replace(record, **changes)
            self._records[session_id] = updated
            return updated

    async def mark_running(self, session_id: str) -> SessionRecord | None:
        return await self._update(session_id, status=SessionStatus.RUNNING, started_at=self._now_ms())

    async def complete(
        self,
        session_id: str,
        *,
        report: str,
        json_report: dict[str, Any],
        error: str | None = None,
    ) -> SessionRecord | None:
        """Store the finished reports; an `error` marks the session failed but keeps its partial reports."""
        return await self._update(
            session_id,
            status=SessionStatus.FAILED if error else SessionStatus.COMPLETED,
            completed_at=self._now_ms(),
            report=report,
            json_report=json_report,
            error=error,
        )

    async def fail(self, session_id: str, error: str) -> SessionRecord | None:
        return await self._update(
            session_id,
            status=SessionStatus.FAILED,
            completed_at=self._now_ms(),
            error=error,
        )

    async def purge_expired(self, ttl_seconds: float) -> int:
        """Drop terminal sessions created more than `ttl_seconds` ago."""
        cutoff = self._now_ms() - int(ttl_seconds * 1000)
        async with self._lock:
            expired = [
                session_id
                for session_id, record in self._records.items()
                if record.is_terminal and record.created_at < cutoff
            ]
            for session_id in expired:
                del self._records[session_id]
        if expired:
            logger.info("server.sessions.purged count={}", len(expired))
        return len(expired)
