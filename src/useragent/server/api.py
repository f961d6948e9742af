"""FastAPI control surface: create, inspect and list sessions."""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import urlparse

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from starlette.exceptions import HTTPException

from useragent import __version__
from useragent.config import Settings, get_settings
from useragent.core.types import SessionConfig, SessionOutcome
from useragent.runner import RunResult, run_session_config
from useragent.server.registry import SessionRecord, SessionRegistry, SessionStatus, new_session_id

SessionRunner = Callable[[SessionConfig], Awaitable[RunResult]]

PURGE_INTERVAL_SECONDS = 60 * 60
UNAUTHORIZED = "Unauthorized. Provide X-API-Key header or Authorization: Bearer token."


# ---------- Pydantic IO models ----------
class CreateSessionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str
    persona: str = Field(..., min_length=1)
    intent: str | None = None
    max_steps: int | None = Field(default=None, alias="maxSteps", ge=1, le=50)
    timeout: float | None = Field(default=None, ge=10, le=3600)
    wait_between_actions: float | None = Field(default=None, alias="waitBetweenActions", ge=1, le=60)
    budget_czk: float | None = Field(default=None, alias="budgetCZK", ge=1)
    credentials: dict[str, str] | None = None

    @field_validator("url")
    @classmethod
    def _valid_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("must be a valid URL")
        return value

    @field_validator("persona")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value


class CreateSessionOut(BaseModel):
    sessionId: str
    status: SessionStatus


class SessionConfigOut(BaseModel):
    url: str
    persona: str
    intent: str | None
    maxSteps: int
    timeout: float
    waitBetweenActions: float
    budgetCZK: float


class SessionOut(BaseModel):
    id: str
    status: SessionStatus
    config: SessionConfigOut
    createdAt: int
    startedAt: int | None = None
    completedAt: int | None = None
    report: str | None = None
    jsonReport: dict | None = None
    error: str | None = None


class SessionSummaryOut(BaseModel):
    id: str
    status: SessionStatus
    url: str
    persona: str
    createdAt: int
    completedAt: int | None = None


class HealthOut(BaseModel):
    status: str
    version: str
    uptime: float


def _config_out(config: SessionConfig) -> SessionConfigOut:
    # Credentials are never echoed back.
    return SessionConfigOut(
        url=config.url,
        persona=config.persona,
        intent=config.intent,
        maxSteps=config.max_steps,
        timeout=config.timeout,
        waitBetweenActions=config.wait_between_actions,
        budgetCZK=config.budget_czk,
    )


def _session_out(record: SessionRecord) -> SessionOut:
    return SessionOut(
        id=record.id,
        status=record.status,
        config=_config_out(record.config),
        createdAt=record.created_at,
        startedAt=record.started_at,
        completedAt=record.completed_at,
        report=record.report,
        jsonReport=record.json_report,
        error=record.error,
    )


def _summary_out(record: SessionRecord) -> SessionSummaryOut:
    return SessionSummaryOut(
        id=record.id,
        status=record.status,
        url=record.config.url,
        persona=record.config.persona,
        createdAt=record.created_at,
        completedAt=record.completed_at,
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "invalid value"))
    return f'Field "{location}": {message}' if location else message


def create_app(
    settings: Settings | None = None,
    *,
    registry: SessionRegistry | None = None,
    runner: SessionRunner | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    registry = registry or SessionRegistry()
    started = time.monotonic()
    tasks: set[asyncio.Task[None]] = set()

    async def default_runner(config: SessionConfig) -> RunResult:
        return await run_session_config(config, settings=settings)

    run = runner or default_runner

    if not settings.server_api_key:
        logger.warning("server.auth.disabled reason=no server_api_key configured")

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            registry.purge_expired,
            trigger=IntervalTrigger(seconds=PURGE_INTERVAL_SECONDS),
            id="purge-expired-sessions",
            kwargs={"ttl_seconds": settings.session_ttl_seconds},
            coalesce=True,
            max_instances=1,
        )
        scheduler.start()
        try:
            yield
        finally:
            scheduler.shutdown(wait=False)
            for task in list(tasks):
                task.cancel()
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)

    app = FastAPI(title="UserAgent API", version=__version__, lifespan=lifespan)
    app.state.registry = registry

    @app.exception_handler(HTTPException)
    async def _http_error(_: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    def require_api_key(request: Request) -> None:
        expected = settings.server_api_key
        if not expected:
            return
        if request.headers.get("x-api-key") == expected:
            return
        authorization = request.headers.get("authorization", "")
        if authorization.startswith("Bearer ") and authorization[len("Bearer ") :] == expected:
            return
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    async def execute(session_id: str, config: SessionConfig) -> None:
        await registry.mark_running(session_id)
        logger.info("server.session.running id={} url={}", session_id, config.url)
        try:
            result = await run(config)
        except Exception as exc:
            logger.exception("server.session.failed id={}", session_id)
            await registry.fail(session_id, str(exc) or type(exc).__name__)
            return
        failed = result.report.outcome is SessionOutcome.FAILED
        await registry.complete(
            session_id,
            report=result.markdown,
            json_report=result.json.to_dict(),
            error=(result.report.error or "session failed") if failed else None,
        )
        logger.info("server.session.finished id={} outcome={}", session_id, result.report.outcome)

    @app.get("/health", response_model=HealthOut)
    async def health() -> HealthOut:
        return HealthOut(status="ok", version=__version__, uptime=time.monotonic() - started)

    @app.post(
        "/sessions",
        response_model=CreateSessionOut,
        status_code=201,
        dependencies=[Depends(require_api_key)],
    )
    async def create_session(payload: CreateSessionIn) -> CreateSessionOut:
        session_id = new_session_id()
        reports_dir = Path(settings.reports_dir)
        config = SessionConfig(
            url=payload.url,
            persona=payload.persona,
            intent=payload.intent or None,
            max_steps=payload.max_steps if payload.max_steps is not None else settings.max_steps,
            timeout=payload.timeout if payload.timeout is not None else settings.timeout_seconds,
            wait_between_actions=(
                payload.wait_between_actions
                if payload.wait_between_actions is not None
                else settings.wait_between_actions
            ),
            credentials=payload.credentials or {},
            budget_czk=payload.budget_czk if payload.budget_czk is not None else settings.budget_czk,
            output_path=str(reports_dir / f"{session_id}.md"),
            json_output_path=str(reports_dir / f"{session_id}.json"),
        )
        record = await registry.create(config, session_id=session_id)

        task = asyncio.create_task(execute(record.id, config))
        tasks.add(task)
        task.add_done_callback(tasks.discard)

        logger.info("server.session.created id={} url={}", record.id, config.url)
        return CreateSessionOut(sessionId=record.id, status=record.status)

    @app.get("/sessions/{session_id}", response_model=SessionOut, dependencies=[Depends(require_api_key)])
    async def get_session(session_id: str) -> SessionOut:
        record = await registry.get(session_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Session not found")
        return _session_out(record)

    @app.get("/sessions", response_model=list[SessionSummaryOut], dependencies=[Depends(require_api_key)])
    async def list_sessions() -> list[SessionSummaryOut]:
        return [_summary_out(record) for record in await registry.list_sessions()]

    return app
