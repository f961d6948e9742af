"""High-level entry points that wire collaborators and persist reports."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from loguru import logger

from useragent.browser.manager import BrowserManager, PlaywrightBrowser
from useragent.config import DebugLevel, Settings, get_settings
from useragent.core.cost import CostTracker
from useragent.core.session import SessionOrchestrator, VisionFactory
from useragent.core.types import SessionConfig, SessionReport
from useragent.llm import create_llm_provider
from useragent.llm.types import LLMProvider
from useragent.logging_utils import ArtifactRecorder
from useragent.personas import get_persona_preset
from useragent.report.json_report import build_json_report, write_json_report
from useragent.report.markdown import MarkdownReportWriter
from useragent.report.schema import JsonReport
from useragent.vision.capture import PageVision


@dataclass(frozen=True)
class RunOptions:
    """Simplified run parameters; unset limits fall back to settings."""

    url: str
    persona: str
    intent: str | None = None
    explore: bool = False
    max_steps: int | None = None
    timeout: float | None = None
    wait_between_actions: float | None = None
    budget_czk: float | None = None
    credentials: Mapping[str, str] = field(default_factory=dict)
    llm: str | None = None
    debug: DebugLevel = "off"
    markdown_path: str | None = None
    json_path: str | None = None


@dataclass(frozen=True)
class RunResult:
    report: SessionReport
    json: JsonReport
    markdown: str


def build_session_config(options: RunOptions, settings: Settings) -> SessionConfig:
    """Resolve persona presets and defaults into a full session config.

    A preset key in `persona` is replaced by the preset's description, and its
    first sample intent is used when no intent was given. `explore` drops any
    intent.
    """
    preset = get_persona_preset(options.persona)
    persona = preset.persona if preset else options.persona
    intent = options.intent or (preset.sample_intents[0] if preset and preset.sample_intents else None)
    if options.explore:
        intent = None

    return SessionConfig(
        url=options.url,
        persona=persona,
        intent=intent,
        max_steps=options.max_steps if options.max_steps is not None else settings.max_steps,
        timeout=options.timeout if options.timeout is not None else settings.timeout_seconds,
        wait_between_actions=(
            options.wait_between_actions if options.wait_between_actions is not None else settings.wait_between_actions
        ),
        credentials=options.credentials,
        budget_czk=options.budget_czk if options.budget_czk is not None else settings.budget_czk,
        output_path=options.markdown_path,
        json_output_path=options.json_path,
        debug=options.debug,
    )


def build_cost_tracker(budget_czk: float, settings: Settings) -> CostTracker:
    return CostTracker(
        budget_czk,
        czk_per_usd=settings.czk_per_usd,
        price_per_input_token_usd=settings.price_per_input_token_usd,
        price_per_output_token_usd=settings.price_per_output_token_usd,
    )


async def run_session_config(
    config: SessionConfig,
    *,
    settings: Settings | None = None,
    llm_name: str | None = None,
    llm: LLMProvider | None = None,
    browser: BrowserManager | None = None,
    vision_factory: VisionFactory | None = None,
) -> RunResult:
    settings = settings or get_settings()
    orchestrator = SessionOrchestrator(
        llm=llm or create_llm_provider(settings, llm_name),
        browser=browser
        or PlaywrightBrowser(headless=settings.headless, viewport=(settings.viewport_width, settings.viewport_height)),
        cost_tracker=build_cost_tracker(config.budget_czk, settings),
        artifacts=ArtifactRecorder(settings.artifacts_dir, enabled=config.debug == "ultra"),
        vision_factory=vision_factory or PageVision,
    )
    report = await orchestrator.run(config)

    writer = MarkdownReportWriter()
    markdown = writer.render(report)
    json_report = build_json_report(report)
    if config.output_path:
        writer.save(report, config.output_path)
    if config.json_output_path:
        write_json_report(json_report, config.json_output_path)
    return RunResult(report=report, json=json_report, markdown=markdown)


async def run_test(
    options: RunOptions,
    *,
    settings: Settings | None = None,
    llm: LLMProvider | None = None,
    browser: BrowserManager | None = None,
    vision_factory: VisionFactory | None = None,
) -> RunResult:
    settings = settings or get_settings()
    config = build_session_config(options, settings)
    return await run_session_config(
        config,
        settings=settings,
        llm_name=options.llm,
        llm=llm,
        browser=browser,
        vision_factory=vision_factory,
    )


async def run_tests(options: Iterable[RunOptions], *, settings: Settings | None = None) -> list[RunResult]:
    """Run sessions one after another; each gets its own browser and budget."""
    results: list[RunResult] = []
    for item in options:
        result = await run_test(item, settings=settings)
        logger.info(
            "runner.result persona={} score={} outcome={}",
            result.json.persona.name,
            result.report.summary.intuitiveness_score,
            result.report.outcome,
        )
        results.append(result)
    return results
