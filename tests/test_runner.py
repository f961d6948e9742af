from __future__ import annotations

import json
from pathlib import Path

import pytest
from support import FakeBrowser, FakeLLM, FakeVision

from useragent.config import Settings
from useragent.core.types import SessionOutcome
from useragent.personas import PERSONA_PRESETS, get_persona_preset, list_persona_presets
from useragent.runner import RunOptions, build_cost_tracker, build_session_config, run_test


def test_presets_are_resolved_case_insensitively() -> None:
    preset = get_persona_preset("  Elderly ")

    assert preset is PERSONA_PRESETS["elderly"]
    assert get_persona_preset("astronaut") is None
    assert len(list_persona_presets()) == 8
    assert all(preset.sample_intents for preset in PERSONA_PRESETS.values())


def test_config_uses_preset_persona_and_first_intent(settings: Settings) -> None:
    config = build_session_config(RunOptions(url="https://example.com", persona="gen-z"), settings)

    assert config.persona == PERSONA_PRESETS["gen-z"].persona
    assert config.intent == PERSONA_PRESETS["gen-z"].sample_intents[0]
    assert config.max_steps == settings.max_steps
    assert config.timeout == settings.timeout_seconds
    assert config.budget_czk == settings.budget_czk


def test_explore_drops_intent(settings: Settings) -> None:
    options = RunOptions(url="https://example.com", persona="developer", intent="Check search", explore=True)

    config = build_session_config(options, settings)

    assert config.intent is None
    assert config.explore


def test_free_text_persona_and_overrides(settings: Settings) -> None:
    options = RunOptions(
        url="https://example.com",
        persona="A nurse on a night shift",
        intent="Book a shift swap",
        max_steps=4,
        timeout=60,
        wait_between_actions=0.5,
        budget_czk=2.0,
        credentials={"user": "nurse"},
        debug="ultra",
    )

    config = build_session_config(options, settings)

    assert config.persona == "A nurse on a night shift"
    assert config.intent == "Book a shift swap"
    assert (config.max_steps, config.timeout, config.wait_between_actions, config.budget_czk) == (4, 60, 0.5, 2.0)
    assert dict(config.credentials) == {"user": "nurse"}
    assert config.debug == "ultra"


def test_cost_tracker_follows_settings(settings: Settings) -> None:
    settings = settings.model_copy(update={"czk_per_usd": 25.0})
    tracker = build_cost_tracker(3.0, settings)

    assert tracker.budget_czk == 3.0
    assert tracker.summary().total_cost_czk == 0


@pytest.mark.asyncio
async def test_run_test_writes_both_reports(settings: Settings, tmp_path: Path) -> None:
    browser = FakeBrowser()
    vision = FakeVision()
    options = RunOptions(
        url="https://shop.example.com",
        persona="elderly",
        max_steps=2,
        markdown_path=str(tmp_path / "report.md"),
        json_path=str(tmp_path / "report.json"),
    )

    result = await run_test(
        options,
        settings=settings,
        llm=FakeLLM(results=["met", "unmet"], notes=["Kontakt na podporu chybí v menu"]),
        browser=browser,
        vision_factory=lambda _page: vision,
    )

    assert result.report.outcome is SessionOutcome.COMPLETED
    assert len(result.report.steps) == 2
    assert browser.closes == 1
    assert (tmp_path / "report.md").read_text(encoding="utf-8") == result.markdown
    data = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert data == result.json.to_dict()
    assert data["persona"]["name"] == "Marie"
    assert data["intent"] == PERSONA_PRESETS["elderly"].sample_intents[0]
    assert data["issues"][0]["category"] == "navigation"
