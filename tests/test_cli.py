from __future__ import annotations

import pytest
import typer
from support import make_report, make_run_result, make_step
from typer.testing import CliRunner

import useragent.cli as cli
from useragent.config import Settings
from useragent.core.types import SessionOutcome
from useragent.runner import RunOptions, RunResult


def _patch_run(monkeypatch: pytest.MonkeyPatch, settings: Settings, outcome: SessionOutcome) -> list[RunOptions]:
    captured: list[RunOptions] = []

    async def fake_run_test(options: RunOptions, *, settings: Settings | None = None) -> RunResult:
        captured.append(options)
        error = "chromium missing" if outcome is SessionOutcome.FAILED else None
        return make_run_result(make_report([make_step(1)], outcome=outcome, error=error))

    monkeypatch.setattr(cli, "run_test", fake_run_test)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    return captured


def test_parse_credentials() -> None:
    assert cli.parse_credentials("email=a@b.cz, password=x=y,broken") == {"email": "a@b.cz", "password": "x=y"}
    assert cli.parse_credentials(None) == {}


def test_parse_debug() -> None:
    assert cli.parse_debug("true") == "debug"
    assert cli.parse_debug("ULTRA") == "ultra"
    assert cli.parse_debug("false") == "off"
    with pytest.raises(typer.BadParameter):
        cli.parse_debug("verbose")


def test_run_command_builds_options(monkeypatch: pytest.MonkeyPatch, settings: Settings) -> None:
    captured = _patch_run(monkeypatch, settings, SessionOutcome.COMPLETED)

    result = CliRunner().invoke(
        cli.app,
        [
            "run",
            "--url",
            "https://shop.example.com",
            "--persona",
            "elderly",
            "--steps",
            "3",
            "--credentials",
            "email=marie@example.com",
            "--json-output",
            "out.json",
            "--debug",
            "ultra",
            "--budget",
            "2.5",
            "--llm",
            "republic",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Session complete" in result.output
    (options,) = captured
    assert options.persona == "elderly"
    assert options.max_steps == 3
    assert dict(options.credentials) == {"email": "marie@example.com"}
    assert options.markdown_path == "./report.md"
    assert options.json_path == "out.json"
    assert options.debug == "ultra"
    assert options.budget_czk == 2.5
    assert options.llm == "republic"
    assert not options.explore


def test_failed_session_exits_nonzero(monkeypatch: pytest.MonkeyPatch, settings: Settings) -> None:
    _patch_run(monkeypatch, settings, SessionOutcome.FAILED)

    result = CliRunner().invoke(cli.app, ["run", "--url", "https://x.example", "--persona", "tester", "--explore"])

    assert result.exit_code == 1
    assert "chromium missing" in result.output


def test_run_requires_url() -> None:
    result = CliRunner().invoke(cli.app, ["run", "--persona", "tester"])

    assert result.exit_code != 0


def test_personas_command_lists_presets() -> None:
    result = CliRunner().invoke(cli.app, ["personas"])

    assert result.exit_code == 0
    assert "elderly" in result.output
    assert "gen-z" in result.output
