"""Human-readable Markdown session report."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

from useragent.browser.actions import describe_action
from useragent.core.types import SessionOutcome, SessionReport, StepResult, TypeAction

RESULT_ICONS = {
    "met": "✅",
    "unmet": "❌",
    "partial": "⚠️",
    "surprised": "❓",
}
OVERVIEW_TARGET_HINTS = ("search", "button", "link")
_REASON_SPLIT_RE = re.compile(r"[,.!?]")


def format_duration(ms: int) -> str:
    seconds = ms // 1000
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}m {remaining}s" if minutes > 0 else f"{seconds}s"


def format_timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _format_step(step: StepResult) -> list[str]:
    evaluation = step.evaluation
    lines = [
        f"## Step {step.step_number}",
        "",
        f"**Saw:** {step.analysis.description}",
        "",
        f'**Expected:** "{step.expectation.what}"',
    ]
    if step.expectation.expected_time:
        lines.append(f"(Expected time: {step.expectation.expected_time})")
    lines += [
        "",
        f"**Action:** {describe_action(step.action)}",
        f"*Reasoning:* {step.action.reasoning}",
    ]
    if not step.action_result.success:
        lines.append(f"*Action failed:* {step.action_result.error}")
    lines += [
        "",
        f"**Result:** {evaluation.reality}",
        "",
        f"**Evaluation:** {RESULT_ICONS[evaluation.result]} {evaluation.result.upper()}",
        "",
    ]
    if evaluation.notes:
        lines.append("**Notes:**")
        lines += [f"- {note}" for note in evaluation.notes]
        lines.append("")
    if evaluation.user_quote:
        lines += [f'> "{evaluation.user_quote}"', ""]
    lines += ["---", ""]
    return lines


def _overview_what(step: StepResult) -> str:
    action = step.action
    if isinstance(action, TypeAction) and action.value:
        suffix = "..." if len(action.value) > 20 else ""
        return f'"{action.value[:20]}{suffix}"'
    if action.target:
        hinted = next(
            (
                element
                for element in step.analysis.main_elements
                if any(hint in element.lower() for hint in OVERVIEW_TARGET_HINTS)
            ),
            None,
        )
        return hinted[:25] if hinted else action.target
    reason = _REASON_SPLIT_RE.split(action.reasoning)[0]
    return f"{reason[:35]}..." if len(reason) > 35 else reason


def _quick_overview(steps: tuple[StepResult, ...]) -> list[str]:
    lines = ["## Quick Overview", "", "| # | Action | What | Result |", "|---|--------|------|--------|"]
    for step in steps:
        icon = RESULT_ICONS[step.evaluation.result]
        lines.append(f"| {step.step_number} | {step.action.kind} | {_overview_what(step)} | {icon} |")
    lines.append("")
    return lines


def _bullets(title: str, items: tuple[str, ...]) -> list[str]:
    if not items:
        return []
    return [f"## {title}", "", *(f"- {item}" for item in items), ""]


def render_markdown(report: SessionReport) -> str:
    config = report.config
    summary = report.summary
    steps = report.steps

    lines = ["# UserAgent Session Report", "", "## Session Info", ""]
    lines.append(f"- **URL:** {config.url}")
    lines.append(f"- **Persona:** {config.persona}")
    lines.append(f"- **Intent:** {config.intent}" if config.intent else "- **Mode:** Exploratory")
    lines.append(f"- **Started:** {format_timestamp(report.start_time)}")
    lines.append(f"- **Duration:** {format_duration(report.duration_ms)}")
    lines.append(f"- **Steps:** {summary.total_steps}")
    lines.append(f"- **Outcome:** {report.outcome}")
    if report.outcome is SessionOutcome.FAILED and report.error:
        lines.append(f"- **Error:** {report.error}")
    if report.video_path:
        lines.append(f"- **Video:** [{report.video_path}]({report.video_path})")
    lines.append("")

    lines += _quick_overview(steps)

    lines += ["# Timeline", ""]
    for step in steps:
        lines += _format_step(step)

    lines += ["# Summary", "", f"**Intuitiveness Score:** {summary.intuitiveness_score}/10", ""]
    lines += _bullets("Issues Found", summary.issues_found)
    lines += _bullets("Improvement Suggestions", summary.improvements)
    if summary.user_quotes:
        lines += ["## User Perspective", ""]
        for quote in summary.user_quotes:
            lines += [f'> "{quote}"', ""]

    cost = report.cost
    lines += [
        "## Session Cost",
        "",
        f"- **Input tokens:** {cost.input_tokens:,}",
        f"- **Output tokens:** {cost.output_tokens:,}",
        f"- **Total cost:** ${cost.total_cost_usd:.4f} ({cost.total_cost_czk:.2f} CZK)",
        "",
    ]

    total = len(steps)
    met = sum(1 for step in steps if step.evaluation.result == "met")
    unmet = sum(1 for step in steps if step.evaluation.result == "unmet")
    partial = sum(1 for step in steps if step.evaluation.result == "partial")
    met_pct = round(met / total * 100) if total else 0
    lines += [
        "## Key Metrics",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Expectations Met | {met}/{total} ({met_pct}%) |",
        f"| Expectations Unmet | {unmet}/{total} |",
        f"| Partial Success | {partial}/{total} |",
        f"| Issues Identified | {len(summary.issues_found)} |",
        f"| Suggestions Generated | {len(summary.improvements)} |",
        "",
        "---",
        "*Generated by UserAgent*",
    ]
    return "\n".join(lines)


class MarkdownReportWriter:
    def render(self, report: SessionReport) -> str:
        return render_markdown(report)

    def save(self, report: SessionReport, output_path: Path | str) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_markdown(report), encoding="utf-8")
        logger.info("report.markdown.saved path={}", path)
        return path
