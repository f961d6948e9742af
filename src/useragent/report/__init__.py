"""Report synthesis: findings classification, JSON and Markdown output."""

from useragent.report.classifier import KeywordNoteClassifier, NoteClassifier
from useragent.report.json_report import (
    Findings,
    build_json_report,
    classify_findings,
    extract_persona_name,
    save_json_report,
)
from useragent.report.markdown import MarkdownReportWriter, render_markdown
from useragent.report.schema import JsonReport

__all__ = [
    "Findings",
    "JsonReport",
    "KeywordNoteClassifier",
    "MarkdownReportWriter",
    "NoteClassifier",
    "build_json_report",
    "classify_findings",
    "extract_persona_name",
    "render_markdown",
    "save_json_report",
]
