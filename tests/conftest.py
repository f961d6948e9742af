from __future__ import annotations

from pathlib import Path

import pytest

from useragent.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        llm_provider="claude-cli",
        artifacts_dir=str(tmp_path / "artifacts"),
        reports_dir=str(tmp_path / "reports"),
        wait_between_actions=0,
        server_api_key=None,
    )
