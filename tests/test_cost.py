from __future__ import annotations

import pytest

from useragent.core.cost import CostTracker, TokenUsage


def test_cost_uses_list_prices_and_exchange_rate() -> None:
    tracker = CostTracker(5.0)
    tracker.add_usage(TokenUsage(input_tokens=1_000_000, output_tokens=0))
    tracker.add_usage(TokenUsage(input_tokens=0, output_tokens=100_000))

    assert tracker.input_tokens == 1_000_000
    assert tracker.output_tokens == 100_000
    assert tracker.total_cost_usd() == pytest.approx(4.5)
    assert tracker.total_cost_czk() == pytest.approx(4.5 * 23.5)


def test_budget_is_exceeded_only_strictly_above() -> None:
    tracker = CostTracker(1.0, czk_per_usd=1.0, price_per_input_token_usd=0.5, price_per_output_token_usd=0.0)
    tracker.add_usage(TokenUsage(input_tokens=2))
    assert not tracker.is_over_budget()

    tracker.add_usage(TokenUsage(input_tokens=1))
    assert tracker.is_over_budget()


def test_summary_snapshot() -> None:
    tracker = CostTracker(5.0)
    tracker.add_usage(TokenUsage(input_tokens=1000, output_tokens=200))

    summary = tracker.summary()

    assert summary.input_tokens == 1000
    assert summary.output_tokens == 200
    assert summary.total_cost_usd == pytest.approx(0.006)
    assert summary.total_cost_czk == pytest.approx(0.006 * 23.5)
