"""Token usage accounting against a monetary budget."""

from __future__ import annotations

from dataclasses import dataclass

from useragent.config import DEFAULT_CZK_PER_USD
from useragent.core.types import CostSummary

# Claude Sonnet list prices: $3 / 1M input tokens, $15 / 1M output tokens.
PRICE_PER_INPUT_TOKEN_USD = 3 / 1_000_000
PRICE_PER_OUTPUT_TOKEN_USD = 15 / 1_000_000


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0


class CostTracker:
    """Accumulates token usage for one session and checks it against the budget."""

    def __init__(
        self,
        budget_czk: float,
        *,
        czk_per_usd: float = DEFAULT_CZK_PER_USD,
        price_per_input_token_usd: float = PRICE_PER_INPUT_TOKEN_USD,
        price_per_output_token_usd: float = PRICE_PER_OUTPUT_TOKEN_USD,
    ) -> None:
        self.budget_czk = budget_czk
        self._czk_per_usd = czk_per_usd
        self._input_price = price_per_input_token_usd
        self._output_price = price_per_output_token_usd
        self._input_tokens = 0
        self._output_tokens = 0

    @property
    def input_tokens(self) -> int:
        return self._input_tokens

    @property
    def output_tokens(self) -> int:
        return self._output_tokens

    def add_usage(self, usage: TokenUsage) -> None:
        self._input_tokens += usage.input_tokens
        self._output_tokens += usage.output_tokens

    def total_cost_usd(self) -> float:
        return self._input_tokens * self._input_price + self._output_tokens * self._output_price

    def total_cost_czk(self) -> float:
        return self.total_cost_usd() * self._czk_per_usd

    def is_over_budget(self) -> bool:
        return self.total_cost_czk() > self.budget_czk

    def summary(self) -> CostSummary:
        return CostSummary(
            input_tokens=self._input_tokens,
            output_tokens=self._output_tokens,
            total_cost_usd=self.total_cost_usd(),
            total_cost_czk=self.total_cost_czk(),
        )
