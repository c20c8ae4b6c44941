"""
Usage tracking module data models.

These models define the data structures used by the usage module
and exposed to other modules.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UsageScope(str, Enum):
    """Which worker invocation a usage snapshot belongs to."""

    BASELINE_FAIR = "baseline_fair"
    BASELINE_MINI = "baseline_mini"
    JUROR_A = "juror_a"
    JUROR_B = "juror_b"
    JUROR_C = "juror_c"
    CRITIQUE_A = "critique_a"
    CRITIQUE_B = "critique_b"
    CRITIQUE_C = "critique_c"
    REBUTTAL_A = "rebuttal_a"
    REBUTTAL_B = "rebuttal_b"
    REBUTTAL_C = "rebuttal_c"
    REVISION_A = "revision_a"
    REVISION_B = "revision_b"
    REVISION_C = "revision_c"
    VERDICT = "verdict"
    EVALUATOR = "evaluator"


class ProviderPricing(BaseModel):
    """
    Pricing information for an LLM provider/model.

    Prices are per 1 million tokens (industry standard).
    """

    provider: str = Field(..., description="Provider name")
    model: str = Field(..., description="Model identifier")
    input_price_per_1m: Decimal = Field(
        ...,
        description="Price per 1M input tokens in USD",
    )
    output_price_per_1m: Decimal = Field(
        ...,
        description="Price per 1M output tokens in USD",
    )

    model_config = {"frozen": True}

    def calculate_cost(self, input_tokens: int, output_tokens: int) -> Decimal:
        """Calculate total cost for given token counts."""
        input_cost = (Decimal(input_tokens) / 1_000_000) * self.input_price_per_1m
        output_cost = (Decimal(output_tokens) / 1_000_000) * self.output_price_per_1m
        return input_cost + output_cost


class UsageSnapshot(BaseModel):
    """
    Token usage and cost of a single worker invocation.

    cost_usd is None when no price is known for the backing model.
    """

    worker_label: str = Field(..., description="Worker that made the call")
    model: str = Field(..., description="Backing model identifier")
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    cost_usd: Optional[float] = Field(None, description="Cost in USD, if priced")

    model_config = {"frozen": True}


def format_cost_usd(value: Optional[float]) -> str:
    """Human-readable cost with precision scaled to magnitude."""
    if value is None:
        return "n/a"
    if value < 0.01:
        return f"${value:.4f}"
    if value < 1:
        return f"${value:.3f}"
    return f"${value:.2f}"
