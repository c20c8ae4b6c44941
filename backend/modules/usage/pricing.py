"""
Pricing lookup for the usage module.

Resolves a backing model to its per-token price. Operator overrides take
precedence over the built-in table; unknown models have no price.
"""

import logging
from decimal import Decimal
from typing import Optional

from shared.config import PricingOverride, get_settings

from .models import ProviderPricing, UsageSnapshot

logger = logging.getLogger(__name__)


# OpenAI API list prices (USD per 1M tokens), snapshot of 2026-02-01.
BUILTIN_PRICING: dict[str, ProviderPricing] = {
    "gpt-5.2": ProviderPricing(
        provider="openai",
        model="gpt-5.2",
        input_price_per_1m=Decimal("1.75"),
        output_price_per_1m=Decimal("14"),
    ),
    "gpt-5-mini": ProviderPricing(
        provider="openai",
        model="gpt-5-mini",
        input_price_per_1m=Decimal("0.25"),
        output_price_per_1m=Decimal("2"),
    ),
}


def _match(table: dict[str, ProviderPricing], model: str) -> Optional[ProviderPricing]:
    """Exact match first, then the first key the model name starts with."""
    if model in table:
        return table[model]
    for model_key, pricing in table.items():
        if model.startswith(model_key):
            return pricing
    return None


class PricingTable:
    """
    Pricing lookup combining operator overrides and built-in prices.

    Overrides are matched before built-ins, both by exact key or prefix
    (e.g., "gpt-5.2" matches "gpt-5.2-2026-01-15").
    """

    def __init__(
        self,
        builtin: Optional[dict[str, ProviderPricing]] = None,
        overrides: Optional[dict[str, PricingOverride]] = None,
    ):
        self._builtin = dict(BUILTIN_PRICING if builtin is None else builtin)
        self._overrides = {
            model: ProviderPricing(
                provider="override",
                model=model,
                input_price_per_1m=Decimal(str(price.input)),
                output_price_per_1m=Decimal(str(price.output)),
            )
            for model, price in (overrides or {}).items()
        }

    def get_pricing(self, model: str) -> Optional[ProviderPricing]:
        """Get pricing for a model, or None when it is unknown."""
        pricing = _match(self._overrides, model) or _match(self._builtin, model)
        if pricing is None:
            logger.debug(f"No pricing found for {model}")
        return pricing


def build_usage_snapshot(
    worker_label: str,
    model: str,
    input_tokens: int,
    output_tokens: int,
    total_tokens: Optional[int] = None,
    pricing: Optional[PricingTable] = None,
) -> UsageSnapshot:
    """
    Build the usage snapshot for one worker invocation.

    Args:
        worker_label: Name of the worker that made the call
        model: Backing model identifier
        input_tokens: Prompt tokens
        output_tokens: Completion tokens
        total_tokens: Reported total; input + output when missing or zero
        pricing: Pricing table (defaults to the configured one)

    Returns:
        UsageSnapshot with cost_usd set when the model has a price
    """
    table = pricing or get_pricing_table()
    total = total_tokens or (input_tokens + output_tokens)
    price = table.get_pricing(model)
    cost = float(price.calculate_cost(input_tokens, output_tokens)) if price else None

    return UsageSnapshot(
        worker_label=worker_label,
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=total,
        cost_usd=cost,
    )


# Module-level instance getter
_pricing_table: Optional[PricingTable] = None


def get_pricing_table() -> PricingTable:
    """Get the pricing table singleton built from settings."""
    global _pricing_table
    if _pricing_table is None:
        _pricing_table = PricingTable(overrides=get_settings().pricing_overrides)
    return _pricing_table


def reset_pricing_table() -> None:
    """Reset the pricing table singleton (for testing)."""
    global _pricing_table
    _pricing_table = None
