"""
Usage tracking module.

Turns per-call token counts into usage snapshots with cost.

Public API:
- UsageSnapshot: Token usage and cost of one worker call
- UsageScope: Which worker a snapshot belongs to
- PricingTable: Model price lookup (overrides first, then built-ins)
- build_usage_snapshot: Snapshot factory
"""

from .models import ProviderPricing, UsageScope, UsageSnapshot, format_cost_usd
from .pricing import (
    BUILTIN_PRICING,
    PricingTable,
    build_usage_snapshot,
    get_pricing_table,
    reset_pricing_table,
)

__all__ = [
    "ProviderPricing",
    "UsageScope",
    "UsageSnapshot",
    "format_cost_usd",
    "BUILTIN_PRICING",
    "PricingTable",
    "build_usage_snapshot",
    "get_pricing_table",
    "reset_pricing_table",
]
