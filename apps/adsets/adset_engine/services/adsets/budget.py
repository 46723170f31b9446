from __future__ import annotations

import math
from datetime import datetime, timezone

from adset_engine.services.adsets.schemas import BidStrategy, BudgetType

DEFAULT_BID_STRATEGY = BidStrategy.LOWEST_COST_WITHOUT_CAP.value


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount (pesos) to minor units (centavos)."""
    return int(round(amount * 100))


def from_minor_units(amount: int) -> float:
    return amount / 100


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp.  Naive values are taken as UTC.

    Raises ``ValueError`` for unparseable input.
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: str) -> str:
    """Normalise to UTC with millisecond precision, e.g. ``2025-01-01T00:00:00.000Z``."""
    utc = parse_timestamp(value).astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _positive(amount: float | None) -> bool:
    return amount is not None and math.isfinite(amount * 100) and amount > 0


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


def normalize_budget_and_bid(
    budget_type: BudgetType,
    daily_budget: float | None,
    lifetime_budget: float | None,
    start_time: str | None,
    end_time: str | None,
    cbo_enabled: bool,
    bid_strategy: str | None,
    bid_amount: float | None,
    cost_per_result_goal: float | None,
) -> dict[str, str]:
    """Budget and bid fields for the ad set, amounts in minor units.

    When the parent campaign carries its own budget (``cbo_enabled``) no
    ad set budget is emitted.  Amounts were checked by the validator.
    """
    fields: dict[str, str] = {}

    if not cbo_enabled:
        if budget_type is BudgetType.LIFETIME:
            fields["lifetime_budget"] = str(to_minor_units(lifetime_budget))
            fields["start_time"] = format_timestamp(start_time)
            fields["end_time"] = format_timestamp(end_time)
        else:
            fields["daily_budget"] = str(to_minor_units(daily_budget))

    if _positive(cost_per_result_goal):
        fields["bid_amount"] = str(to_minor_units(cost_per_result_goal))
    elif _positive(bid_amount):
        fields["bid_amount"] = str(to_minor_units(bid_amount))

    fields["bid_strategy"] = bid_strategy or DEFAULT_BID_STRATEGY
    return fields
