"""Turn a validated ad set description into the platform request body.

Pure: no I/O, and the only clock read is for default names (``now`` can
be injected).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from adset_engine.services.adsets.assembler import assemble_payload
from adset_engine.services.adsets.budget import normalize_budget_and_bid
from adset_engine.services.adsets.frequency import (
    build_frequency_control,
    normalize_frequency_specs,
)
from adset_engine.services.adsets.promoted_object import build_promoted_object
from adset_engine.services.adsets.resolver import resolve_optimization_goal
from adset_engine.services.adsets.schemas import (
    AdSetFlow,
    BillingEvent,
    CampaignObjective,
    DestinationType,
    OptimizationGoal,
)
from adset_engine.services.adsets.targeting import build_targeting, clean_targeting
from adset_engine.services.adsets.validator import ValidatedAdSet

logger = logging.getLogger(__name__)

# Fixed flows always bill on impressions.
FIXED_FLOW_BILLING_EVENT = BillingEvent.IMPRESSIONS

GENERIC_SALES_EVENT = "PURCHASE"


# ---------------------------------------------------------------------------
# Field resolution
# ---------------------------------------------------------------------------


def _optimization_goal(validated: ValidatedAdSet) -> OptimizationGoal:
    if validated.performance_goal is not None:
        return resolve_optimization_goal(
            validated.objective,
            validated.conversion_location,
            validated.performance_goal,
        )
    return validated.optimization_goal


def default_name(
    validated: ValidatedAdSet, optimization_goal: OptimizationGoal, now: datetime
) -> str:
    today = now.date().isoformat()
    if validated.flow is AdSetFlow.OBJECTIVE:
        stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
        return f"Ad Set {optimization_goal.value} {stamp.replace('+00:00', 'Z')}"
    if validated.flow is AdSetFlow.AWARENESS:
        return f"Awareness {optimization_goal.value} {today}"
    return (
        f"{validated.flow_config.label} {validated.conversion_location.value} "
        f"{validated.performance_goal.value} {today}"
    )


def _billing_event(validated: ValidatedAdSet, optimization_goal: OptimizationGoal) -> str:
    if validated.flow is not AdSetFlow.OBJECTIVE:
        return FIXED_FLOW_BILLING_EVENT.value

    config = validated.objective_config
    billing_event = validated.params.billing_event or config.billing_event.value
    if billing_event not in {e.value for e in config.valid_billing_events}:
        logger.warning(
            "billing_event %s may not be optimal for %s; recommended: %s",
            billing_event,
            config.objective.value,
            ", ".join(sorted(e.value for e in config.valid_billing_events)),
        )
    if (
        config.objective is CampaignObjective.APP_PROMOTION
        and optimization_goal is OptimizationGoal.APP_INSTALLS
    ):
        billing_event = BillingEvent.APP_INSTALLS.value
    return billing_event


def _destination_type(
    validated: ValidatedAdSet, optimization_goal: OptimizationGoal
) -> DestinationType | None:
    if validated.location_config is not None:
        return validated.location_config.destination_type
    if validated.flow is not AdSetFlow.OBJECTIVE:
        return None
    if validated.destination_type is not None:
        return validated.destination_type
    if (
        validated.objective is CampaignObjective.LEADS
        and optimization_goal is OptimizationGoal.LEAD_GENERATION
    ):
        # instant forms
        return DestinationType.ON_AD
    return None


def _targeting(validated: ValidatedAdSet) -> dict[str, Any]:
    p = validated.params
    if validated.location_config is None and p.targeting:
        cleaned = clean_targeting(p.targeting)
        if cleaned:
            return cleaned
    return build_targeting(
        p.location,
        p.age_min,
        p.age_max,
        p.gender,
        p.detailed_targeting,
        p.custom_audience_id,
    )


def _promoted_object(validated: ValidatedAdSet) -> dict[str, str]:
    p = validated.params
    if validated.flow is AdSetFlow.AWARENESS:
        return build_promoted_object(page_id=p.page_id)

    custom_event_type = p.custom_event_type
    if (
        validated.flow is AdSetFlow.OBJECTIVE
        and validated.objective is CampaignObjective.SALES
        and not custom_event_type
    ):
        custom_event_type = GENERIC_SALES_EVENT

    object_store_url = None
    if validated.objective is CampaignObjective.APP_PROMOTION:
        object_store_url = p.object_store_url

    return build_promoted_object(
        page_id=p.page_id,
        pixel_id=p.pixel_id,
        application_id=p.application_id,
        custom_event_type=custom_event_type,
        object_store_url=object_store_url,
    )


def _frequency_control(validated: ValidatedAdSet) -> list[dict[str, Any]] | None:
    p = validated.params
    if validated.flow is AdSetFlow.AWARENESS:
        return build_frequency_control(p.frequency_cap, p.target_frequency)
    if validated.flow is AdSetFlow.OBJECTIVE:
        specs = normalize_frequency_specs(p.frequency_control_specs)
        default = validated.objective_config.default_frequency_control
        if specs is None and default is not None:
            specs = [default.as_dict()]
        return specs
    return None


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_adset_request(
    validated: ValidatedAdSet,
    *,
    cbo_enabled: bool,
    now: datetime | None = None,
) -> dict[str, str]:
    """Form-encodable body for ``POST /act_{account_id}/adsets``."""
    now = now or datetime.now(timezone.utc)
    p = validated.params
    optimization_goal = _optimization_goal(validated)

    draft: dict[str, Any] = {
        "name": p.name or default_name(validated, optimization_goal, now),
        "campaign_id": p.campaign_id,
        "optimization_goal": optimization_goal,
        "billing_event": _billing_event(validated, optimization_goal),
        "status": validated.status,
        "destination_type": _destination_type(validated, optimization_goal),
    }

    budget_and_bid = normalize_budget_and_bid(
        validated.budget_type,
        p.daily_budget,
        p.lifetime_budget,
        p.start_time,
        p.end_time,
        cbo_enabled,
        validated.bid_strategy.value,
        p.bid_amount,
        p.cost_per_result_goal,
    )

    promoted_object = _promoted_object(validated)
    extras: dict[str, Any] = {
        "targeting": _targeting(validated),
        "promoted_object": promoted_object or None,
        "frequency_control_specs": _frequency_control(validated),
        "is_dynamic_creative": True if p.dynamic_creative else None,
        "attribution_spec": p.attribution_spec or None,
        "dsa_payor": p.dsa_payor,
        "dsa_beneficiary": p.dsa_beneficiary,
    }

    return assemble_payload(draft, budget_and_bid, extras)
