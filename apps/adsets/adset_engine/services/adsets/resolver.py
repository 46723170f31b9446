"""Performance goal -> platform optimization goal.

Resolution order:

1. Conversation and call goals are objective independent.
2. Lead goals depend on where the lead is captured.
3. Sales conversion goals optimize for app events when an app is involved.
4. Otherwise the static per-goal default from the registry.
5. Otherwise ``LEAD_GENERATION``.

Steps 4 and 5 never reject input.  An unmatched combination quietly
resolves to a default; callers that need strictness validate the pair
against the location table first (the validator does).
"""

from __future__ import annotations

import logging

from adset_engine.services.adsets.registry import (
    CALL_GOALS,
    CONVERSATION_GOALS,
    CONVERSION_GOALS,
    LEAD_GOALS,
    PERFORMANCE_GOAL_DEFAULTS,
)
from adset_engine.services.adsets.schemas import (
    CampaignObjective,
    ConversionLocation,
    OptimizationGoal,
    PerformanceGoal,
)

logger = logging.getLogger(__name__)

FALLBACK_OPTIMIZATION_GOAL = OptimizationGoal.LEAD_GENERATION

_LEAD_LOCATION_GOALS: dict[ConversionLocation, OptimizationGoal] = {
    ConversionLocation.INSTANT_FORMS: OptimizationGoal.LEAD_GENERATION,
    ConversionLocation.INSTANT_FORMS_AND_MESSENGER: OptimizationGoal.LEAD_GENERATION,
    ConversionLocation.WEBSITE: OptimizationGoal.OFFSITE_CONVERSIONS,
    ConversionLocation.WEBSITE_AND_CALLS: OptimizationGoal.OFFSITE_CONVERSIONS,
    ConversionLocation.WEBSITE_AND_INSTANT_FORMS: OptimizationGoal.OFFSITE_CONVERSIONS,
    ConversionLocation.APP: OptimizationGoal.CONVERSIONS,
    ConversionLocation.MESSENGER: OptimizationGoal.CONVERSATIONS,
    ConversionLocation.INSTAGRAM: OptimizationGoal.CONVERSATIONS,
}

_APP_SIDE_LOCATIONS = frozenset({ConversionLocation.APP, ConversionLocation.WEBSITE_AND_APP})


def resolve_optimization_goal(
    objective: CampaignObjective | None,
    conversion_location: ConversionLocation | None,
    performance_goal: PerformanceGoal,
) -> OptimizationGoal:
    if performance_goal in CONVERSATION_GOALS:
        return OptimizationGoal.CONVERSATIONS
    if performance_goal in CALL_GOALS:
        return OptimizationGoal.QUALITY_CALL

    if performance_goal in LEAD_GOALS and conversion_location in _LEAD_LOCATION_GOALS:
        return _LEAD_LOCATION_GOALS[conversion_location]

    if (
        objective is CampaignObjective.SALES
        and performance_goal in CONVERSION_GOALS
        and conversion_location in _APP_SIDE_LOCATIONS
    ):
        return OptimizationGoal.CONVERSIONS

    default = PERFORMANCE_GOAL_DEFAULTS.get(performance_goal)
    if default is not None:
        return default

    logger.debug(
        "No optimization rule for goal=%s location=%s objective=%s; using %s",
        performance_goal,
        conversion_location,
        objective,
        FALLBACK_OPTIMIZATION_GOAL.value,
    )
    return FALLBACK_OPTIMIZATION_GOAL
