"""Field-level validation of caller input against the registry.

``validate_adset_params`` never raises for bad input.  It returns
``Ok(ValidatedAdSet)`` or ``Err([FieldError, ...])``:

* Structural problems (missing identifiers, unknown objective or
  conversion location) stop validation immediately, since the remaining
  rules depend on them.
* Every other rule family is checked and all failures are reported
  together.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import TypeVar

from adset_engine.services.adsets.budget import parse_timestamp
from adset_engine.services.adsets.registry import (
    ConversionLocationConfig,
    FlowConfig,
    ObjectiveConfig,
    get_flow_config,
    get_objective_config,
)
from adset_engine.services.adsets.schemas import (
    AdSetFlow,
    AdSetParams,
    AdSetStatus,
    BidStrategy,
    BudgetType,
    CampaignObjective,
    ConversionLocation,
    DestinationType,
    DetailedTargeting,
    Err,
    FieldError,
    FieldErrorKind,
    Gender,
    Ok,
    OptimizationGoal,
    PerformanceGoal,
)
from adset_engine.services.adsets.targeting import MAX_AGE, MIN_AGE

E = TypeVar("E", bound=enum.Enum)


@dataclass(frozen=True)
class ValidatedAdSet:
    """Caller params with flow defaults applied, plus the resolved registry entries."""

    flow: AdSetFlow
    params: AdSetParams
    flow_config: FlowConfig
    objective: CampaignObjective
    objective_config: ObjectiveConfig
    budget_type: BudgetType
    bid_strategy: BidStrategy
    status: AdSetStatus
    conversion_location: ConversionLocation | None = None
    location_config: ConversionLocationConfig | None = None
    performance_goal: PerformanceGoal | None = None
    optimization_goal: OptimizationGoal | None = None
    destination_type: DestinationType | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(kind: FieldErrorKind, field: str, message: str) -> FieldError:
    return FieldError(kind=kind, field=field, message=message)


def _coerce(enum_cls: type[E], value: str | None) -> E | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _options(values) -> str:
    return ", ".join(v.value if isinstance(v, enum.Enum) else str(v) for v in values)


def _present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def normalize_account_id(account_id: str | None) -> str | None:
    """Strip whitespace and the ``act_`` prefix the platform adds to account ids."""
    if account_id is None:
        return None
    account_id = account_id.strip()
    if account_id.startswith("act_"):
        account_id = account_id[len("act_"):]
    return account_id or None


def apply_flow_defaults(params: AdSetParams, flow_config: FlowConfig) -> AdSetParams:
    """Fill in the flow's default location, goal and conversion event.

    ``custom_event_type`` is only defaulted when the caller did not send the
    field at all; an explicit null keeps the promoted object event-free.
    """
    update: dict[str, object] = {"account_id": normalize_account_id(params.account_id)}
    if params.conversion_location is None and flow_config.default_conversion_location:
        update["conversion_location"] = flow_config.default_conversion_location.value
    if params.performance_goal is None and flow_config.default_performance_goal:
        update["performance_goal"] = flow_config.default_performance_goal.value
    if (
        "custom_event_type" not in params.model_fields_set
        and flow_config.default_custom_event_type
    ):
        update["custom_event_type"] = flow_config.default_custom_event_type
    return params.model_copy(update=update)


# ---------------------------------------------------------------------------
# Rule families
# ---------------------------------------------------------------------------


def _positive_amount(amount: float | None) -> bool:
    return amount is not None and math.isfinite(amount * 100) and amount > 0


def _check_bids(params: AdSetParams) -> list[FieldError]:
    # unset or non-positive bids are ignored downstream, non-finite ones cannot be sent
    return [
        _error(
            FieldErrorKind.INVALID_BUDGET_CONFIGURATION,
            name,
            f"{name} must be a finite amount",
        )
        for name in ("bid_amount", "cost_per_result_goal")
        if getattr(params, name) is not None and not math.isfinite(getattr(params, name) * 100)
    ]


def _check_budget(params: AdSetParams) -> tuple[BudgetType | None, list[FieldError]]:
    kind = FieldErrorKind.INVALID_BUDGET_CONFIGURATION
    budget_type = _coerce(BudgetType, params.budget_type)
    if budget_type is None:
        return None, [
            _error(kind, "budget_type", 'budget_type must be either "daily_budget" or "lifetime_budget"')
        ]

    errors: list[FieldError] = []
    if budget_type is BudgetType.DAILY:
        if not _positive_amount(params.daily_budget):
            errors.append(
                _error(
                    kind,
                    "daily_budget",
                    'daily_budget is required when budget_type is "daily_budget" '
                    "and must be a finite amount greater than 0",
                )
            )
        return budget_type, errors

    if not _positive_amount(params.lifetime_budget):
        errors.append(
            _error(
                kind,
                "lifetime_budget",
                'lifetime_budget is required when budget_type is "lifetime_budget" '
                "and must be a finite amount greater than 0",
            )
        )
    for name in ("start_time", "end_time"):
        value = getattr(params, name)
        if not _present(value):
            errors.append(_error(kind, name, f"{name} is required when using lifetime_budget"))
            continue
        try:
            parse_timestamp(value)
        except ValueError:
            errors.append(_error(kind, name, f'{name} "{value}" is not a valid ISO-8601 timestamp'))
    return budget_type, errors


def _check_audience(params: AdSetParams) -> list[FieldError]:
    errors: list[FieldError] = []

    if _coerce(Gender, params.gender) is None:
        errors.append(
            _error(
                FieldErrorKind.INVALID_ENUM_VALUE,
                "gender",
                f'Invalid gender "{params.gender}". Valid options: {_options(Gender)}',
            )
        )

    detailed = _coerce(DetailedTargeting, params.detailed_targeting)
    if detailed is None:
        errors.append(
            _error(
                FieldErrorKind.INVALID_ENUM_VALUE,
                "detailed_targeting",
                f'Invalid detailed_targeting "{params.detailed_targeting}". '
                f"Valid options: {_options(DetailedTargeting)}",
            )
        )
    elif detailed is DetailedTargeting.CUSTOM and not _present(params.custom_audience_id):
        errors.append(
            _error(
                FieldErrorKind.MISSING_CUSTOM_AUDIENCE,
                "custom_audience_id",
                'custom_audience_id is required when detailed_targeting is "custom"',
            )
        )

    age_min, age_max = params.age_min, params.age_max
    if (
        age_min is not None
        and age_max is not None
        and MIN_AGE <= age_min <= MAX_AGE
        and MIN_AGE <= age_max <= MAX_AGE
        and age_min > age_max
    ):
        errors.append(
            _error(
                FieldErrorKind.INVALID_AGE_RANGE,
                "age_min",
                f"age_min ({age_min}) must not exceed age_max ({age_max})",
            )
        )
    return errors


def _check_location_goal(
    params: AdSetParams, location_config: ConversionLocationConfig
) -> tuple[PerformanceGoal | None, list[FieldError]]:
    location = location_config.location.value
    goal = _coerce(PerformanceGoal, params.performance_goal)
    if goal is None:
        return None, [
            _error(
                FieldErrorKind.INVALID_ENUM_VALUE,
                "performance_goal",
                f'Invalid performance_goal "{params.performance_goal}". '
                f"Valid options: {_options(location_config.valid_performance_goals)}",
            )
        ]
    if goal not in location_config.valid_performance_goals:
        return None, [
            _error(
                FieldErrorKind.INCOMPATIBLE_GOAL,
                "performance_goal",
                f'Invalid performance_goal "{goal.value}" for conversion location "{location}". '
                f"Valid options: {_options(location_config.valid_performance_goals)}",
            )
        ]
    return goal, []


def _check_optimization_goal(
    params: AdSetParams, objective_config: ObjectiveConfig
) -> tuple[OptimizationGoal | None, list[FieldError]]:
    requested = params.optimization_goal or objective_config.default_optimization_goal.value
    goal = _coerce(OptimizationGoal, requested)
    if goal is None or goal not in objective_config.valid_optimization_goals:
        valid = sorted(objective_config.valid_optimization_goals, key=lambda g: g.value)
        return None, [
            _error(
                FieldErrorKind.INCOMPATIBLE_GOAL,
                "optimization_goal",
                f'Invalid optimization_goal "{requested}" for {objective_config.objective.value}. '
                f"Valid options: {_options(valid)}",
            )
        ]
    return goal, []


def _check_destination_type(
    params: AdSetParams, objective_config: ObjectiveConfig
) -> tuple[DestinationType | None, list[FieldError]]:
    if not _present(params.destination_type):
        return None, []
    allowed = objective_config.destination_types or frozenset()
    destination = _coerce(DestinationType, params.destination_type)
    if destination is None or destination not in allowed:
        valid = _options(sorted(allowed, key=lambda d: d.value)) or "none"
        return None, [
            _error(
                FieldErrorKind.INVALID_ENUM_VALUE,
                "destination_type",
                f'Invalid destination_type "{params.destination_type}" for '
                f"{objective_config.objective.value}. Valid options: {valid}",
            )
        ]
    return destination, []


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def validate_adset_params(params: AdSetParams, flow: AdSetFlow) -> Ok[ValidatedAdSet] | Err:
    flow_config = get_flow_config(flow)
    params = apply_flow_defaults(params, flow_config)

    # -- structural --------------------------------------------------------
    structural = [
        _error(
            FieldErrorKind.MISSING_REQUIRED_PARAMETER,
            name,
            f"Missing required parameter: {name}",
        )
        for name in flow_config.required_identifiers
        if not _present(getattr(params, name))
    ]

    objective = flow_config.objective
    if objective is None and _present(params.campaign_objective):
        objective = _coerce(CampaignObjective, params.campaign_objective)
        if objective is None:
            structural.append(
                _error(
                    FieldErrorKind.INVALID_ENUM_VALUE,
                    "campaign_objective",
                    f'Unsupported campaign_objective "{params.campaign_objective}". '
                    f"Supported: {_options(CampaignObjective)}",
                )
            )

    location_config: ConversionLocationConfig | None = None
    conversion_location: ConversionLocation | None = None
    if flow_config.uses_locations:
        conversion_location = _coerce(ConversionLocation, params.conversion_location)
        location_config = flow_config.locations.get(conversion_location)
        if location_config is None:
            structural.append(
                _error(
                    FieldErrorKind.INVALID_ENUM_VALUE,
                    "conversion_location",
                    f'Invalid conversion_location "{params.conversion_location}". '
                    f"Valid options: {_options(flow_config.locations)}",
                )
            )

    if structural or objective is None:
        return Err(structural)

    objective_config = get_objective_config(objective)

    # -- collected ---------------------------------------------------------
    errors: list[FieldError] = []
    performance_goal: PerformanceGoal | None = None
    optimization_goal: OptimizationGoal | None = None
    destination_type: DestinationType | None = None

    if location_config is not None:
        performance_goal, goal_errors = _check_location_goal(params, location_config)
        errors.extend(goal_errors)
        for name in location_config.required_fields:
            if not _present(getattr(params, name)):
                errors.append(
                    _error(
                        FieldErrorKind.MISSING_CONDITIONAL_FIELD,
                        name,
                        f'{name} is required for conversion location "{location_config.location.value}"',
                    )
                )
    else:
        optimization_goal, goal_errors = _check_optimization_goal(params, objective_config)
        errors.extend(goal_errors)

    if flow is AdSetFlow.OBJECTIVE:
        for name in sorted(objective_config.required_promoted_object_fields):
            if not _present(getattr(params, name)):
                errors.append(
                    _error(
                        FieldErrorKind.MISSING_CONDITIONAL_FIELD,
                        name,
                        f"{name} is required for {objective.value} ad sets",
                    )
                )
        destination_type, destination_errors = _check_destination_type(params, objective_config)
        errors.extend(destination_errors)

    budget_type, budget_errors = _check_budget(params)
    errors.extend(budget_errors)
    errors.extend(_check_bids(params))

    errors.extend(_check_audience(params))

    if params.target_frequency is not None and params.target_frequency < 1:
        errors.append(
            _error(
                FieldErrorKind.INVALID_FREQUENCY_CAP,
                "target_frequency",
                f"target_frequency ({params.target_frequency}) must be at least 1",
            )
        )

    status = _coerce(AdSetStatus, params.status)
    if status is None:
        errors.append(
            _error(
                FieldErrorKind.INVALID_ENUM_VALUE,
                "status",
                f'Invalid status "{params.status}". Valid options: {_options(AdSetStatus)}',
            )
        )

    bid_strategy = _coerce(BidStrategy, params.bid_strategy)
    if bid_strategy is None:
        errors.append(
            _error(
                FieldErrorKind.INVALID_ENUM_VALUE,
                "bid_strategy",
                f'Invalid bid_strategy "{params.bid_strategy}". Valid options: {_options(BidStrategy)}',
            )
        )

    if errors:
        return Err(errors)

    return Ok(
        ValidatedAdSet(
            flow=flow,
            params=params,
            flow_config=flow_config,
            objective=objective,
            objective_config=objective_config,
            budget_type=budget_type,
            bid_strategy=bid_strategy,
            status=status,
            conversion_location=conversion_location,
            location_config=location_config,
            performance_goal=performance_goal,
            optimization_goal=optimization_goal,
            destination_type=destination_type,
        )
    )
