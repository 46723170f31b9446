"""Tests for field-level validation of ad set input."""

import pytest

from adset_engine.services.adsets.schemas import (
    AdSetFlow,
    AdSetParams,
    BudgetType,
    CampaignObjective,
    ConversionLocation,
    Err,
    FieldErrorKind,
    Ok,
    OptimizationGoal,
    PerformanceGoal,
)
from adset_engine.services.adsets.validator import (
    normalize_account_id,
    validate_adset_params,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _params(**overrides) -> AdSetParams:
    defaults = {
        "account_id": "act_123456",
        "campaign_id": "120200000000000",
        "page_id": "100000000000001",
        "daily_budget": 500,
    }
    defaults.update(overrides)
    return AdSetParams(**defaults)


def _errors(result):
    assert isinstance(result, Err), result
    return {(e.kind, e.field) for e in result.errors}


def _ok(result):
    assert isinstance(result, Ok), getattr(result, "errors", None)
    return result.value


# ---------------------------------------------------------------------------
# Location-driven flows
# ---------------------------------------------------------------------------


def test_leads_defaults_validate():
    validated = _ok(validate_adset_params(_params(), AdSetFlow.LEADS))
    assert validated.objective is CampaignObjective.LEADS
    assert validated.conversion_location is ConversionLocation.INSTANT_FORMS
    assert validated.performance_goal is PerformanceGoal.MAXIMIZE_LEADS
    assert validated.budget_type is BudgetType.DAILY
    assert validated.params.account_id == "123456"
    assert validated.params.custom_event_type == "LEAD"


def test_website_leads_require_pixel():
    result = validate_adset_params(
        _params(conversion_location="website", performance_goal="cost_per_lead"),
        AdSetFlow.LEADS,
    )
    assert _errors(result) == {(FieldErrorKind.MISSING_CONDITIONAL_FIELD, "pixel_id")}


def test_custom_targeting_requires_audience():
    result = validate_adset_params(_params(detailed_targeting="custom"), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.MISSING_CUSTOM_AUDIENCE, "custom_audience_id")}


def test_goal_not_offered_at_location():
    result = validate_adset_params(
        _params(conversion_location="messenger", performance_goal="maximize_leads"),
        AdSetFlow.LEADS,
    )
    assert _errors(result) == {(FieldErrorKind.INCOMPATIBLE_GOAL, "performance_goal")}
    assert 'for conversion location "messenger"' in result.errors[0].message


def test_unknown_performance_goal():
    result = validate_adset_params(_params(performance_goal="go_viral"), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.INVALID_ENUM_VALUE, "performance_goal")}


def test_missing_identifiers_stop_validation():
    result = validate_adset_params(
        AdSetParams(gender="robot", status="LIVE"), AdSetFlow.SALES
    )
    assert _errors(result) == {
        (FieldErrorKind.MISSING_REQUIRED_PARAMETER, "account_id"),
        (FieldErrorKind.MISSING_REQUIRED_PARAMETER, "campaign_id"),
        (FieldErrorKind.MISSING_REQUIRED_PARAMETER, "page_id"),
    }


def test_blank_identifier_counts_as_missing():
    result = validate_adset_params(_params(campaign_id="   "), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.MISSING_REQUIRED_PARAMETER, "campaign_id")}


def test_unknown_conversion_location_is_structural():
    result = validate_adset_params(
        _params(conversion_location="billboard", gender="robot"), AdSetFlow.ENGAGEMENT
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_ENUM_VALUE, "conversion_location")}


def test_location_from_another_flow_is_rejected():
    result = validate_adset_params(
        _params(conversion_location="website_and_store"), AdSetFlow.LEADS
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_ENUM_VALUE, "conversion_location")}


def test_app_promotion_requires_application_id():
    result = validate_adset_params(_params(page_id=None), AdSetFlow.APP_PROMOTION)
    assert _errors(result) == {(FieldErrorKind.MISSING_REQUIRED_PARAMETER, "application_id")}


def test_sales_defaults_to_purchase_event():
    validated = _ok(validate_adset_params(_params(pixel_id="998877"), AdSetFlow.SALES))
    assert validated.params.custom_event_type == "PURCHASE"


def test_explicit_null_event_is_kept():
    validated = _ok(
        validate_adset_params(_params(pixel_id="998877", custom_event_type=None), AdSetFlow.SALES)
    )
    assert validated.params.custom_event_type is None


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------


def test_daily_budget_required():
    result = validate_adset_params(_params(daily_budget=None), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "daily_budget")}


def test_zero_daily_budget_rejected():
    result = validate_adset_params(_params(daily_budget=0), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "daily_budget")}


def test_lifetime_budget_requires_schedule():
    result = validate_adset_params(
        _params(budget_type="lifetime_budget", daily_budget=None, lifetime_budget=10000),
        AdSetFlow.LEADS,
    )
    assert _errors(result) == {
        (FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "start_time"),
        (FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "end_time"),
    }


def test_lifetime_budget_rejects_unparseable_times():
    result = validate_adset_params(
        _params(
            budget_type="lifetime_budget",
            lifetime_budget=10000,
            start_time="tomorrow",
            end_time="2025-04-01T00:00:00Z",
        ),
        AdSetFlow.LEADS,
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "start_time")}


def test_lifetime_budget_validates():
    validated = _ok(
        validate_adset_params(
            _params(
                budget_type="lifetime_budget",
                daily_budget=None,
                lifetime_budget=10000,
                start_time="2025-03-01T00:00:00Z",
                end_time="2025-04-01T00:00:00Z",
            ),
            AdSetFlow.LEADS,
        )
    )
    assert validated.budget_type is BudgetType.LIFETIME


def test_unknown_budget_type():
    result = validate_adset_params(_params(budget_type="weekly_budget"), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "budget_type")}


@pytest.mark.parametrize("amount", [float("inf"), float("nan"), "Infinity", 1e307])
def test_non_finite_daily_budget_rejected(amount):
    result = validate_adset_params(_params(daily_budget=amount), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "daily_budget")}


def test_non_finite_lifetime_budget_rejected():
    result = validate_adset_params(
        _params(
            budget_type="lifetime_budget",
            daily_budget=None,
            lifetime_budget=float("inf"),
            start_time="2025-03-01T00:00:00Z",
            end_time="2025-04-01T00:00:00Z",
        ),
        AdSetFlow.LEADS,
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "lifetime_budget")}


def test_non_finite_bids_rejected():
    result = validate_adset_params(
        _params(bid_amount=float("nan"), cost_per_result_goal=float("-inf")),
        AdSetFlow.LEADS,
    )
    assert _errors(result) == {
        (FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "bid_amount"),
        (FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "cost_per_result_goal"),
    }


def test_non_positive_bids_are_accepted_and_ignored():
    _ok(validate_adset_params(_params(bid_amount=0, cost_per_result_goal=-5), AdSetFlow.LEADS))


# Minimal identifiers each flow needs to pass the structural checks.
FLOW_FIELDS = {
    AdSetFlow.AWARENESS: {},
    AdSetFlow.LEADS: {},
    AdSetFlow.SALES: {"pixel_id": "998877"},
    AdSetFlow.ENGAGEMENT: {},
    AdSetFlow.APP_PROMOTION: {
        "page_id": None,
        "application_id": "555",
        "object_store_url": "https://play.google.com/store/apps/details?id=ph.example",
    },
    AdSetFlow.OBJECTIVE: {"campaign_objective": "OUTCOME_TRAFFIC"},
}


@pytest.mark.parametrize("flow", list(AdSetFlow))
def test_zero_lifetime_budget_rejected_in_every_flow(flow):
    result = validate_adset_params(
        _params(
            budget_type="lifetime_budget",
            daily_budget=None,
            lifetime_budget=0,
            start_time="2025-03-01T00:00:00Z",
            end_time="2025-04-01T00:00:00Z",
            **FLOW_FIELDS[flow],
        ),
        flow,
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "lifetime_budget")}


@pytest.mark.parametrize("flow", list(AdSetFlow))
def test_lifetime_budget_requires_end_time_in_every_flow(flow):
    result = validate_adset_params(
        _params(
            budget_type="lifetime_budget",
            daily_budget=None,
            lifetime_budget=10000,
            start_time="2025-03-01T00:00:00Z",
            **FLOW_FIELDS[flow],
        ),
        flow,
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "end_time")}


# ---------------------------------------------------------------------------
# Audience and enums
# ---------------------------------------------------------------------------


def test_age_min_above_age_max():
    result = validate_adset_params(_params(age_min=40, age_max=30), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.INVALID_AGE_RANGE, "age_min")}


def test_out_of_range_ages_are_not_compared():
    _ok(validate_adset_params(_params(age_min=70, age_max=30), AdSetFlow.LEADS))


@pytest.mark.parametrize("target_frequency", [0, -1])
def test_target_frequency_below_one_rejected(target_frequency):
    result = validate_adset_params(
        _params(target_frequency=target_frequency), AdSetFlow.AWARENESS
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_FREQUENCY_CAP, "target_frequency")}


def test_target_frequency_of_one_validates():
    validated = _ok(validate_adset_params(_params(target_frequency=1), AdSetFlow.AWARENESS))
    assert validated.params.target_frequency == 1


def test_rule_families_are_reported_together():
    result = validate_adset_params(
        _params(gender="robot", status="LIVE", bid_strategy="HIGHEST", daily_budget=None),
        AdSetFlow.LEADS,
    )
    assert _errors(result) == {
        (FieldErrorKind.INVALID_ENUM_VALUE, "gender"),
        (FieldErrorKind.INVALID_ENUM_VALUE, "status"),
        (FieldErrorKind.INVALID_ENUM_VALUE, "bid_strategy"),
        (FieldErrorKind.INVALID_BUDGET_CONFIGURATION, "daily_budget"),
    }


def test_unknown_detailed_targeting():
    result = validate_adset_params(_params(detailed_targeting="lookalike"), AdSetFlow.LEADS)
    assert _errors(result) == {(FieldErrorKind.INVALID_ENUM_VALUE, "detailed_targeting")}


# ---------------------------------------------------------------------------
# Awareness and generic objective mode
# ---------------------------------------------------------------------------


def test_awareness_defaults_to_reach():
    validated = _ok(validate_adset_params(_params(), AdSetFlow.AWARENESS))
    assert validated.optimization_goal is OptimizationGoal.REACH
    assert validated.location_config is None


def test_awareness_rejects_foreign_optimization_goal():
    result = validate_adset_params(
        _params(optimization_goal="LINK_CLICKS"), AdSetFlow.AWARENESS
    )
    assert _errors(result) == {(FieldErrorKind.INCOMPATIBLE_GOAL, "optimization_goal")}


def test_generic_mode_requires_objective():
    result = validate_adset_params(_params(), AdSetFlow.OBJECTIVE)
    assert _errors(result) == {
        (FieldErrorKind.MISSING_REQUIRED_PARAMETER, "campaign_objective")
    }


def test_generic_mode_rejects_unknown_objective():
    result = validate_adset_params(
        _params(campaign_objective="OUTCOME_FAME"), AdSetFlow.OBJECTIVE
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_ENUM_VALUE, "campaign_objective")}


def test_generic_sales_requires_pixel():
    result = validate_adset_params(
        _params(campaign_objective="OUTCOME_SALES"), AdSetFlow.OBJECTIVE
    )
    assert _errors(result) == {(FieldErrorKind.MISSING_CONDITIONAL_FIELD, "pixel_id")}


def test_generic_app_promotion_requires_store_url():
    result = validate_adset_params(
        _params(campaign_objective="OUTCOME_APP_PROMOTION", application_id="555"),
        AdSetFlow.OBJECTIVE,
    )
    assert _errors(result) == {(FieldErrorKind.MISSING_CONDITIONAL_FIELD, "object_store_url")}


def test_generic_destination_must_suit_objective():
    result = validate_adset_params(
        _params(campaign_objective="OUTCOME_TRAFFIC", destination_type="ON_VIDEO"),
        AdSetFlow.OBJECTIVE,
    )
    assert _errors(result) == {(FieldErrorKind.INVALID_ENUM_VALUE, "destination_type")}


def test_generic_traffic_validates():
    validated = _ok(
        validate_adset_params(
            _params(
                campaign_objective="OUTCOME_TRAFFIC",
                optimization_goal="LANDING_PAGE_VIEWS",
                destination_type="WEBSITE",
            ),
            AdSetFlow.OBJECTIVE,
        )
    )
    assert validated.objective is CampaignObjective.TRAFFIC
    assert validated.optimization_goal is OptimizationGoal.LANDING_PAGE_VIEWS
    assert validated.destination_type.value == "WEBSITE"


@pytest.mark.parametrize(
    "raw,expected",
    [("act_123", "123"), ("  456 ", "456"), ("act_", None), (None, None)],
)
def test_normalize_account_id(raw, expected):
    assert normalize_account_id(raw) == expected
