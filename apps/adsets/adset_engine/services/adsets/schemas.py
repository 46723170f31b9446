from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Platform vocabularies
# ---------------------------------------------------------------------------


class CampaignObjective(str, enum.Enum):
    AWARENESS = "OUTCOME_AWARENESS"
    TRAFFIC = "OUTCOME_TRAFFIC"
    ENGAGEMENT = "OUTCOME_ENGAGEMENT"
    LEADS = "OUTCOME_LEADS"
    APP_PROMOTION = "OUTCOME_APP_PROMOTION"
    SALES = "OUTCOME_SALES"


class AdSetFlow(str, enum.Enum):
    AWARENESS = "awareness"
    LEADS = "leads"
    SALES = "sales"
    ENGAGEMENT = "engagement"
    APP_PROMOTION = "app_promotion"
    OBJECTIVE = "objective"


class ConversionLocation(str, enum.Enum):
    WEBSITE = "website"
    WEBSITE_AND_INSTANT_FORMS = "website_and_instant_forms"
    WEBSITE_AND_CALLS = "website_and_calls"
    WEBSITE_AND_APP = "website_and_app"
    WEBSITE_AND_STORE = "website_and_store"
    INSTANT_FORMS = "instant_forms"
    INSTANT_FORMS_AND_MESSENGER = "instant_forms_and_messenger"
    MESSENGER = "messenger"
    MESSAGE_DESTINATIONS = "message_destinations"
    INSTAGRAM = "instagram"
    INSTAGRAM_OR_FACEBOOK = "instagram_or_facebook"
    ON_YOUR_AD = "on_your_ad"
    CALLS = "calls"
    APP = "app"
    APP_AND_WEBSITE = "app_and_website"


class PerformanceGoal(str, enum.Enum):
    # leads
    MAXIMIZE_LEADS = "maximize_leads"
    COST_PER_LEAD = "cost_per_lead"
    # messaging
    MAXIMIZE_CONVERSATIONS = "maximize_conversations"
    COST_PER_CONVERSATION = "cost_per_conversation"
    # calls
    MAXIMIZE_CALLS = "maximize_calls"
    COST_PER_CALL = "cost_per_call"
    # sales
    MAXIMIZE_CONVERSIONS = "maximize_conversions"
    MAXIMIZE_CONVERSION_VALUE = "maximize_conversion_value"
    COST_PER_CONVERSION = "cost_per_conversion"
    # engagement
    POST_ENGAGEMENT = "post_engagement"
    VIDEO_VIEWS = "video_views"
    THRUPLAY = "thruplay"
    TWO_SECOND_CONTINUOUS_VIDEO_VIEWS = "two_second_continuous_video_views"
    LINK_CLICKS = "link_clicks"
    LANDING_PAGE_VIEWS = "landing_page_views"
    # app promotion
    APP_INSTALLS = "app_installs"
    IN_APP_EVENTS = "in_app_events"
    VALUE = "value"
    IMPRESSIONS = "impressions"
    REACH = "reach"
    DAILY_UNIQUE_REACH = "daily_unique_reach"


class OptimizationGoal(str, enum.Enum):
    LEAD_GENERATION = "LEAD_GENERATION"
    QUALITY_LEAD = "QUALITY_LEAD"
    OFFSITE_CONVERSIONS = "OFFSITE_CONVERSIONS"
    CONVERSIONS = "CONVERSIONS"
    VALUE = "VALUE"
    CONVERSATIONS = "CONVERSATIONS"
    QUALITY_CALL = "QUALITY_CALL"
    POST_ENGAGEMENT = "POST_ENGAGEMENT"
    PAGE_LIKES = "PAGE_LIKES"
    EVENT_RESPONSES = "EVENT_RESPONSES"
    THRUPLAY = "THRUPLAY"
    TWO_SECOND_CONTINUOUS_VIDEO_VIEWS = "TWO_SECOND_CONTINUOUS_VIDEO_VIEWS"
    LINK_CLICKS = "LINK_CLICKS"
    LANDING_PAGE_VIEWS = "LANDING_PAGE_VIEWS"
    APP_INSTALLS = "APP_INSTALLS"
    APP_INSTALLS_AND_OFFSITE_CONVERSIONS = "APP_INSTALLS_AND_OFFSITE_CONVERSIONS"
    IMPRESSIONS = "IMPRESSIONS"
    REACH = "REACH"
    AD_RECALL_LIFT = "AD_RECALL_LIFT"


class BillingEvent(str, enum.Enum):
    IMPRESSIONS = "IMPRESSIONS"
    LINK_CLICKS = "LINK_CLICKS"
    POST_ENGAGEMENT = "POST_ENGAGEMENT"
    PAGE_LIKES = "PAGE_LIKES"
    APP_INSTALLS = "APP_INSTALLS"
    PURCHASE = "PURCHASE"


class DestinationType(str, enum.Enum):
    WEBSITE = "WEBSITE"
    APP = "APP"
    MESSENGER = "MESSENGER"
    WHATSAPP = "WHATSAPP"
    INSTAGRAM_DIRECT = "INSTAGRAM_DIRECT"
    ON_AD = "ON_AD"
    ON_POST = "ON_POST"
    ON_PAGE = "ON_PAGE"
    ON_EVENT = "ON_EVENT"
    ON_VIDEO = "ON_VIDEO"
    SHOP_AUTOMATIC = "SHOP_AUTOMATIC"


class BudgetType(str, enum.Enum):
    DAILY = "daily_budget"
    LIFETIME = "lifetime_budget"


class Gender(str, enum.Enum):
    ALL = "all"
    MALE = "male"
    FEMALE = "female"


class DetailedTargeting(str, enum.Enum):
    ALL = "all"
    CUSTOM = "custom"


class AdSetStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


class BidStrategy(str, enum.Enum):
    LOWEST_COST_WITHOUT_CAP = "LOWEST_COST_WITHOUT_CAP"
    LOWEST_COST_WITH_BID_CAP = "LOWEST_COST_WITH_BID_CAP"
    COST_CAP = "COST_CAP"
    LOWEST_COST_WITH_MIN_ROAS = "LOWEST_COST_WITH_MIN_ROAS"


# ---------------------------------------------------------------------------
# Validation results
# ---------------------------------------------------------------------------


class FieldErrorKind(str, enum.Enum):
    MISSING_REQUIRED_PARAMETER = "MissingRequiredParameter"
    INVALID_ENUM_VALUE = "InvalidEnumValue"
    INCOMPATIBLE_GOAL = "IncompatibleGoal"
    MISSING_CONDITIONAL_FIELD = "MissingConditionalField"
    INVALID_BUDGET_CONFIGURATION = "InvalidBudgetConfiguration"
    MISSING_CUSTOM_AUDIENCE = "MissingCustomAudience"
    INVALID_AGE_RANGE = "InvalidAgeRange"
    INVALID_FREQUENCY_CAP = "InvalidFrequencyCap"


class FieldError(BaseModel):
    kind: FieldErrorKind
    field: str
    message: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    errors: list[FieldError]


# ---------------------------------------------------------------------------
# Caller input / boundary output
# ---------------------------------------------------------------------------


class AdSetParams(BaseModel):
    """Caller-supplied ad set description.

    Enum-like fields are plain strings so an unknown value surfaces as an
    ``InvalidEnumValue`` field error instead of a request-parsing failure.
    Money amounts are in major currency units (pesos).
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    # Basics
    account_id: str | None = None
    campaign_id: str | None = None
    name: str | None = None
    campaign_objective: str | None = None
    conversion_location: str | None = None
    performance_goal: str | None = None
    optimization_goal: str | None = None
    billing_event: str | None = None
    destination_type: str | None = None
    status: str = "ACTIVE"

    # Promoted object
    page_id: str | None = None
    pixel_id: str | None = None
    application_id: str | None = None
    object_store_url: str | None = None
    custom_event_type: str | None = None

    # Cost & bidding
    bid_strategy: str = "LOWEST_COST_WITHOUT_CAP"
    bid_amount: float | None = None
    cost_per_result_goal: float | None = None

    # Budget & schedule
    budget_type: str = "daily_budget"
    daily_budget: float | None = None
    lifetime_budget: float | None = None
    start_time: str | None = None
    end_time: str | None = None

    # Audience
    location: str = "PH"
    age_min: int | None = 18
    age_max: int | None = 65
    gender: str = "all"
    detailed_targeting: str = "all"
    custom_audience_id: str | None = None
    targeting: dict[str, Any] | None = None

    # Delivery extras
    frequency_cap: str | None = None
    target_frequency: int | None = None
    frequency_control_specs: list[dict[str, Any]] | dict[str, Any] | None = None
    dynamic_creative: bool = False
    attribution_spec: list[dict[str, Any]] | None = None
    dsa_payor: str | None = None
    dsa_beneficiary: str | None = None


class AdSetResult(BaseModel):
    """Outcome of one ad set construction or submission.

    Every code path in ``AdSetService`` resolves to one of these; callers
    branch on ``success`` and ``error_type`` rather than on exceptions.
    """

    success: bool
    flow: AdSetFlow
    campaign_type: str | None = None
    adset_id: str | None = None
    error: str | None = None
    error_type: str | None = None  # validation_error | credential_error | platform_error | network_error | unexpected_error
    details: Any = None
    hint: str | None = None
    validation_errors: list[FieldError] = Field(default_factory=list)
    payload: dict[str, str] = Field(default_factory=dict)
    configuration: dict[str, Any] = Field(default_factory=dict)
    raw_response: dict[str, Any] = Field(default_factory=dict)


class FlowOut(BaseModel):
    """What a client needs to render the inputs for one flow."""

    flow: AdSetFlow
    label: str
    campaign_objective: CampaignObjective | None = None
    required_identifiers: list[str]
    default_conversion_location: ConversionLocation | None = None
    default_performance_goal: PerformanceGoal | None = None
    conversion_locations: dict[str, list[str]] = Field(default_factory=dict)
    valid_optimization_goals: list[str] = Field(default_factory=list)
