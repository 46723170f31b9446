"""Static objective, conversion-location and flow tables.

Everything here is built once at import and exposed through read-only
mappings.  The validator, resolver and request builder only ever read
from these tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from adset_engine.services.adsets.schemas import (
    AdSetFlow,
    BillingEvent,
    CampaignObjective,
    ConversionLocation,
    DestinationType,
    OptimizationGoal,
    PerformanceGoal,
)

# ---------------------------------------------------------------------------
# Record types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FrequencyControl:
    event: str
    interval_days: int
    max_frequency: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "interval_days": self.interval_days,
            "max_frequency": self.max_frequency,
        }


@dataclass(frozen=True)
class ObjectiveConfig:
    """Delivery rules that apply to every ad set under one campaign objective."""

    objective: CampaignObjective
    label: str
    default_optimization_goal: OptimizationGoal
    valid_optimization_goals: frozenset[OptimizationGoal]
    billing_event: BillingEvent
    valid_billing_events: frozenset[BillingEvent]
    required_promoted_object_fields: frozenset[str] = frozenset()
    default_frequency_control: FrequencyControl | None = None
    destination_types: frozenset[DestinationType] | None = None


@dataclass(frozen=True)
class ConversionLocationConfig:
    """Rules for one conversion location inside a location-driven flow."""

    location: ConversionLocation
    valid_performance_goals: tuple[PerformanceGoal, ...]
    valid_optimization_goals: frozenset[OptimizationGoal]
    required_fields: tuple[str, ...]
    destination_type: DestinationType | None = None


@dataclass(frozen=True)
class FlowConfig:
    """A fixed ad set flow: its objective, location table and input defaults."""

    flow: AdSetFlow
    label: str
    campaign_type: str
    objective: CampaignObjective | None
    required_identifiers: tuple[str, ...]
    locations: Mapping[ConversionLocation, ConversionLocationConfig] = field(
        default_factory=lambda: MappingProxyType({})
    )
    default_conversion_location: ConversionLocation | None = None
    default_performance_goal: PerformanceGoal | None = None
    default_custom_event_type: str | None = None

    @property
    def uses_locations(self) -> bool:
        return bool(self.locations)


def _freeze(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


def _locations(*configs: ConversionLocationConfig) -> Mapping[ConversionLocation, ConversionLocationConfig]:
    return _freeze({c.location: c for c in configs})


PG = PerformanceGoal
OG = OptimizationGoal
CL = ConversionLocation
DT = DestinationType

LEAD_GOALS = (PG.MAXIMIZE_LEADS, PG.COST_PER_LEAD)
CONVERSATION_GOALS = (PG.MAXIMIZE_CONVERSATIONS, PG.COST_PER_CONVERSATION)
CALL_GOALS = (PG.MAXIMIZE_CALLS, PG.COST_PER_CALL)
CONVERSION_GOALS = (PG.MAXIMIZE_CONVERSIONS, PG.COST_PER_CONVERSION)
ON_AD_ENGAGEMENT_GOALS = (
    PG.POST_ENGAGEMENT,
    PG.VIDEO_VIEWS,
    PG.THRUPLAY,
    PG.TWO_SECOND_CONTINUOUS_VIDEO_VIEWS,
)

# ---------------------------------------------------------------------------
# Objective table (generic objective-driven mode and Awareness)
# ---------------------------------------------------------------------------

OBJECTIVE_CONFIGS: Mapping[CampaignObjective, ObjectiveConfig] = _freeze(
    {
        CampaignObjective.AWARENESS: ObjectiveConfig(
            objective=CampaignObjective.AWARENESS,
            label="Awareness",
            default_optimization_goal=OG.REACH,
            valid_optimization_goals=frozenset({OG.REACH, OG.AD_RECALL_LIFT, OG.IMPRESSIONS}),
            billing_event=BillingEvent.IMPRESSIONS,
            valid_billing_events=frozenset({BillingEvent.IMPRESSIONS}),
            required_promoted_object_fields=frozenset({"page_id"}),
            default_frequency_control=FrequencyControl("IMPRESSIONS", 7, 2),
        ),
        CampaignObjective.TRAFFIC: ObjectiveConfig(
            objective=CampaignObjective.TRAFFIC,
            label="Traffic",
            default_optimization_goal=OG.LINK_CLICKS,
            valid_optimization_goals=frozenset({OG.LINK_CLICKS, OG.LANDING_PAGE_VIEWS, OG.IMPRESSIONS}),
            billing_event=BillingEvent.LINK_CLICKS,
            valid_billing_events=frozenset({BillingEvent.LINK_CLICKS, BillingEvent.IMPRESSIONS}),
            destination_types=frozenset(
                {DT.WEBSITE, DT.APP, DT.MESSENGER, DT.WHATSAPP, DT.INSTAGRAM_DIRECT}
            ),
        ),
        CampaignObjective.ENGAGEMENT: ObjectiveConfig(
            objective=CampaignObjective.ENGAGEMENT,
            label="Engagement",
            default_optimization_goal=OG.POST_ENGAGEMENT,
            valid_optimization_goals=frozenset(
                {
                    OG.POST_ENGAGEMENT,
                    OG.PAGE_LIKES,
                    OG.EVENT_RESPONSES,
                    OG.CONVERSATIONS,
                    OG.THRUPLAY,
                    OG.IMPRESSIONS,
                }
            ),
            billing_event=BillingEvent.IMPRESSIONS,
            valid_billing_events=frozenset(
                {BillingEvent.IMPRESSIONS, BillingEvent.POST_ENGAGEMENT, BillingEvent.PAGE_LIKES}
            ),
            required_promoted_object_fields=frozenset({"page_id"}),
            destination_types=frozenset(
                {
                    DT.ON_POST,
                    DT.ON_PAGE,
                    DT.ON_EVENT,
                    DT.ON_VIDEO,
                    DT.MESSENGER,
                    DT.WHATSAPP,
                    DT.INSTAGRAM_DIRECT,
                }
            ),
        ),
        CampaignObjective.LEADS: ObjectiveConfig(
            objective=CampaignObjective.LEADS,
            label="Leads",
            default_optimization_goal=OG.LEAD_GENERATION,
            valid_optimization_goals=frozenset(
                {OG.LEAD_GENERATION, OG.OFFSITE_CONVERSIONS, OG.QUALITY_LEAD, OG.CONVERSATIONS}
            ),
            billing_event=BillingEvent.IMPRESSIONS,
            valid_billing_events=frozenset({BillingEvent.IMPRESSIONS}),
            required_promoted_object_fields=frozenset({"page_id"}),
            destination_types=frozenset(
                {DT.WEBSITE, DT.MESSENGER, DT.WHATSAPP, DT.INSTAGRAM_DIRECT, DT.ON_AD}
            ),
        ),
        CampaignObjective.APP_PROMOTION: ObjectiveConfig(
            objective=CampaignObjective.APP_PROMOTION,
            label="App Promotion",
            default_optimization_goal=OG.APP_INSTALLS,
            valid_optimization_goals=frozenset(
                {
                    OG.APP_INSTALLS,
                    OG.APP_INSTALLS_AND_OFFSITE_CONVERSIONS,
                    OG.LINK_CLICKS,
                    OG.VALUE,
                    OG.IMPRESSIONS,
                }
            ),
            billing_event=BillingEvent.APP_INSTALLS,
            valid_billing_events=frozenset(
                {BillingEvent.APP_INSTALLS, BillingEvent.LINK_CLICKS, BillingEvent.IMPRESSIONS}
            ),
            required_promoted_object_fields=frozenset({"application_id", "object_store_url"}),
            destination_types=frozenset({DT.APP}),
        ),
        CampaignObjective.SALES: ObjectiveConfig(
            objective=CampaignObjective.SALES,
            label="Sales",
            default_optimization_goal=OG.OFFSITE_CONVERSIONS,
            valid_optimization_goals=frozenset(
                {OG.OFFSITE_CONVERSIONS, OG.CONVERSIONS, OG.VALUE, OG.IMPRESSIONS}
            ),
            billing_event=BillingEvent.IMPRESSIONS,
            valid_billing_events=frozenset({BillingEvent.IMPRESSIONS, BillingEvent.PURCHASE}),
            required_promoted_object_fields=frozenset({"pixel_id"}),
            destination_types=frozenset(
                {DT.WEBSITE, DT.MESSENGER, DT.WHATSAPP, DT.SHOP_AUTOMATIC}
            ),
        ),
    }
)

# ---------------------------------------------------------------------------
# Conversion-location tables
# ---------------------------------------------------------------------------

LEADS_LOCATIONS = _locations(
    ConversionLocationConfig(
        CL.WEBSITE_AND_INSTANT_FORMS,
        LEAD_GOALS,
        frozenset({OG.LEAD_GENERATION, OG.OFFSITE_CONVERSIONS}),
        ("page_id", "pixel_id"),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.WEBSITE,
        LEAD_GOALS,
        frozenset({OG.OFFSITE_CONVERSIONS}),
        ("pixel_id",),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.WEBSITE_AND_CALLS,
        LEAD_GOALS + CALL_GOALS,
        frozenset({OG.OFFSITE_CONVERSIONS, OG.QUALITY_CALL}),
        ("page_id", "pixel_id"),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.INSTANT_FORMS,
        LEAD_GOALS,
        frozenset({OG.LEAD_GENERATION}),
        ("page_id",),
    ),
    ConversionLocationConfig(
        CL.MESSENGER,
        CONVERSATION_GOALS,
        frozenset({OG.CONVERSATIONS}),
        ("page_id",),
        DT.MESSENGER,
    ),
    ConversionLocationConfig(
        CL.INSTANT_FORMS_AND_MESSENGER,
        LEAD_GOALS + CONVERSATION_GOALS,
        frozenset({OG.LEAD_GENERATION, OG.CONVERSATIONS}),
        ("page_id",),
    ),
    ConversionLocationConfig(
        CL.INSTAGRAM,
        CONVERSATION_GOALS,
        frozenset({OG.CONVERSATIONS}),
        ("page_id",),
    ),
    ConversionLocationConfig(
        CL.CALLS,
        CALL_GOALS,
        frozenset({OG.QUALITY_CALL}),
        ("page_id",),
    ),
    ConversionLocationConfig(
        CL.APP,
        LEAD_GOALS,
        frozenset({OG.CONVERSIONS}),
        ("application_id",),
        DT.APP,
    ),
)

SALES_LOCATIONS = _locations(
    ConversionLocationConfig(
        CL.WEBSITE,
        (PG.MAXIMIZE_CONVERSIONS, PG.MAXIMIZE_CONVERSION_VALUE, PG.COST_PER_CONVERSION),
        frozenset({OG.OFFSITE_CONVERSIONS, OG.CONVERSIONS, OG.VALUE}),
        ("pixel_id",),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.APP,
        (PG.MAXIMIZE_CONVERSIONS, PG.MAXIMIZE_CONVERSION_VALUE, PG.COST_PER_CONVERSION),
        frozenset({OG.CONVERSIONS, OG.VALUE}),
        ("application_id",),
        DT.APP,
    ),
    ConversionLocationConfig(
        CL.WEBSITE_AND_APP,
        (PG.MAXIMIZE_CONVERSIONS, PG.MAXIMIZE_CONVERSION_VALUE),
        frozenset({OG.CONVERSIONS, OG.VALUE}),
        ("pixel_id", "application_id"),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.MESSAGE_DESTINATIONS,
        CONVERSATION_GOALS,
        frozenset({OG.CONVERSATIONS, OG.CONVERSIONS}),
        ("page_id",),
        DT.MESSENGER,
    ),
    ConversionLocationConfig(
        CL.CALLS,
        CALL_GOALS,
        frozenset({OG.QUALITY_CALL}),
        ("page_id",),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.WEBSITE_AND_STORE,
        (PG.MAXIMIZE_CONVERSIONS, PG.MAXIMIZE_CONVERSION_VALUE),
        frozenset({OG.OFFSITE_CONVERSIONS, OG.VALUE}),
        ("pixel_id",),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.WEBSITE_AND_CALLS,
        (PG.MAXIMIZE_CONVERSIONS, PG.MAXIMIZE_CALLS),
        frozenset({OG.OFFSITE_CONVERSIONS, OG.QUALITY_CALL}),
        ("pixel_id", "page_id"),
        DT.WEBSITE,
    ),
)

ENGAGEMENT_LOCATIONS = _locations(
    ConversionLocationConfig(
        CL.MESSAGE_DESTINATIONS,
        CONVERSATION_GOALS,
        frozenset({OG.CONVERSATIONS}),
        ("page_id",),
        DT.MESSENGER,
    ),
    ConversionLocationConfig(
        CL.ON_YOUR_AD,
        ON_AD_ENGAGEMENT_GOALS,
        frozenset({OG.POST_ENGAGEMENT, OG.THRUPLAY, OG.TWO_SECOND_CONTINUOUS_VIDEO_VIEWS}),
        ("page_id",),
    ),
    ConversionLocationConfig(
        CL.CALLS,
        CALL_GOALS,
        frozenset({OG.QUALITY_CALL}),
        ("page_id",),
    ),
    ConversionLocationConfig(
        CL.WEBSITE,
        (PG.LINK_CLICKS, PG.LANDING_PAGE_VIEWS, PG.POST_ENGAGEMENT),
        frozenset({OG.LINK_CLICKS, OG.LANDING_PAGE_VIEWS, OG.POST_ENGAGEMENT}),
        (),
        DT.WEBSITE,
    ),
    ConversionLocationConfig(
        CL.APP,
        (PG.POST_ENGAGEMENT, PG.LINK_CLICKS, PG.LANDING_PAGE_VIEWS),
        frozenset({OG.POST_ENGAGEMENT, OG.LINK_CLICKS, OG.LANDING_PAGE_VIEWS}),
        ("application_id",),
        DT.APP,
    ),
    ConversionLocationConfig(
        CL.INSTAGRAM_OR_FACEBOOK,
        ON_AD_ENGAGEMENT_GOALS,
        frozenset({OG.POST_ENGAGEMENT, OG.THRUPLAY, OG.TWO_SECOND_CONTINUOUS_VIDEO_VIEWS}),
        ("page_id",),
    ),
)

APP_PROMOTION_LOCATIONS = _locations(
    ConversionLocationConfig(
        CL.APP,
        (
            PG.APP_INSTALLS,
            PG.IN_APP_EVENTS,
            PG.VALUE,
            PG.LINK_CLICKS,
            PG.LANDING_PAGE_VIEWS,
            PG.IMPRESSIONS,
            PG.REACH,
            PG.DAILY_UNIQUE_REACH,
        ),
        frozenset(
            {
                OG.APP_INSTALLS,
                OG.CONVERSIONS,
                OG.VALUE,
                OG.LINK_CLICKS,
                OG.LANDING_PAGE_VIEWS,
                OG.IMPRESSIONS,
                OG.REACH,
            }
        ),
        ("application_id",),
        DT.APP,
    ),
    ConversionLocationConfig(
        CL.APP_AND_WEBSITE,
        (
            PG.APP_INSTALLS,
            PG.IN_APP_EVENTS,
            PG.VALUE,
            PG.LINK_CLICKS,
            PG.LANDING_PAGE_VIEWS,
        ),
        frozenset(
            {OG.APP_INSTALLS, OG.CONVERSIONS, OG.VALUE, OG.LINK_CLICKS, OG.LANDING_PAGE_VIEWS}
        ),
        ("application_id", "pixel_id"),
    ),
)

# ---------------------------------------------------------------------------
# Performance goal -> optimization goal (static defaults)
# ---------------------------------------------------------------------------

PERFORMANCE_GOAL_DEFAULTS: Mapping[PerformanceGoal, OptimizationGoal] = _freeze(
    {
        PG.MAXIMIZE_LEADS: OG.LEAD_GENERATION,
        PG.COST_PER_LEAD: OG.LEAD_GENERATION,
        PG.MAXIMIZE_CONVERSATIONS: OG.CONVERSATIONS,
        PG.COST_PER_CONVERSATION: OG.CONVERSATIONS,
        PG.MAXIMIZE_CALLS: OG.QUALITY_CALL,
        PG.COST_PER_CALL: OG.QUALITY_CALL,
        PG.MAXIMIZE_CONVERSIONS: OG.OFFSITE_CONVERSIONS,
        PG.MAXIMIZE_CONVERSION_VALUE: OG.VALUE,
        PG.COST_PER_CONVERSION: OG.OFFSITE_CONVERSIONS,
        PG.POST_ENGAGEMENT: OG.POST_ENGAGEMENT,
        PG.VIDEO_VIEWS: OG.THRUPLAY,
        PG.THRUPLAY: OG.THRUPLAY,
        PG.TWO_SECOND_CONTINUOUS_VIDEO_VIEWS: OG.TWO_SECOND_CONTINUOUS_VIDEO_VIEWS,
        PG.LINK_CLICKS: OG.LINK_CLICKS,
        PG.LANDING_PAGE_VIEWS: OG.LANDING_PAGE_VIEWS,
        PG.APP_INSTALLS: OG.APP_INSTALLS,
        PG.IN_APP_EVENTS: OG.CONVERSIONS,
        PG.VALUE: OG.VALUE,
        PG.IMPRESSIONS: OG.IMPRESSIONS,
        PG.REACH: OG.REACH,
        PG.DAILY_UNIQUE_REACH: OG.REACH,
    }
)

# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------

FLOW_CONFIGS: Mapping[AdSetFlow, FlowConfig] = _freeze(
    {
        AdSetFlow.AWARENESS: FlowConfig(
            flow=AdSetFlow.AWARENESS,
            label="Awareness",
            campaign_type="AWARENESS",
            objective=CampaignObjective.AWARENESS,
            required_identifiers=("account_id", "campaign_id", "page_id"),
        ),
        AdSetFlow.LEADS: FlowConfig(
            flow=AdSetFlow.LEADS,
            label="Leads",
            campaign_type="LEADS",
            objective=CampaignObjective.LEADS,
            required_identifiers=("account_id", "campaign_id", "page_id"),
            locations=LEADS_LOCATIONS,
            default_conversion_location=CL.INSTANT_FORMS,
            default_performance_goal=PG.MAXIMIZE_LEADS,
            default_custom_event_type="LEAD",
        ),
        AdSetFlow.SALES: FlowConfig(
            flow=AdSetFlow.SALES,
            label="Sales",
            campaign_type="SALES",
            objective=CampaignObjective.SALES,
            required_identifiers=("account_id", "campaign_id", "page_id"),
            locations=SALES_LOCATIONS,
            default_conversion_location=CL.WEBSITE,
            default_performance_goal=PG.MAXIMIZE_CONVERSIONS,
            default_custom_event_type="PURCHASE",
        ),
        AdSetFlow.ENGAGEMENT: FlowConfig(
            flow=AdSetFlow.ENGAGEMENT,
            label="Engagement",
            campaign_type="ENGAGEMENT",
            objective=CampaignObjective.ENGAGEMENT,
            required_identifiers=("account_id", "campaign_id", "page_id"),
            locations=ENGAGEMENT_LOCATIONS,
            default_conversion_location=CL.MESSAGE_DESTINATIONS,
            default_performance_goal=PG.MAXIMIZE_CONVERSATIONS,
        ),
        AdSetFlow.APP_PROMOTION: FlowConfig(
            flow=AdSetFlow.APP_PROMOTION,
            label="AppPromo",
            campaign_type="APP_PROMOTION",
            objective=CampaignObjective.APP_PROMOTION,
            required_identifiers=("account_id", "campaign_id", "application_id"),
            locations=APP_PROMOTION_LOCATIONS,
            default_conversion_location=CL.APP,
            default_performance_goal=PG.APP_INSTALLS,
        ),
        AdSetFlow.OBJECTIVE: FlowConfig(
            flow=AdSetFlow.OBJECTIVE,
            label="Ad Set",
            campaign_type="OBJECTIVE",
            objective=None,
            required_identifiers=("account_id", "campaign_id", "campaign_objective"),
        ),
    }
)

# ---------------------------------------------------------------------------
# Audience lookups
# ---------------------------------------------------------------------------

FALLBACK_COUNTRIES: tuple[str, ...] = ("PH",)

WORLDWIDE = "worldwide"

_SINGLE_COUNTRIES = (
    # Asia Pacific
    "PH", "SG", "MY", "TH", "VN", "ID", "IN", "JP", "KR", "CN", "HK", "TW",
    "AU", "NZ", "BD", "LK", "MM", "KH", "LA", "BN",
    # Americas
    "US", "CA", "MX", "BR", "AR", "CL", "CO", "PE", "VE", "EC",
    # Europe
    "GB", "DE", "FR", "IT", "ES", "NL", "BE", "CH", "AT", "SE", "NO", "DK",
    "FI", "PL", "RU", "UA", "TR", "GR", "PT", "IE", "CZ", "HU", "RO", "BG",
    "HR", "SI", "SK", "LT", "LV", "EE",
    # Middle East & Africa
    "AE", "SA", "IL", "EG", "ZA", "NG", "KE", "MA", "GH", "TN", "JO", "LB",
    "KW", "QA", "BH", "OM",
)

_ASEAN = ("PH", "SG", "MY", "TH", "VN", "ID", "MM", "KH", "LA", "BN")

_REGIONAL_GROUPS: dict[str, tuple[str, ...]] = {
    "ASEAN": _ASEAN,
    "SEA": _ASEAN,
    "APAC": ("PH", "SG", "MY", "TH", "VN", "ID", "IN", "JP", "KR", "CN", "HK", "TW", "AU", "NZ"),
    "EU": (
        "DE", "FR", "IT", "ES", "NL", "BE", "AT", "SE", "DK", "FI", "PL", "GR",
        "PT", "IE", "CZ", "HU", "RO", "BG", "HR", "SI", "SK", "LT", "LV", "EE",
    ),
    "EUROPE": (
        "GB", "DE", "FR", "IT", "ES", "NL", "BE", "CH", "AT", "SE", "NO", "DK",
        "FI", "PL", "RU", "UA", "TR", "GR", "PT", "IE", "CZ", "HU", "RO", "BG",
        "HR", "SI", "SK", "LT", "LV", "EE",
    ),
    "NORTH_AMERICA": ("US", "CA"),
    "LATIN_AMERICA": ("MX", "BR", "AR", "CL", "CO", "PE", "VE", "EC"),
    "MIDDLE_EAST": ("AE", "SA", "IL", "JO", "LB", "KW", "QA", "BH", "OM"),
    "GCC": ("AE", "SA", "KW", "QA", "BH", "OM"),
    "ENGLISH_SPEAKING": ("US", "GB", "CA", "AU", "NZ", "IE", "SG", "PH", "IN", "ZA"),
    "DEVELOPED_MARKETS": ("US", "GB", "DE", "FR", "IT", "ES", "NL", "CA", "AU", "JP", "KR", "SG", "HK"),
    "EMERGING_MARKETS": ("PH", "MY", "TH", "VN", "ID", "IN", "CN", "BR", "MX", "AR", "TR", "RU", "ZA"),
}

# ``worldwide`` maps to None: a known location with no country restriction.
LOCATION_MAP: Mapping[str, tuple[str, ...] | None] = _freeze(
    {
        **{code: (code,) for code in _SINGLE_COUNTRIES},
        **_REGIONAL_GROUPS,
        WORLDWIDE: None,
    }
)

GENDER_MAP: Mapping[str, tuple[int, ...]] = _freeze(
    {"all": (1, 2), "male": (1,), "female": (2,)}
)


def get_flow_config(flow: AdSetFlow) -> FlowConfig:
    return FLOW_CONFIGS[flow]


def get_objective_config(objective: CampaignObjective) -> ObjectiveConfig:
    return OBJECTIVE_CONFIGS[objective]
