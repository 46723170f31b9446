from fastapi import APIRouter, Depends, HTTPException, Query

from adset_engine.credentials import SqlCredentialStore
from adset_engine.platforms.factory import get_adset_gateway
from adset_engine.services.adsets.registry import FLOW_CONFIGS, get_objective_config
from adset_engine.services.adsets.schemas import (
    AdSetFlow,
    AdSetParams,
    AdSetResult,
    FlowOut,
)
from adset_engine.services.adsets.service import AdSetService
from adset_engine.settings import settings

adset_router = APIRouter(prefix="/api/adsets", tags=["adsets"])

ERROR_STATUS = {
    "validation_error": 422,
    "credential_error": 404,
    "platform_error": 502,
    "network_error": 502,
    "unexpected_error": 500,
}


def get_adset_service() -> AdSetService:
    return AdSetService(
        SqlCredentialStore(),
        get_adset_gateway(dry_run=settings.USE_DRY_RUN_EXECUTION),
    )


def _respond(result: AdSetResult) -> AdSetResult:
    if not result.success:
        raise HTTPException(
            status_code=ERROR_STATUS.get(result.error_type, 500),
            detail=result.model_dump(mode="json"),
        )
    return result


@adset_router.get("/flows", response_model=list[FlowOut])
def list_flows():
    """List the supported flows with their locations and goals."""
    flows = []
    for config in FLOW_CONFIGS.values():
        optimization_goals: list[str] = []
        if config.objective is not None and not config.uses_locations:
            optimization_goals = sorted(
                g.value for g in get_objective_config(config.objective).valid_optimization_goals
            )
        flows.append(
            FlowOut(
                flow=config.flow,
                label=config.label,
                campaign_objective=config.objective,
                required_identifiers=list(config.required_identifiers),
                default_conversion_location=config.default_conversion_location,
                default_performance_goal=config.default_performance_goal,
                conversion_locations={
                    location.value: [g.value for g in loc.valid_performance_goals]
                    for location, loc in config.locations.items()
                },
                valid_optimization_goals=optimization_goals,
            )
        )
    return flows


@adset_router.post("/{flow}/preview", response_model=AdSetResult)
def preview_ad_set(
    flow: AdSetFlow,
    params: AdSetParams,
    cbo_enabled: bool = Query(default=False),
    service: AdSetService = Depends(get_adset_service),
):
    """Validate and build the request body without contacting the platform."""
    return _respond(service.preview_ad_set(flow, params, cbo_enabled=cbo_enabled))


@adset_router.post("/{flow}", response_model=AdSetResult)
async def create_ad_set(
    flow: AdSetFlow,
    params: AdSetParams,
    service: AdSetService = Depends(get_adset_service),
):
    """Validate, build and submit an ad set under an existing campaign."""
    return _respond(await service.create_ad_set(flow, params))
