"""Ad set submission: validate, resolve token, read campaign budget, build, submit.

``AdSetService`` is the outer boundary.  Every path returns an
``AdSetResult``; platform and credential exceptions are classified here
and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime
from typing import Any

from adset_engine.credentials import CredentialResolver
from adset_engine.platforms.base import AdSetGateway
from adset_engine.platforms.exceptions import (
    CredentialError,
    PlatformRejectionError,
    TransportError,
)
from adset_engine.services.adsets.builder import build_adset_request
from adset_engine.services.adsets.registry import get_flow_config
from adset_engine.services.adsets.schemas import (
    AdSetFlow,
    AdSetParams,
    AdSetResult,
    CampaignObjective,
    Err,
    FieldError,
)
from adset_engine.services.adsets.validator import ValidatedAdSet, validate_adset_params

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Platform error hints
# ---------------------------------------------------------------------------

EXPIRED_TOKEN_HINT = (
    "The Facebook access token is invalid or has expired. "
    "Reconnect the account owner to refresh the long-lived token."
)
PERMISSION_HINT = (
    "The token lacks permission for this ad account. "
    "Check ads_management access and the account's assigned users."
)
INVALID_PARAMETER_HINT = (
    "The platform rejected a parameter. Check the ids, enum values and "
    "budget fields sent for this ad set."
)
APPLICATION_HINT = (
    "Ensure application_id is valid and, for APP_INSTALLS, include a correct object_store_url."
)

_CONFIGURATION_FIELDS = {
    "account_id",
    "campaign_id",
    "campaign_objective",
    "conversion_location",
    "performance_goal",
    "page_id",
    "pixel_id",
    "application_id",
    "object_store_url",
    "custom_event_type",
    "cost_per_result_goal",
    "bid_strategy",
    "bid_amount",
    "budget_type",
    "daily_budget",
    "lifetime_budget",
    "start_time",
    "end_time",
    "location",
    "age_min",
    "age_max",
    "gender",
    "detailed_targeting",
    "custom_audience_id",
    "frequency_cap",
    "target_frequency",
    "status",
}


def platform_hint(
    objective: CampaignObjective | None, error_code: int | None, message: str
) -> str | None:
    """Human hint for the platform error codes callers hit most often."""
    if error_code == 190:
        return EXPIRED_TOKEN_HINT
    if error_code in (10, 200):
        return PERMISSION_HINT
    if error_code == 100:
        if objective is CampaignObjective.APP_PROMOTION and re.search(
            "application", message or "", re.IGNORECASE
        ):
            return APPLICATION_HINT
        return INVALID_PARAMETER_HINT
    return None


def _configuration(
    validated: ValidatedAdSet, payload: dict[str, str], cbo_enabled: bool
) -> dict[str, Any]:
    config = validated.params.model_dump(include=_CONFIGURATION_FIELDS)
    config.update(
        {
            "campaign_objective": validated.objective.value,
            "name": payload.get("name"),
            "optimization_goal": payload.get("optimization_goal"),
            "billing_event": payload.get("billing_event"),
            "destination_type": payload.get("destination_type"),
            "campaign_cbo_enabled": cbo_enabled,
            "budget_level": "campaign" if cbo_enabled else "ad_set",
        }
    )
    return config


class AdSetService:
    """Builds and submits ad sets for one of the fixed flows or the generic mode.

    Collaborators are injected: ``credentials`` resolves the account's
    token (blocking, run in a worker thread) and ``gateway`` talks to the
    platform.
    """

    def __init__(self, credentials: CredentialResolver, gateway: AdSetGateway) -> None:
        self._credentials = credentials
        self._gateway = gateway

    # ------------------------------------------------------------------
    # Result helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validation_failure(flow: AdSetFlow, errors: list[FieldError]) -> AdSetResult:
        return AdSetResult(
            success=False,
            flow=flow,
            campaign_type=get_flow_config(flow).campaign_type,
            error="Validation failed",
            error_type="validation_error",
            details="; ".join(e.message for e in errors),
            validation_errors=errors,
        )

    @staticmethod
    def _failure(
        validated: ValidatedAdSet,
        error: str,
        error_type: str,
        details: Any = None,
        hint: str | None = None,
        payload: dict[str, str] | None = None,
    ) -> AdSetResult:
        return AdSetResult(
            success=False,
            flow=validated.flow,
            campaign_type=validated.flow_config.campaign_type,
            error=error,
            error_type=error_type,
            details=details,
            hint=hint,
            payload=payload or {},
        )

    # ------------------------------------------------------------------
    # preview_ad_set
    # ------------------------------------------------------------------

    def preview_ad_set(
        self,
        flow: AdSetFlow,
        params: AdSetParams,
        *,
        cbo_enabled: bool = False,
        now: datetime | None = None,
    ) -> AdSetResult:
        """Validate and build the request body without any I/O."""
        result = validate_adset_params(params, flow)
        if isinstance(result, Err):
            return self._validation_failure(flow, result.errors)

        validated = result.value
        payload = build_adset_request(validated, cbo_enabled=cbo_enabled, now=now)
        return AdSetResult(
            success=True,
            flow=flow,
            campaign_type=validated.flow_config.campaign_type,
            payload=payload,
            configuration=_configuration(validated, payload, cbo_enabled),
        )

    # ------------------------------------------------------------------
    # create_ad_set
    # ------------------------------------------------------------------

    async def create_ad_set(self, flow: AdSetFlow, params: AdSetParams) -> AdSetResult:
        result = validate_adset_params(params, flow)
        if isinstance(result, Err):
            return self._validation_failure(flow, result.errors)

        validated = result.value
        account_id = validated.params.account_id
        campaign_id = validated.params.campaign_id
        payload: dict[str, str] = {}

        try:
            token = await asyncio.to_thread(self._credentials.resolve_token, account_id)
            budget_state = await self._gateway.get_campaign_budget_state(campaign_id, token)

            if budget_state.objective and budget_state.objective != validated.objective.value:
                logger.warning(
                    "Campaign %s has objective %s; building a %s ad set",
                    campaign_id,
                    budget_state.objective,
                    validated.objective.value,
                )

            payload = build_adset_request(validated, cbo_enabled=budget_state.cbo_enabled)
            response = await self._gateway.create_ad_set(account_id, payload, token)
        except CredentialError as e:
            return self._failure(validated, str(e), "credential_error", details=e.details)
        except PlatformRejectionError as e:
            return self._failure(
                validated,
                str(e),
                "platform_error",
                details=e.details,
                hint=platform_hint(validated.objective, e.error_code, str(e)),
                payload=payload,
            )
        except TransportError as e:
            return self._failure(
                validated,
                "network_error",
                "network_error",
                details=str(e),
                payload=payload,
            )
        except Exception as e:
            logger.exception("Unexpected failure creating %s ad set", flow.value)
            return self._failure(
                validated,
                f"An error occurred while creating the {flow.value} ad set.",
                "unexpected_error",
                details=str(e),
                payload=payload,
            )

        logger.info(
            "Created %s ad set %s under campaign %s",
            flow.value,
            response.get("id"),
            campaign_id,
        )
        return AdSetResult(
            success=True,
            flow=flow,
            campaign_type=validated.flow_config.campaign_type,
            adset_id=response.get("id"),
            payload=payload,
            configuration=_configuration(validated, payload, budget_state.cbo_enabled),
            raw_response=response,
        )
