"""Meta Marketing API gateway.

Uses the official facebook-business Python SDK to read the parent
campaign's budget fields and to create ad sets under an ad account.
Every call builds its own ``FacebookAdsApi`` from the caller's token, so
one gateway instance can serve many accounts concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests
from facebook_business.adobjects.adaccount import AdAccount
from facebook_business.adobjects.campaign import Campaign
from facebook_business.api import FacebookAdsApi
from facebook_business.exceptions import FacebookRequestError
from facebook_business.session import FacebookSession

from adset_engine.platforms.base import AdSetGateway, CampaignBudgetState
from adset_engine.platforms.exceptions import (
    CampaignLookupError,
    PlatformRejectionError,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "v23.0"

CAMPAIGN_BUDGET_FIELDS = [
    Campaign.Field.objective,
    Campaign.Field.daily_budget,
    Campaign.Field.lifetime_budget,
]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _account_path(account_id: str) -> str:
    account_id = account_id.strip()
    return account_id if account_id.startswith("act_") else f"act_{account_id}"


def _error_envelope(exc: FacebookRequestError) -> dict[str, Any]:
    """The platform's JSON error body, or a minimal one built from the exception."""
    body = exc.body()
    if isinstance(body, dict) and "error" in body:
        return body
    return {
        "error": {
            "message": exc.api_error_message(),
            "code": exc.api_error_code(),
            "type": exc.api_error_type(),
        }
    }


def _rejection(
    exc: FacebookRequestError, prefix: str, error_cls: type[PlatformRejectionError]
) -> PlatformRejectionError:
    message = exc.api_error_message() or str(exc)
    return error_cls(
        f"{prefix}: {message}",
        details=_error_envelope(exc),
        error_code=exc.api_error_code(),
    )


# ---------------------------------------------------------------------------
# MetaAdSetGateway
# ---------------------------------------------------------------------------


class MetaAdSetGateway(AdSetGateway):
    """Real Meta Marketing API gateway using the facebook-business SDK.

    All SDK calls are synchronous, so they are wrapped with
    ``asyncio.to_thread()`` to avoid blocking the event loop.
    """

    def __init__(
        self,
        app_id: str | None = None,
        app_secret: str | None = None,
        api_version: str = DEFAULT_API_VERSION,
    ) -> None:
        self._app_id = app_id
        self._app_secret = app_secret
        self._api_version = api_version

    def _api(self, token: str) -> FacebookAdsApi:
        session = FacebookSession(
            app_id=self._app_id,
            app_secret=self._app_secret,
            access_token=token,
        )
        return FacebookAdsApi(session, api_version=self._api_version)

    # ------------------------------------------------------------------
    # get_campaign_budget_state
    # ------------------------------------------------------------------

    def _sync_get_campaign_budget_state(
        self, campaign_id: str, token: str
    ) -> CampaignBudgetState:
        try:
            campaign = Campaign(campaign_id, api=self._api(token))
            campaign = campaign.api_get(fields=CAMPAIGN_BUDGET_FIELDS)
        except FacebookRequestError as exc:
            raise _rejection(exc, "Campaign lookup failed", CampaignLookupError) from exc
        except requests.RequestException as exc:
            raise TransportError(
                f"Campaign lookup failed: {exc}",
                details={"campaign_id": campaign_id, "error": str(exc)},
            ) from exc

        fields = {name: campaign.get(name) for name in CAMPAIGN_BUDGET_FIELDS}
        return CampaignBudgetState.from_campaign_fields(fields)

    async def get_campaign_budget_state(
        self, campaign_id: str, token: str
    ) -> CampaignBudgetState:
        return await asyncio.to_thread(
            self._sync_get_campaign_budget_state, campaign_id, token
        )

    # ------------------------------------------------------------------
    # create_ad_set
    # ------------------------------------------------------------------

    def _sync_create_ad_set(
        self, account_id: str, payload: dict[str, str], token: str
    ) -> dict[str, Any]:
        account = AdAccount(_account_path(account_id), api=self._api(token))
        try:
            adset = account.create_ad_set(params=payload)
        except FacebookRequestError as exc:
            logger.warning(
                "Ad set creation rejected for account %s: code=%s message=%s",
                account_id,
                exc.api_error_code(),
                exc.api_error_message(),
            )
            raise _rejection(exc, "Ad set creation failed", PlatformRejectionError) from exc
        except requests.RequestException as exc:
            raise TransportError(
                f"Ad set creation failed: {exc}",
                details={"account_id": account_id, "error": str(exc)},
            ) from exc
        return {"id": adset["id"]}

    async def create_ad_set(
        self, account_id: str, payload: dict[str, str], token: str
    ) -> dict[str, Any]:
        return await asyncio.to_thread(
            self._sync_create_ad_set, account_id, payload, token
        )
