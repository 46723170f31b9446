from __future__ import annotations

import uuid
from typing import Any

from adset_engine.platforms.base import AdSetGateway, CampaignBudgetState


class DryRunAdSetGateway(AdSetGateway):
    """Simulates platform API calls with realistic fake responses.

    Used for development, testing, and dry-run validation of ad set
    payloads before connecting to the real Marketing API.  Every
    submission gets a fresh id; identical payloads are not de-duplicated.
    """

    def __init__(self, *, cbo_enabled: bool = False, objective: str | None = None) -> None:
        self._cbo_enabled = cbo_enabled
        self._objective = objective

    async def get_campaign_budget_state(
        self, campaign_id: str, token: str
    ) -> CampaignBudgetState:
        return CampaignBudgetState(cbo_enabled=self._cbo_enabled, objective=self._objective)

    async def create_ad_set(
        self, account_id: str, payload: dict[str, str], token: str
    ) -> dict[str, Any]:
        return {
            "id": f"dry-run-adset-{uuid.uuid4().hex[:12]}",
            "dry_run": True,
            "account_id": account_id,
            "fields_submitted": sorted(payload),
        }
