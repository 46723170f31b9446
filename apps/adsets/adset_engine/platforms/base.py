from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class CampaignBudgetState(BaseModel):
    """Budget-related fields of the parent campaign, as read from the platform."""

    cbo_enabled: bool
    objective: str | None = None
    daily_budget: str | None = None
    lifetime_budget: str | None = None

    @classmethod
    def from_campaign_fields(cls, fields: dict[str, Any]) -> CampaignBudgetState:
        """A campaign carrying either budget has campaign budget optimization on."""
        daily = fields.get("daily_budget") or None
        lifetime = fields.get("lifetime_budget") or None
        return cls(
            cbo_enabled=bool(daily or lifetime),
            objective=fields.get("objective"),
            daily_budget=str(daily) if daily else None,
            lifetime_budget=str(lifetime) if lifetime else None,
        )


class AdSetGateway:
    """Base class for the transport that reaches the advertising platform.

    ``AdSetService`` uses this interface without knowing whether requests go
    to the real Marketing API or to the dry-run simulator.  Implementations
    that call blocking SDKs run them in a worker thread.

    Failures are reported by raising the ``PlatformError`` family from
    ``adset_engine.platforms.exceptions``.
    """

    async def get_campaign_budget_state(self, campaign_id: str, token: str) -> CampaignBudgetState:
        raise NotImplementedError

    async def create_ad_set(
        self, account_id: str, payload: dict[str, str], token: str
    ) -> dict[str, Any]:
        raise NotImplementedError
