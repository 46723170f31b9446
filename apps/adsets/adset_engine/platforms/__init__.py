from adset_engine.platforms.base import AdSetGateway, CampaignBudgetState
from adset_engine.platforms.dry_run import DryRunAdSetGateway
from adset_engine.platforms.exceptions import (
    AccountNotFoundError,
    CampaignLookupError,
    CredentialError,
    CredentialStoreError,
    PlatformError,
    PlatformRejectionError,
    TokenNotFoundError,
    TransportError,
)
from adset_engine.platforms.factory import get_adset_gateway
from adset_engine.platforms.meta_ads import MetaAdSetGateway

__all__ = [
    "AccountNotFoundError",
    "AdSetGateway",
    "CampaignBudgetState",
    "CampaignLookupError",
    "CredentialError",
    "CredentialStoreError",
    "DryRunAdSetGateway",
    "MetaAdSetGateway",
    "PlatformError",
    "PlatformRejectionError",
    "TokenNotFoundError",
    "TransportError",
    "get_adset_gateway",
]
