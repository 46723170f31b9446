from __future__ import annotations

from adset_engine.platforms.base import AdSetGateway
from adset_engine.platforms.dry_run import DryRunAdSetGateway


def get_adset_gateway(*, dry_run: bool = True) -> AdSetGateway:
    """Return the appropriate ad set gateway.

    When dry_run=True, submissions go to the DryRunAdSetGateway.
    Otherwise, requests go to the real Meta Marketing API.
    """
    if dry_run:
        return DryRunAdSetGateway()

    from adset_engine.platforms.meta_ads import MetaAdSetGateway
    from adset_engine.settings import settings

    return MetaAdSetGateway(
        app_id=settings.META_APP_ID,
        app_secret=settings.META_APP_SECRET,
        api_version=settings.META_API_VERSION,
    )
