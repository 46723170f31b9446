#!/usr/bin/env python3
"""Live integration check for Meta ad set creation.

Creates a PAUSED awareness ad set under an existing campaign on a real ad
account, using the token stored for the account's owner, to verify that the
credential store and the Meta gateway work end-to-end.

Usage:
    # Create the ad set and keep it (verify in Ads Manager)
    python3 scripts/check_meta_live.py --account 123456789 --campaign 1202... --page 1000...

    # Create the ad set and delete it after verification
    python3 scripts/check_meta_live.py --account ... --campaign ... --page ... --cleanup

    # Only validate and print the request body
    python3 scripts/check_meta_live.py --account ... --campaign ... --page ... --preview

Environment variables (set in infra/.env):
    DATABASE_URL      - database holding facebook_ad_accounts and users
    META_APP_ID       - Meta app id (optional)
    META_APP_SECRET   - Meta app secret (optional, enables appsecret_proof)
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure adset_engine is importable when running from any directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from adset_engine.credentials import SqlCredentialStore
from adset_engine.platforms.meta_ads import MetaAdSetGateway
from adset_engine.services.adsets.schemas import AdSetFlow, AdSetParams
from adset_engine.services.adsets.service import AdSetService
from adset_engine.settings import settings


async def run_check(args: argparse.Namespace) -> bool:
    """Run the live check. Returns True on success."""

    print("\n1. Building ad set parameters...")
    params = AdSetParams(
        account_id=args.account,
        campaign_id=args.campaign,
        page_id=args.page,
        name=args.name,
        status="PAUSED",
        daily_budget=args.daily_budget,
        location=args.location,
    )
    print(f"   Account:  {params.account_id}")
    print(f"   Campaign: {params.campaign_id}")
    print(f"   Budget:   {params.daily_budget} per day")

    gateway = MetaAdSetGateway(
        app_id=settings.META_APP_ID or None,
        app_secret=settings.META_APP_SECRET or None,
        api_version=settings.META_API_VERSION,
    )
    service = AdSetService(SqlCredentialStore(), gateway)

    if args.preview:
        print("\n2. Previewing request body...")
        result = service.preview_ad_set(AdSetFlow.AWARENESS, params)
    else:
        print("\n2. Creating ad set (PAUSED)...")
        result = await service.create_ad_set(AdSetFlow.AWARENESS, params)

    if not result.success:
        print(f"   FAILED: {result.error} ({result.error_type})")
        for error in result.validation_errors:
            print(f"   [{error.kind.value}] {error.field}: {error.message}")
        if result.hint:
            print(f"   Hint: {result.hint}")
        if result.details:
            print(f"   Details: {result.details}")
        return False

    for key, value in sorted(result.payload.items()):
        print(f"   {key} = {value}")

    if args.preview:
        return True

    print(f"\n   Ad Set ID: {result.adset_id}")
    print(f"   Budget:    {result.configuration['budget_level']} level")
    print("   Status:    PAUSED (will NOT spend money)")

    if args.cleanup:
        print(f"\n3. Deleting test ad set {result.adset_id}...")
        try:
            from facebook_business.adobjects.adset import AdSet

            token = SqlCredentialStore().resolve_token(params.account_id.removeprefix("act_"))
            AdSet(result.adset_id, api=gateway._api(token)).api_delete()
            print("   Deleted.")
        except Exception as e:
            print(f"   WARNING: Could not delete: {e}")
            print("   Delete manually from Ads Manager.")
    else:
        print("\n3. Ad set kept. Delete it from Ads Manager when you're done.")

    return True


def main():
    parser = argparse.ArgumentParser(description="Live integration check for Meta ad set creation")
    parser.add_argument("--account", required=True, help="Ad account id (with or without act_)")
    parser.add_argument("--campaign", required=True, help="Existing campaign id")
    parser.add_argument("--page", required=True, help="Facebook Page id")
    parser.add_argument("--daily-budget", type=float, default=100.0, help="Daily budget in pesos")
    parser.add_argument("--location", default="PH", help="Country or regional group code")
    parser.add_argument("--name", default="[TEST] Ad Set Engine Live Check")
    parser.add_argument("--preview", action="store_true", help="Only build the request body")
    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Delete the test ad set after creation (default: keep it)",
    )
    args = parser.parse_args()

    print("=" * 60)
    print("META AD SETS: LIVE CHECK")
    print("=" * 60)

    success = asyncio.run(run_check(args))

    print("\n" + "=" * 60)
    print("RESULT: PASSED" if success else "RESULT: FAILED")
    print("=" * 60)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
