from __future__ import annotations

import logging
from typing import Any

from adset_engine.services.adsets.registry import (
    FALLBACK_COUNTRIES,
    GENDER_MAP,
    LOCATION_MAP,
)

logger = logging.getLogger(__name__)

MIN_AGE = 13
MAX_AGE = 65


def resolve_countries(location: str | None) -> list[str] | None:
    """Expand a country or regional-group code.

    Returns ``None`` for ``worldwide`` (no geo restriction).  Unknown codes
    fall back to ``FALLBACK_COUNTRIES``.
    """
    if location is not None and location in LOCATION_MAP:
        countries = LOCATION_MAP[location]
        return list(countries) if countries is not None else None

    logger.info(
        "Unknown location %r; targeting %s", location, ",".join(FALLBACK_COUNTRIES)
    )
    return list(FALLBACK_COUNTRIES)


def _age_in_range(age: int | None) -> bool:
    return age is not None and MIN_AGE <= age <= MAX_AGE


def build_targeting(
    location: str | None,
    age_min: int | None,
    age_max: int | None,
    gender: str | None,
    detailed_targeting: str | None,
    custom_audience_id: str | None,
) -> dict[str, Any]:
    """Build the ``targeting`` document for an ad set.

    Ages outside [13, 65] are dropped, not clamped.
    """
    geo_locations: dict[str, Any] = {}
    countries = resolve_countries(location)
    if countries is not None:
        geo_locations["countries"] = countries

    targeting: dict[str, Any] = {"geo_locations": geo_locations}

    if _age_in_range(age_min):
        targeting["age_min"] = age_min
    if _age_in_range(age_max):
        targeting["age_max"] = age_max

    if gender in GENDER_MAP:
        targeting["genders"] = list(GENDER_MAP[gender])

    # "all" means broad delivery: no audience restriction
    if detailed_targeting == "custom" and custom_audience_id:
        targeting["custom_audiences"] = [custom_audience_id]

    return targeting


def clean_targeting(raw: dict[str, Any]) -> dict[str, Any]:
    """Drop null and empty-string entries from a caller-supplied targeting dict."""
    return {k: v for k, v in raw.items() if v is not None and v != ""}
