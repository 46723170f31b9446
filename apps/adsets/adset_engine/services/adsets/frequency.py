from __future__ import annotations

from typing import Any

from adset_engine.services.adsets.registry import FrequencyControl

DEFAULT_INTERVAL_DAYS = 7
DEFAULT_MAX_FREQUENCY = 2

FREQUENCY_CAP_OPTIONS: dict[str, FrequencyControl] = {
    "1 times every 7 days": FrequencyControl("IMPRESSIONS", 7, 1),
    "2 times every 7 days": FrequencyControl("IMPRESSIONS", 7, 2),
    "3 times every 7 days": FrequencyControl("IMPRESSIONS", 7, 3),
    "1 times every 1 days": FrequencyControl("IMPRESSIONS", 1, 1),
    "2 times every 1 days": FrequencyControl("IMPRESSIONS", 1, 2),
}


def build_frequency_control(
    frequency_cap: str | None, target_frequency: int | None = None
) -> list[dict[str, Any]]:
    """Named cap -> ``frequency_control_specs`` list.

    Unknown or missing caps become an impressions cap over seven days at
    ``target_frequency`` (default 2).  The validator rejects values below 1.
    """
    control = FREQUENCY_CAP_OPTIONS.get(frequency_cap or "")
    if control is None:
        control = FrequencyControl(
            "IMPRESSIONS",
            DEFAULT_INTERVAL_DAYS,
            DEFAULT_MAX_FREQUENCY if target_frequency is None else target_frequency,
        )
    return [control.as_dict()]


def normalize_frequency_specs(
    specs: list[dict[str, Any]] | dict[str, Any] | None,
) -> list[dict[str, Any]] | None:
    """The platform expects a list; a single spec dict is wrapped."""
    if specs is None:
        return None
    if isinstance(specs, dict):
        return [specs]
    return list(specs)
