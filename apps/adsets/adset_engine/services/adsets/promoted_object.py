from __future__ import annotations


def build_promoted_object(
    page_id: str | None = None,
    pixel_id: str | None = None,
    application_id: str | None = None,
    custom_event_type: str | None = None,
    object_store_url: str | None = None,
) -> dict[str, str]:
    """Sparse ``promoted_object``: only the identifiers that were supplied.

    Required-field checks belong to the validator.
    """
    candidates = {
        "page_id": page_id,
        "pixel_id": pixel_id,
        "application_id": application_id,
        "object_store_url": object_store_url,
        "custom_event_type": custom_event_type,
    }
    return {key: value for key, value in candidates.items() if value}
