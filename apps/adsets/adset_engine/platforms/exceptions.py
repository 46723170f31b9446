"""Custom exceptions for the platform and credential layers.

These exceptions are **internal**: they are raised inside synchronous
helpers (gateway calls, credential lookups) and converted to
``AdSetResult(success=False)`` by ``AdSetService``.  They should never escape
into calling code.
"""

from __future__ import annotations

from typing import Any


class PlatformError(Exception):
    """Base exception for all platform-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class CredentialError(PlatformError):
    """Base class for identity-store failures (no retry is attempted)."""


class AccountNotFoundError(CredentialError):
    """Raised when the ad account is unknown or has no owning user."""


class TokenNotFoundError(CredentialError):
    """Raised when the owning user has no long-lived platform token on file."""


class CredentialStoreError(CredentialError):
    """Raised when the identity store itself cannot be queried."""


class PlatformRejectionError(PlatformError):
    """Raised when the platform answers with its JSON error envelope."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.error_code = error_code


class CampaignLookupError(PlatformRejectionError):
    """Raised when the parent campaign's budget fields cannot be read."""


class TransportError(PlatformError):
    """Raised when the request never produced a platform response."""
