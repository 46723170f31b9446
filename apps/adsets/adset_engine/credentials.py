"""Account -> owning user -> long-lived Meta token."""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adset_engine.db import SessionLocal
from adset_engine.models import FacebookAdAccount, User
from adset_engine.platforms.exceptions import (
    AccountNotFoundError,
    CredentialStoreError,
    TokenNotFoundError,
)

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolves the platform access token to use for an ad account.

    Implementations raise ``AccountNotFoundError``, ``TokenNotFoundError``
    or ``CredentialStoreError``; they never return an empty token.
    """

    def resolve_token(self, account_id: str) -> str:
        raise NotImplementedError


class SqlCredentialStore(CredentialResolver):
    """Reads ``facebook_ad_accounts`` and ``users`` through SQLAlchemy (read-only)."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    def resolve_token(self, account_id: str) -> str:
        account_id = str(account_id).strip()
        try:
            with self._session_factory() as db:
                account = db.get(FacebookAdAccount, account_id)
                if account is None:
                    raise AccountNotFoundError(
                        f"Ad account {account_id} not found in database.",
                        details={"account_id": account_id},
                    )
                if not account.user_id:
                    raise AccountNotFoundError(
                        f"Account {account_id} has no associated user_id.",
                        details={"account_id": account_id},
                    )
                user_id = account.user_id
                user = db.get(User, user_id)
                token = user.facebook_long_lived_token if user is not None else None
        except SQLAlchemyError as exc:
            logger.exception("Credential lookup failed for account %s", account_id)
            raise CredentialStoreError(
                f"Account lookup failed: {exc}",
                details={"account_id": account_id},
            ) from exc

        if not token:
            raise TokenNotFoundError(
                "No Facebook access token found for the user who owns this ad account",
                details={
                    "account_id": account_id,
                    "user_id": user_id,
                    "message": f"Account {account_id} belongs to user {user_id} but they have no Facebook token",
                },
            )
        return token
