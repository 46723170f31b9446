from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from adset_engine import models  # noqa: F401  -- ensure all models are registered
from adset_engine.credentials import CredentialResolver
from adset_engine.db import Base
from adset_engine.platforms.base import AdSetGateway, CampaignBudgetState

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class StaticCredentials(CredentialResolver):
    """Returns a fixed token, or raises the configured error."""

    def __init__(self, token: str = "test-token", error: Exception | None = None):
        self.token = token
        self.error = error
        self.calls: list[str] = []

    def resolve_token(self, account_id: str) -> str:
        self.calls.append(account_id)
        if self.error is not None:
            raise self.error
        return self.token


class RecordingGateway(AdSetGateway):
    """Records submitted payloads and replays configured outcomes."""

    def __init__(
        self,
        *,
        cbo_enabled: bool = False,
        objective: str | None = None,
        response: dict[str, Any] | None = None,
        lookup_error: Exception | None = None,
        create_error: Exception | None = None,
    ):
        self.budget_state = CampaignBudgetState(cbo_enabled=cbo_enabled, objective=objective)
        self.response = response or {"id": "120200000000001"}
        self.lookup_error = lookup_error
        self.create_error = create_error
        self.lookups: list[tuple[str, str]] = []
        self.submissions: list[tuple[str, dict[str, str], str]] = []

    async def get_campaign_budget_state(self, campaign_id: str, token: str) -> CampaignBudgetState:
        self.lookups.append((campaign_id, token))
        if self.lookup_error is not None:
            raise self.lookup_error
        return self.budget_state

    async def create_ad_set(
        self, account_id: str, payload: dict[str, str], token: str
    ) -> dict[str, Any]:
        self.submissions.append((account_id, payload, token))
        if self.create_error is not None:
            raise self.create_error
        return self.response


# ---------------------------------------------------------------------------
# Sync test DB
# ---------------------------------------------------------------------------


def setup_test_db():
    """Create an in-memory SQLite engine and session factory for sync tests."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(engine)
    return engine, TestingSessionLocal
