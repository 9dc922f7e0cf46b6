"""Shared test fixtures for the SecuryFlex eligibility test suite."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from securyflex.main import app
from securyflex.models.certificates import Certificate
from securyflex.models.enums import CertificateType
from securyflex.modules.matching.service import InMemoryCertificateStore, get_certificate_store

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_cert(
    cert_id: str,
    category: CertificateType | str,
    expires_in_days: float,
    *,
    holder_id: str = "guard-1",
    issued_days_ago: float = 365,
    now: datetime = NOW,
) -> Certificate:
    """Certificate whose expiration is relative to ``now`` (negative = expired)."""
    return Certificate(
        id=cert_id,
        category=category,
        holder_id=holder_id,
        issuing_authority="Justis",
        issue_date=now - timedelta(days=issued_days_ago),
        expiration_date=now + timedelta(days=expires_in_days),
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def certificate_store():
    store = InMemoryCertificateStore()
    app.dependency_overrides[get_certificate_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_certificate_store, None)
