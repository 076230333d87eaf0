"""
Pytest configuration and fixtures for strain tracker tests.
"""

from __future__ import annotations

import asyncio
import os

# Set test environment variables before importing config
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("APP_ID", "test-app")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from tracker.auth import AuthProvider  # noqa: E402
from tracker.config import settings  # noqa: E402
from tracker.services.feeds import StrainFeeds  # noqa: E402
from tracker.services.gateway import StrainGateway  # noqa: E402
from tracker.services.session import SessionManager  # noqa: E402
from tracker.store.memory import MemoryDocumentStore  # noqa: E402

APP_ID = settings.APP_ID


@pytest.fixture
def store():
    """Fresh in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture
def auth():
    return AuthProvider(settings)


@pytest_asyncio.fixture
async def session(auth):
    """Anonymous session that has already resolved its identity."""
    s = SessionManager(auth, admin_prefix=settings.ADMIN_ID_PREFIX)
    await s.start()
    return s


@pytest.fixture
def gateway(store, session):
    return StrainGateway(store, session, APP_ID)


@pytest_asyncio.fixture
async def feeds(store, session):
    """Feeds attached to the session identity; detached on teardown."""
    f = StrainFeeds(store, APP_ID)
    await f.attach(session.identity)
    yield f
    await f.detach()


@pytest.fixture
def settle():
    """Let pending subscription consumers run."""

    async def _settle() -> None:
        for _ in range(20):
            await asyncio.sleep(0)

    return _settle


def strain_fields(**overrides) -> dict:
    """Valid camelCase strain document fields."""
    fields = {
        "strainName": "Blue Dream",
        "productType": "Flower",
        "type": "Hybrid",
        "brand": "Cookies",
        "purchasedLocation": "Sunnyside",
        "cost": 45.0,
        "rating": 4,
        "effects": ["Relaxing", "Creative"],
        "terpenes": ["Myrcene", "Pinene"],
    }
    fields.update(overrides)
    return fields
