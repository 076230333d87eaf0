"""
Application context: the explicitly owned bundle of settings, document store
and identity provider handed to every component that talks to the backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tracker import db
from tracker.auth import AuthProvider
from tracker.config import Settings
from tracker.store.base import DocumentStore
from tracker.store.memory import MemoryDocumentStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    store: DocumentStore
    auth: AuthProvider

    @property
    def app_id(self) -> str:
        return self.settings.APP_ID


async def create_context(settings: Settings) -> AppContext:
    """Build the context for the configured store backend."""
    if settings.use_postgres:
        from tracker.store.postgres import PostgresDocumentStore

        pool = await db.init_pool(settings.DATABASE_URL)
        store: DocumentStore = PostgresDocumentStore(pool)
    else:
        store = MemoryDocumentStore()
    logger.info("context: store backend=%s app_id=%s", settings.STORE_BACKEND, settings.APP_ID)
    return AppContext(settings=settings, store=store, auth=AuthProvider(settings))


async def close_context(context: AppContext) -> None:
    """Close the store and, for Postgres, the connection pool."""
    await context.store.close()
    if context.settings.use_postgres:
        await db.close_pool()
