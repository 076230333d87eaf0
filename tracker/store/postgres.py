"""
Postgres document store.

Documents live in a single ``documents`` table keyed by (collection, id) with
a JSONB payload. Writes publish the collection path on the
``document_changes`` channel; one dedicated listener connection per store
turns those notifications into fresh snapshots for open subscriptions.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from uuid import uuid4

import asyncpg

from tracker.store.base import (
    Document,
    DocumentStore,
    StoreError,
    Subscription,
    SubscriptionError,
    WriteFailure,
)

logger = logging.getLogger(__name__)

CHANNEL = "document_changes"


class PostgresDocumentStore(DocumentStore):
    """Document store over an asyncpg pool, with LISTEN/NOTIFY subscriptions."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._listener: asyncpg.Connection | None = None
        self._listener_lock = asyncio.Lock()
        self._refreshes: set[asyncio.Task] = set()

    # -- listener ------------------------------------------------------------

    async def _ensure_listener(self) -> None:
        async with self._listener_lock:
            if self._listener is not None:
                return
            conn = await self.pool.acquire()
            try:
                await conn.add_listener(CHANNEL, self._on_notify)
            except (asyncpg.PostgresError, OSError):
                await self.pool.release(conn)
                raise
            conn.add_termination_listener(self._on_terminate)
            self._listener = conn

    def _track(self, task: asyncio.Task) -> None:
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    def _on_notify(self, conn: asyncpg.Connection, pid: int, channel: str, collection: str) -> None:
        if not self._subscribers.get(collection):
            return
        self._track(asyncio.create_task(self._refresh(collection)))

    def _on_terminate(self, conn: asyncpg.Connection) -> None:
        if conn is not self._listener:
            return
        logger.warning("store: listener connection terminated")
        self._listener = None
        self._track(asyncio.create_task(self.pool.release(conn)))
        for collection in list(self._subscribers):
            self._fail_subscribers(collection, "listener connection closed")

    def _fail_subscribers(self, collection: str, reason: str) -> None:
        # Failed streams are unregistered; their consumers see the error and stop.
        subs = self._subscribers.pop(collection, set())
        for sub in subs:
            sub.fail(SubscriptionError(f"{collection}: {reason}"))

    async def _refresh(self, collection: str) -> None:
        # Serialized per collection so snapshots reach subscribers in order.
        async with self._locks[collection]:
            try:
                documents = await self.get_all(collection)
            except StoreError as e:
                self._fail_subscribers(collection, str(e))
                return
            for sub in list(self._subscribers[collection]):
                sub.push([dict(doc) for doc in documents])

    def _release(self, sub: Subscription) -> None:
        self._subscribers[sub.collection].discard(sub)

    # -- DocumentStore -------------------------------------------------------

    async def subscribe(self, collection: str) -> Subscription:
        try:
            await self._ensure_listener()
            documents = await self.get_all(collection)
        except (asyncpg.PostgresError, OSError, StoreError) as e:
            raise SubscriptionError(f"{collection}: {e}") from e

        sub = Subscription(collection, on_cancel=self._release)
        self._subscribers[collection].add(sub)
        sub.push(documents)
        return sub

    async def write_merge(self, collection: str, doc_id: str | None, fields: Document) -> str:
        doc_id = doc_id or uuid4().hex
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute(
                        """
                        INSERT INTO documents (collection, id, data, updated_at)
                        VALUES ($1, $2, $3, now())
                        ON CONFLICT (collection, id)
                        DO UPDATE SET data = documents.data || EXCLUDED.data, updated_at = now()
                        """,
                        collection,
                        doc_id,
                        fields,
                    )
                    await conn.execute("SELECT pg_notify($1, $2)", CHANNEL, collection)
        except (asyncpg.PostgresError, OSError) as e:
            raise WriteFailure(f"write to {collection}/{doc_id} failed: {e}") from e
        return doc_id

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    result = await conn.execute(
                        "DELETE FROM documents WHERE collection = $1 AND id = $2",
                        collection,
                        doc_id,
                    )
                    if result == "DELETE 1":
                        await conn.execute("SELECT pg_notify($1, $2)", CHANNEL, collection)
        except (asyncpg.PostgresError, OSError) as e:
            raise WriteFailure(f"delete of {collection}/{doc_id} failed: {e}") from e

    async def get_all(self, collection: str) -> list[Document]:
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    "SELECT id, data FROM documents WHERE collection = $1",
                    collection,
                )
        except (asyncpg.PostgresError, OSError) as e:
            raise StoreError(f"read of {collection} failed: {e}") from e
        return [{**row["data"], "id": row["id"]} for row in rows]

    async def close(self) -> None:
        for subs in list(self._subscribers.values()):
            for sub in list(subs):
                sub.cancel()
        for task in list(self._refreshes):
            task.cancel()
        if self._listener is not None:
            listener, self._listener = self._listener, None
            await listener.remove_listener(CHANNEL, self._on_notify)
            await self.pool.release(listener)
