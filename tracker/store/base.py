"""
Document store interface for the strain tracker.

Collections are addressed by hierarchical paths; every document is a flat
dict of camelCase fields. Implement with Postgres for production, or
in-memory for tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

Document = dict[str, Any]

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Base class for backend failures."""

    pass


class AuthFailure(StoreError):
    """Sign-in was rejected."""

    pass


class SubscriptionError(StoreError):
    """A live subscription failed (permission or transport)."""

    pass


class WriteFailure(StoreError):
    """A write or delete was rejected by the backend."""

    pass


# ---------------------------------------------------------------------------
# Collection paths
# ---------------------------------------------------------------------------


def private_collection(app_id: str, identity: str) -> str:
    """Path of the strain log owned by one identity."""
    return f"{app_id}/users/{identity}/strains"


def public_collection(app_id: str) -> str:
    """Path of the shared community collection."""
    return f"{app_id}/public/data/community_strains"


# ---------------------------------------------------------------------------
# Subscription stream
# ---------------------------------------------------------------------------


class Subscription:
    """
    Live view of one collection.

    Iterate with ``async for`` to receive full snapshots (lists of documents,
    each carrying its ``id``). The stream ends after ``cancel()`` and raises
    SubscriptionError if the backend reports a failure.
    """

    def __init__(self, collection: str, on_cancel: Callable[[Subscription], None] | None = None) -> None:
        self.collection = collection
        self._on_cancel = on_cancel
        self._queue: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()
        self._closed = False

    @property
    def cancelled(self) -> bool:
        return self._closed

    def push(self, documents: list[Document]) -> None:
        """Deliver a full snapshot to the consumer."""
        if not self._closed:
            self._queue.put_nowait(("snapshot", documents))

    def fail(self, error: SubscriptionError) -> None:
        """Deliver a failure to the consumer."""
        if not self._closed:
            self._queue.put_nowait(("error", error))

    def cancel(self) -> None:
        """Release the subscription. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._on_cancel is not None:
            self._on_cancel(self)
        self._queue.put_nowait(("closed", None))

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> list[Document]:
        if self._closed:
            raise StopAsyncIteration
        kind, payload = await self._queue.get()
        if kind == "snapshot" and not self._closed:
            return payload
        if kind == "error":
            raise payload
        raise StopAsyncIteration


# ---------------------------------------------------------------------------
# Store protocol
# ---------------------------------------------------------------------------


class DocumentStore:
    """Abstract document store interface."""

    async def subscribe(self, collection: str) -> Subscription:
        """Open a live subscription. The current snapshot is delivered first."""
        raise NotImplementedError

    async def write_merge(self, collection: str, doc_id: str | None, fields: Document) -> str:
        """
        Merge fields into a document, creating it if absent.

        A ``doc_id`` of None writes a new document under a generated id.
        Returns the document id. Raises WriteFailure.
        """
        raise NotImplementedError

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing id is a no-op. Raises WriteFailure."""
        raise NotImplementedError

    async def get_all(self, collection: str) -> list[Document]:
        """One-shot read of every document in a collection."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources and end all open subscriptions."""
        pass
