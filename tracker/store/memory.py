"""In-memory document store for tests and local development."""

from __future__ import annotations

import copy
from collections import defaultdict
from uuid import uuid4

from tracker.store.base import Document, DocumentStore, Subscription, SubscriptionError


class MemoryDocumentStore(DocumentStore):
    """
    Dict-backed store with live subscriptions.

    Every write broadcasts a fresh snapshot to the subscribers of the
    written collection.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, Document]] = defaultdict(dict)
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)

    def _snapshot(self, collection: str) -> list[Document]:
        return [{**copy.deepcopy(data), "id": doc_id} for doc_id, data in self.collections[collection].items()]

    def _broadcast(self, collection: str) -> None:
        for sub in list(self._subscribers[collection]):
            sub.push(self._snapshot(collection))

    def _release(self, sub: Subscription) -> None:
        self._subscribers[sub.collection].discard(sub)

    def subscriber_count(self, collection: str) -> int:
        """Number of open subscriptions on a collection."""
        return len(self._subscribers[collection])

    def fail_subscriptions(self, collection: str, reason: str = "permission denied") -> None:
        """Deliver an error to every subscriber of a collection and unregister them."""
        for sub in self._subscribers.pop(collection, set()):
            sub.fail(SubscriptionError(f"{collection}: {reason}"))

    async def subscribe(self, collection: str) -> Subscription:
        sub = Subscription(collection, on_cancel=self._release)
        self._subscribers[collection].add(sub)
        sub.push(self._snapshot(collection))
        return sub

    async def write_merge(self, collection: str, doc_id: str | None, fields: Document) -> str:
        doc_id = doc_id or uuid4().hex
        existing = self.collections[collection].get(doc_id, {})
        self.collections[collection][doc_id] = {**existing, **copy.deepcopy(fields)}
        self._broadcast(collection)
        return doc_id

    async def delete(self, collection: str, doc_id: str) -> None:
        if self.collections[collection].pop(doc_id, None) is not None:
            self._broadcast(collection)

    async def get_all(self, collection: str) -> list[Document]:
        return self._snapshot(collection)

    async def close(self) -> None:
        for subs in list(self._subscribers.values()):
            for sub in list(subs):
                sub.cancel()
