"""
Live strain feeds: the private log and the community collection.

Each feed is fed by one Subscription and one consumer task; the task is the
only writer of its list and replaces the whole list on every snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from tracker.models.strain import CommunityStrainEntry, StrainEntry
from tracker.store.base import (
    Document,
    DocumentStore,
    Subscription,
    SubscriptionError,
    private_collection,
    public_collection,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], Awaitable[None]]

EntryT = TypeVar("EntryT", bound=BaseModel)


def _parse_snapshot(documents: list[Document], model: type[EntryT], label: str) -> list[EntryT]:
    """Convert snapshot documents to models, skipping unreadable ones."""
    entries: list[EntryT] = []
    for doc in documents:
        try:
            entries.append(model.model_validate(doc))
        except ValidationError as e:
            logger.warning("feeds: skipping unreadable %s document id=%s: %s", label, doc.get("id"), e)
    return entries


class StrainFeeds:
    """Private and community strain lists kept in sync with the store."""

    def __init__(self, store: DocumentStore, app_id: str) -> None:
        self.store = store
        self.app_id = app_id
        self.identity: str | None = None
        self.user_strains: list[StrainEntry] = []
        self.community_strains: list[CommunityStrainEntry] = []
        self._subscriptions: list[Subscription] = []
        self._tasks: list[asyncio.Task] = []
        self._listeners: list[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a coroutine called after either list is replaced."""
        self._listeners.append(listener)

    async def _notify(self) -> None:
        for listener in self._listeners:
            try:
                await listener()
            except Exception:
                logger.exception("feeds: change listener failed")

    async def attach(self, identity: str | None) -> None:
        """
        Point the feeds at an identity.

        Releases any existing subscriptions first. A None identity leaves the
        feeds detached.
        """
        await self.detach()
        self.identity = identity
        if identity is None:
            return

        await self._open(private_collection(self.app_id, identity), self._set_user_strains, "private")
        await self._open(public_collection(self.app_id), self._set_community_strains, "community")

    async def detach(self) -> None:
        """Cancel both subscriptions and wait for their consumers to stop."""
        for sub in self._subscriptions:
            sub.cancel()
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._subscriptions = []
        self._tasks = []

    async def _open(self, collection: str, assign: Callable[[list[Document]], None], label: str) -> None:
        try:
            sub = await self.store.subscribe(collection)
        except SubscriptionError as e:
            logger.warning("feeds: could not subscribe to %s strains: %s", label, e)
            return
        self._subscriptions.append(sub)
        self._tasks.append(asyncio.create_task(self._consume(sub, assign, label)))

    async def _consume(self, sub: Subscription, assign: Callable[[list[Document]], None], label: str) -> None:
        try:
            async for documents in sub:
                assign(documents)
                await self._notify()
        except SubscriptionError as e:
            # Keep the last snapshot; no retry.
            logger.warning("feeds: error fetching %s strains: %s", label, e)

    def _set_user_strains(self, documents: list[Document]) -> None:
        self.user_strains = _parse_snapshot(documents, StrainEntry, "private")
        logger.info("feeds: loaded %d private strains", len(self.user_strains))

    def _set_community_strains(self, documents: list[Document]) -> None:
        self.community_strains = _parse_snapshot(documents, CommunityStrainEntry, "community")
        logger.info("feeds: loaded %d community strains", len(self.community_strains))
