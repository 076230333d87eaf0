"""
Mutation gateway: create, update and delete against the private strain log.

Writes are observed through the feeds, never echoed locally. Failures are
logged and reported only through the return value.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from tracker.models.strain import StrainInput, StrainUpdate
from tracker.services.session import SessionManager
from tracker.store.base import DocumentStore, WriteFailure, private_collection, public_collection

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class StrainGateway:
    """All strain write operations for one session."""

    def __init__(self, store: DocumentStore, session: SessionManager, app_id: str) -> None:
        self.store = store
        self.session = session
        self.app_id = app_id

    async def create(self, strain: StrainInput) -> str | None:
        """
        Log a new strain and mirror it to the community collection.

        The two writes are independent: a failed mirror leaves the private
        entry in place.

        Args:
            strain: Validated strain fields

        Returns:
            The new private entry id, or None if nothing was written
        """
        identity = self.session.identity
        if identity is None:
            logger.error("gateway: create rejected, no identity")
            return None

        fields = strain.model_dump(by_alias=True, mode="json")
        now = _now()
        try:
            doc_id = await self.store.write_merge(
                private_collection(self.app_id, identity),
                None,
                {**fields, "userId": identity, "createdAt": now, "updatedAt": now},
            )
        except WriteFailure as e:
            logger.error("gateway: create failed: %s", e)
            return None

        try:
            await self.store.write_merge(
                public_collection(self.app_id),
                None,
                {**fields, "originalDocId": doc_id, "userId": identity, "contributedAt": _now()},
            )
        except WriteFailure as e:
            logger.warning("gateway: community mirror for %s failed: %s", doc_id, e)

        logger.info("gateway: strain logged id=%s", doc_id)
        return doc_id

    async def update(self, doc_id: str, changes: StrainUpdate) -> bool:
        """
        Merge changes onto a private entry, creating it if it does not exist.

        Only fields explicitly set on ``changes`` are written. ``createdAt``
        and the community mirror are left alone.

        Returns:
            True if the write was acknowledged
        """
        identity = self.session.identity
        if identity is None:
            logger.error("gateway: update rejected, no identity")
            return False

        fields = changes.model_dump(by_alias=True, mode="json", exclude_unset=True)
        try:
            await self.store.write_merge(
                private_collection(self.app_id, identity),
                doc_id,
                {**fields, "userId": identity, "updatedAt": _now()},
            )
        except WriteFailure as e:
            logger.error("gateway: update of %s failed: %s", doc_id, e)
            return False

        logger.info("gateway: strain updated id=%s", doc_id)
        return True

    async def delete(self, doc_id: str) -> bool:
        """
        Remove a private entry. Its community mirror stays.

        Returns:
            True if the delete was acknowledged (including a missing id)
        """
        identity = self.session.identity
        if identity is None:
            logger.error("gateway: delete rejected, no identity")
            return False

        try:
            await self.store.delete(private_collection(self.app_id, identity), doc_id)
        except WriteFailure as e:
            logger.error("gateway: delete of %s failed: %s", doc_id, e)
            return False

        logger.info("gateway: strain deleted id=%s", doc_id)
        return True
