"""
Mocked admin listing of every community submission.

Admin status comes from the session's id-prefix placeholder; a real role or
claims system does not exist yet.
"""

from __future__ import annotations

import logging

from tracker.services.session import SessionManager
from tracker.store.base import Document, DocumentStore, StoreError, public_collection

logger = logging.getLogger(__name__)


async def list_community_submissions(store: DocumentStore, session: SessionManager, app_id: str) -> list[Document]:
    """
    One-shot read of the whole community collection.

    Returns an empty list for non-admin sessions or when the read fails.
    """
    if not session.is_admin:
        logger.warning("admin: submissions listing denied for %s", session.display_name)
        return []

    try:
        submissions = await store.get_all(public_collection(app_id))
    except StoreError as e:
        logger.error("admin: submissions fetch failed: %s", e)
        return []

    logger.info("admin: listed %d community submissions", len(submissions))
    return submissions
