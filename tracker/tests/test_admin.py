"""Tests for the admin community submissions listing."""

from __future__ import annotations

from unittest.mock import AsyncMock

from conftest import APP_ID, strain_fields

from tracker.services.admin import list_community_submissions
from tracker.services.session import SessionManager
from tracker.store.base import StoreError, public_collection


async def admin_session(auth) -> SessionManager:
    session = SessionManager(auth, admin_prefix="admin_")
    await session.start(auth.mint("admin_0001"))
    return session


async def test_admin_sees_every_submission(store, auth):
    await store.write_merge(public_collection(APP_ID), "c1", strain_fields(userId="u1"))
    await store.write_merge(public_collection(APP_ID), "c2", strain_fields(userId="u2"))

    submissions = await list_community_submissions(store, await admin_session(auth), APP_ID)

    assert sorted(s["id"] for s in submissions) == ["c1", "c2"]


async def test_non_admin_gets_empty_list(store, session):
    await store.write_merge(public_collection(APP_ID), "c1", strain_fields())

    assert await list_community_submissions(store, session, APP_ID) == []


async def test_read_failure_returns_empty_list(store, auth, monkeypatch):
    monkeypatch.setattr(store, "get_all", AsyncMock(side_effect=StoreError("unavailable")))

    assert await list_community_submissions(store, await admin_session(auth), APP_ID) == []
