"""
Session manager: resolves one identity per client and announces it.

Usage:
    session = SessionManager(auth, admin_prefix="admin_")
    session.add_listener(feeds.attach)
    await session.start(token)
    await session.ready.wait()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from tracker.auth import AuthProvider
from tracker.store.base import AuthFailure

logger = logging.getLogger(__name__)

IdentityListener = Callable[[str | None], Awaitable[None]]


def format_user_id(identity: str | None) -> str:
    """Shorten an identity for display, e.g. ``abcd...wxyz``."""
    if not identity:
        return "Guest"
    return f"{identity[:4]}...{identity[-4:]}"


class SessionManager:
    """Sign-in bootstrap with a single anonymous fallback."""

    def __init__(self, auth: AuthProvider, admin_prefix: str = "admin_") -> None:
        self.auth = auth
        self.admin_prefix = admin_prefix
        self.identity: str | None = None
        self.ready = asyncio.Event()
        self._listeners: list[IdentityListener] = []
        self._started = False

    @property
    def authenticated(self) -> bool:
        return self.identity is not None

    @property
    def is_admin(self) -> bool:
        # Placeholder role check by id prefix; not an authorization mechanism.
        return self.identity is not None and self.identity.startswith(self.admin_prefix)

    @property
    def display_name(self) -> str:
        return format_user_id(self.identity)

    def add_listener(self, listener: IdentityListener) -> None:
        """Register a coroutine called with the identity once it resolves."""
        self._listeners.append(listener)

    async def start(self, token: str | None = None) -> str | None:
        """
        Resolve the session identity.

        Tries the custom token when one is given, otherwise signs in
        anonymously. A rejected token falls back to anonymous sign-in once.
        Sets ``ready`` exactly once, whether or not an identity resolved.

        Returns:
            The resolved identity, or None if sign-in failed
        """
        if self._started:
            return self.identity
        self._started = True

        identity: str | None = None
        if token:
            try:
                identity = await self.auth.sign_in_with_custom_token(token)
                logger.info("session: signed in with custom token")
            except AuthFailure as e:
                logger.warning("session: custom token sign-in failed, falling back to anonymous: %s", e)

        if identity is None:
            try:
                identity = await self.auth.sign_in_anonymously()
                logger.info("session: signed in anonymously")
            except AuthFailure as e:
                logger.error("session: anonymous sign-in failed: %s", e)

        self.identity = identity
        if self.is_admin:
            logger.info("session: admin role detected for %s", self.display_name)
        self.ready.set()

        for listener in self._listeners:
            await listener(identity)
        return identity
