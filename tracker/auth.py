"""
Identity provider for the strain tracker.

Anonymous sign-in and custom-token sign-in. Custom tokens are HS256 JWTs
whose ``sub`` claim is the identity to sign in as.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt

from tracker.config import Settings
from tracker.store.base import AuthFailure


def create_custom_token(identity: str, secret: str, algorithm: str = "HS256", expiry_hours: int = 24) -> str:
    """
    Mint a custom sign-in token for an identity.

    Args:
        identity: Identity to encode in the token
        secret: Signing secret
        algorithm: JWT algorithm
        expiry_hours: Lifetime of the token

    Returns:
        Signed JWT string
    """
    now = datetime.now(UTC)
    payload = {
        "sub": identity,
        "exp": now + timedelta(hours=expiry_hours),
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


class AuthProvider:
    """Resolves sign-in requests to opaque identity strings."""

    def __init__(self, settings: Settings):
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.expiry_hours = settings.CUSTOM_TOKEN_EXPIRY_HOURS

    def mint(self, identity: str) -> str:
        """Create a custom token for an identity using the configured secret."""
        return create_custom_token(identity, self.secret, self.algorithm, self.expiry_hours)

    async def sign_in_with_custom_token(self, token: str) -> str:
        """
        Verify a custom token and return its identity.

        Raises:
            AuthFailure: If token sign-in is not configured, or the token is
                invalid, expired, or has no subject
        """
        if not self.secret:
            raise AuthFailure("Custom token sign-in is not configured.")
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise AuthFailure("Custom token expired.") from e
        except jwt.InvalidTokenError as e:
            raise AuthFailure("Invalid custom token.") from e

        identity = payload.get("sub")
        if not identity or not isinstance(identity, str):
            raise AuthFailure("Custom token has no subject.")
        return identity

    async def sign_in_anonymously(self) -> str:
        """Issue a fresh anonymous identity."""
        return uuid4().hex
