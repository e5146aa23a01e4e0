"""Identity provider client.

The rest of the app talks to the provider through the ``AuthService``
protocol. ``SupabaseAuthService`` is the production adapter over the
Supabase ``auth`` namespace; it turns Supabase objects into ``AuthSession``
and Supabase/transport failures into ``AuthServiceError``.
"""

import logging
from enum import Enum
from typing import Any, Callable, Protocol

import httpx
from supabase import AuthError, Client

from mediconnect.db.client import create_supabase_client
from mediconnect.exceptions import AuthServiceError
from mediconnect.models.identity import AuthSession

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    """Session-change events pushed by the identity provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"

    @classmethod
    def parse(cls, value: str) -> "AuthEvent | None":
        try:
            return cls(value)
        except ValueError:
            return None


SessionChangeHandler = Callable[[AuthEvent, AuthSession | None], None]


class Subscription(Protocol):
    """Handle returned by ``on_session_change``."""

    def unsubscribe(self) -> None:
        ...


class AuthService(Protocol):
    """Protocol for the identity provider."""

    async def get_current_session(self) -> AuthSession | None:
        """Return the persisted session, if any."""
        ...

    def on_session_change(self, handler: SessionChangeHandler) -> Subscription:
        """Register a handler for session-change events."""
        ...

    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> AuthSession | None:
        ...

    async def sign_out(self) -> None:
        ...

    async def update_user(self, metadata: dict[str, Any]) -> AuthSession:
        ...


def _session_from_user(user: Any) -> AuthSession:
    """Build an AuthSession from a Supabase ``User``."""
    return AuthSession(
        user_id=str(user.id),
        email=user.email,
        user_metadata=dict(user.user_metadata or {}),
    )


class SupabaseAuthService:
    """AuthService backed by Supabase Auth."""

    def __init__(self, client: Client | None = None) -> None:
        self.client: Client = client if client is not None else create_supabase_client()

    async def get_current_session(self) -> AuthSession | None:
        try:
            session = self.client.auth.get_session()
        except (AuthError, httpx.HTTPError) as e:
            raise AuthServiceError(str(e), operation="get_session") from e

        if session is None or session.user is None:
            return None
        return _session_from_user(session.user)

    def on_session_change(self, handler: SessionChangeHandler) -> Subscription:
        def _callback(event: str, session: Any) -> None:
            parsed = AuthEvent.parse(event)
            if parsed is None:
                logger.debug(f"Ignoring unknown auth event {event!r}")
                return
            payload = None
            if session is not None and session.user is not None:
                payload = _session_from_user(session.user)
            handler(parsed, payload)

        return self.client.auth.on_auth_state_change(_callback)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except (AuthError, httpx.HTTPError) as e:
            raise AuthServiceError(str(e), operation="sign_in") from e

        if response.user is None:
            raise AuthServiceError("No user returned", operation="sign_in")
        return _session_from_user(response.user)

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> AuthSession | None:
        try:
            response = self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": metadata},
                }
            )
        except (AuthError, httpx.HTTPError) as e:
            raise AuthServiceError(str(e), operation="sign_up") from e

        if response.user is None:
            return None
        return _session_from_user(response.user)

    async def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as e:
            raise AuthServiceError(str(e), operation="sign_out") from e

    async def update_user(self, metadata: dict[str, Any]) -> AuthSession:
        try:
            response = self.client.auth.update_user({"data": metadata})
        except (AuthError, httpx.HTTPError) as e:
            raise AuthServiceError(str(e), operation="update_user") from e

        if response.user is None:
            raise AuthServiceError("No user returned", operation="update_user")
        return _session_from_user(response.user)
