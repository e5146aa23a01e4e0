"""Auth provider - the single owner of the session store.

Subscribes to the identity provider's session-change stream, hydrates the
store on start-up and exposes the account operations (login, register,
logout, profile and role updates). Operations never raise: every outcome is
reported through the injected notifier and failures are logged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mediconnect.auth.service import AuthEvent, AuthService, Subscription
from mediconnect.auth.store import SessionStore
from mediconnect.exceptions import (
    AuthServiceError,
    InvalidRoleError,
    RoleChangeNotPermittedError,
    UnauthenticatedError,
)
from mediconnect.models.identity import (
    DEFAULT_LOCATION,
    ROLE_LANDING_PATHS,
    AuthSession,
    Identity,
    Role,
)
from mediconnect.models.session import SessionState
from mediconnect.services.notifier import Notifier, ToastFeed, failure, success

logger = logging.getLogger(__name__)

_SIGN_IN_EVENTS = frozenset({AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED})


class AuthProvider:
    """Owns the session store and its subscription to the identity provider.

    Usage:
        async with AuthProvider(service) as auth:
            await auth.login("a@example.com", "secret")
            state = auth.state
    """

    def __init__(
        self,
        service: AuthService,
        store: SessionStore | None = None,
        notifier: Notifier | None = None,
        default_location: str = DEFAULT_LOCATION,
        allow_self_role_elevation: bool = False,
    ) -> None:
        self._service = service
        self._store = store if store is not None else SessionStore()
        self._notify = notifier if notifier is not None else ToastFeed()
        self._default_location = default_location
        self._allow_self_role_elevation = allow_self_role_elevation
        self._subscription: Subscription | None = None
        self._started = False
        # Serialises account operations so their writes never interleave
        self._lock = asyncio.Lock()

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def notifier(self) -> Notifier:
        return self._notify

    @property
    def state(self) -> SessionState:
        return self._store.snapshot()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Subscribe to session changes, then hydrate from the current session.

        The subscription is registered first so an event delivered while the
        session fetch is in flight is not lost. The fetched session is only
        applied if no event has written to the store in the meantime.
        """
        if self._started:
            return
        self._started = True

        self._subscription = self._service.on_session_change(self._handle_event)
        since = self._store.version

        try:
            session = await self._service.get_current_session()
            if session is not None:
                if self._store.set_identity(self._to_identity(session), since=since):
                    logger.info(f"Session restored for user {session.user_id}")
                else:
                    logger.info("Discarded startup session, a newer auth event arrived")
        except AuthServiceError as e:
            logger.error(f"Failed to fetch current session: {e.message}")
        except Exception as e:
            logger.exception(f"Unexpected error fetching current session: {e}")
        finally:
            self._store.finish_hydration()

    async def close(self) -> None:
        """Release the session-change subscription. Idempotent."""
        subscription, self._subscription = self._subscription, None
        if subscription is None:
            return
        try:
            subscription.unsubscribe()
        except Exception as e:
            logger.error(f"Failed to unsubscribe from auth events: {e}")

    async def __aenter__(self) -> AuthProvider:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Event handling
    # -------------------------------------------------------------------------

    def _handle_event(self, event: AuthEvent, session: AuthSession | None) -> None:
        logger.info(f"Auth state changed: {event.value}")

        try:
            if event == AuthEvent.SIGNED_OUT:
                self._store.clear()
            elif event in _SIGN_IN_EVENTS:
                if session is not None:
                    self._store.set_identity(self._to_identity(session))
            elif event == AuthEvent.USER_UPDATED:
                # Refresh fields only; never signs anyone in
                if session is not None and self._store.is_authenticated:
                    self._store.set_identity(self._to_identity(session))
        except Exception as e:
            logger.exception(f"Failed to apply auth event {event.value}: {e}")

    def _to_identity(self, session: AuthSession) -> Identity:
        return Identity.from_session(session, default_location=self._default_location)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> None:
        """Sign in with email and password."""
        with self._store.loading():
            async with self._lock:
                try:
                    session = await self._service.sign_in(email, password)
                    identity = self._to_identity(session)
                except AuthServiceError as e:
                    logger.error(f"Login error: {e.message}")
                    self._notify(failure("Login failed", e.message))
                    return
                except Exception as e:
                    logger.exception(f"Unexpected login error: {e}")
                    self._notify(failure("Login failed", "An unexpected error occurred"))
                    return

                self._store.set_identity(identity)
                self._notify(success("Welcome back!", "You have successfully logged in."))

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        role: Role | str = Role.PATIENT,
    ) -> None:
        """Create an account. Does not sign the caller in."""
        with self._store.loading():
            async with self._lock:
                try:
                    role = _to_role(role)
                    metadata = {
                        "name": name,
                        "role": role.value,
                        "email_verified": True,
                        "phone_verified": False,
                    }
                    created = await self._service.sign_up(email, password, metadata)
                except InvalidRoleError as e:
                    logger.warning(str(e))
                    self._notify(failure("Registration failed", str(e)))
                    return
                except AuthServiceError as e:
                    logger.error(f"Registration error: {e.message}")
                    self._notify(failure("Registration failed", e.message))
                    return
                except Exception as e:
                    logger.exception(f"Unexpected registration error: {e}")
                    self._notify(
                        failure("Registration failed", "An unexpected error occurred")
                    )
                    return

                if created is None:
                    self._notify(
                        failure("Registration failed", "No account was created.")
                    )
                    return

                logger.info(f"Registered user {created.user_id} as {role.value}")
                self._notify(
                    success("Registration successful", "Your account has been created.")
                )

    async def logout(self) -> None:
        """Sign out. Safe to call when already signed out."""
        with self._store.loading():
            async with self._lock:
                try:
                    await self._service.sign_out()
                except AuthServiceError as e:
                    logger.error(f"Logout error: {e.message}")
                    self._notify(failure("Logout failed", e.message))
                    return
                except Exception as e:
                    logger.exception(f"Unexpected logout error: {e}")
                    self._notify(failure("Logout failed", "An unexpected error occurred"))
                    return

                self._store.clear()
                self._notify(
                    success("Logged out", "You have been successfully logged out.")
                )

    async def update_user_profile(
        self,
        name: str | None = None,
        phone: str | None = None,
        location: str | None = None,
        role: Role | str | None = None,
    ) -> Identity | None:
        """Persist profile fields for the signed-in user.

        Only the fields passed are sent; the rest of the metadata is left as is.

        Returns:
            The updated Identity, or None on failure
        """
        with self._store.loading():
            async with self._lock:
                try:
                    current = self._require_identity("Profile update")
                    new_role = _to_role(role) if role is not None else None
                    if new_role is not None:
                        self._check_role_change(current, new_role)
                    changes: dict[str, Any] = {
                        "name": name,
                        "phone": phone,
                        "location": location,
                        "role": new_role.value if new_role is not None else None,
                    }
                    changes = {k: v for k, v in changes.items() if v is not None}
                    session = await self._service.update_user(changes)
                    identity = self._to_identity(session)
                except UnauthenticatedError as e:
                    logger.warning(str(e))
                    self._notify(failure("Update failed", "Please log in to update your profile."))
                    return None
                except InvalidRoleError as e:
                    logger.warning(str(e))
                    self._notify(failure("Update failed", str(e)))
                    return None
                except RoleChangeNotPermittedError as e:
                    logger.warning(str(e))
                    self._notify(failure("Update failed", "You are not allowed to change to that role."))
                    return None
                except AuthServiceError as e:
                    logger.error(f"Profile update error: {e.message}")
                    self._notify(failure("Update failed", e.message))
                    return None
                except Exception as e:
                    logger.exception(f"Unexpected profile update error: {e}")
                    self._notify(failure("Update failed", "An unexpected error occurred"))
                    return None

                self._store.set_identity(identity)
                self._notify(success("Profile updated", "Your profile has been saved."))
                return identity

    async def set_user_role(self, role: Role | str) -> str | None:
        """Switch the signed-in user's role.

        Returns:
            The landing path for the new role, or None on failure
        """
        with self._store.loading():
            async with self._lock:
                try:
                    current = self._require_identity("Role change")
                    new_role = _to_role(role)
                    self._check_role_change(current, new_role)
                    session = await self._service.update_user({"role": new_role.value})
                    identity = self._to_identity(session)
                except UnauthenticatedError as e:
                    logger.warning(str(e))
                    self._notify(failure("Role change failed", "Please log in first."))
                    return None
                except InvalidRoleError as e:
                    logger.warning(str(e))
                    self._notify(failure("Role change failed", str(e)))
                    return None
                except RoleChangeNotPermittedError as e:
                    logger.warning(str(e))
                    self._notify(failure("Role change failed", "You are not allowed to change to that role."))
                    return None
                except AuthServiceError as e:
                    logger.error(f"Role change error: {e.message}")
                    self._notify(failure("Role change failed", e.message))
                    return None
                except Exception as e:
                    logger.exception(f"Unexpected role change error: {e}")
                    self._notify(failure("Role change failed", "An unexpected error occurred"))
                    return None

                self._store.set_identity(identity)
                self._notify(
                    success("Role updated", f"You are now using MediConnect as {identity.role.value}.")
                )
                return ROLE_LANDING_PATHS[identity.role]

    def _require_identity(self, operation: str) -> Identity:
        identity = self._store.identity
        if identity is None:
            raise UnauthenticatedError(operation)
        return identity

    def _check_role_change(self, current: Identity, requested: Role) -> None:
        """Only admins may hand out the admin role, unless elevation is allowed."""
        if requested != Role.ADMIN or current.role == Role.ADMIN:
            return
        if self._allow_self_role_elevation:
            logger.warning(f"Self-service elevation to admin for user {current.id}")
            return
        raise RoleChangeNotPermittedError(current.role.value, requested.value)


def _to_role(value: Role | str) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidRoleError(value) from None
