"""Global test configuration for MediConnect."""

import asyncio
import os
from typing import Any

import pytest

from mediconnect.exceptions import AuthServiceError
from mediconnect.models.identity import AuthSession


@pytest.fixture(autouse=True, scope="session")
def _set_test_env_vars():
    """Set dummy environment variables for Settings validation.

    Only sets values that aren't already present, so real env vars take
    precedence.
    """
    defaults = {
        "SUPABASE_URL": "https://test.supabase.co",
        "SUPABASE_KEY": "test-supabase-key",
    }
    originals = {}
    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
            originals[key] = None
        else:
            originals[key] = os.environ[key]

    # Clear the lru_cache on get_settings so it picks up the new env vars
    from mediconnect.config import get_settings
    get_settings.cache_clear()

    yield

    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Fake identity provider
# ---------------------------------------------------------------------------

class FakeSubscription:
    """Subscription handle that detaches its handler on unsubscribe."""

    def __init__(self, service: "FakeAuthService", handler) -> None:
        self._service = service
        self._handler = handler
        self.unsubscribe_calls = 0

    def unsubscribe(self) -> None:
        self.unsubscribe_calls += 1
        if self._handler in self._service.handlers:
            self._service.handlers.remove(self._handler)


class FakeAuthService:
    """In-memory AuthService.

    ``calls`` records the order of every call. Set ``failures[name]`` to make
    an operation raise ``AuthServiceError``. Set ``fetch_gate`` to hold
    ``get_current_session`` until the event is set.
    """

    def __init__(self, session: AuthSession | None = None) -> None:
        self.session = session
        self.accounts: dict[str, tuple[str, AuthSession]] = {}
        self.handlers: list = []
        self.subscriptions: list[FakeSubscription] = []
        self.calls: list[str] = []
        self.failures: dict[str, AuthServiceError] = {}
        self.fetch_gate: asyncio.Event | None = None
        self.sign_in_gate: asyncio.Event | None = None

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def add_account(self, email: str, password: str, **metadata: Any) -> AuthSession:
        session = AuthSession(
            user_id=f"user-{len(self.accounts) + 1}",
            email=email,
            user_metadata=metadata,
        )
        self.accounts[email] = (password, session)
        return session

    def emit(self, event, session: AuthSession | None = None) -> None:
        for handler in list(self.handlers):
            handler(event, session)

    async def get_current_session(self) -> AuthSession | None:
        self._maybe_fail("get_current_session")
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        return self.session

    def on_session_change(self, handler) -> FakeSubscription:
        self.calls.append("on_session_change")
        self.handlers.append(handler)
        subscription = FakeSubscription(self, handler)
        self.subscriptions.append(subscription)
        return subscription

    async def sign_in(self, email: str, password: str) -> AuthSession:
        self._maybe_fail("sign_in")
        if self.sign_in_gate is not None:
            await self.sign_in_gate.wait()
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthServiceError("Invalid login credentials", operation="sign_in")
        self.session = account[1]
        return self.session

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> AuthSession:
        self._maybe_fail("sign_up")
        if email in self.accounts:
            raise AuthServiceError("User already registered", operation="sign_up")
        return self.add_account(email, password, **metadata)

    async def sign_out(self) -> None:
        self._maybe_fail("sign_out")
        self.session = None

    async def update_user(self, metadata: dict[str, Any]) -> AuthSession:
        self._maybe_fail("update_user")
        if self.session is None:
            raise AuthServiceError("Auth session missing!", operation="update_user")
        self.session = self.session.model_copy(
            update={"user_metadata": {**self.session.user_metadata, **metadata}}
        )
        return self.session


@pytest.fixture
def auth_service() -> FakeAuthService:
    return FakeAuthService()


@pytest.fixture
def patient_session() -> AuthSession:
    return AuthSession(
        user_id="user-patient",
        email="asha@example.com",
        user_metadata={"name": "Asha", "role": "patient"},
    )


@pytest.fixture
def admin_session() -> AuthSession:
    return AuthSession(
        user_id="user-admin",
        email="admin@example.com",
        user_metadata={"name": "Admin", "role": "admin"},
    )
