"""Tests for the Supabase AuthService adapter."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest

from mediconnect.auth.service import AuthEvent, SupabaseAuthService
from mediconnect.exceptions import AuthServiceError
from mediconnect.models.identity import AuthSession


def make_user(user_id="u1", email="a@example.com", **metadata):
    return SimpleNamespace(id=user_id, email=email, user_metadata=metadata)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def service(client) -> SupabaseAuthService:
    return SupabaseAuthService(client)


# ---------------------------------------------------------------------------
# TestSessionRetrieval
# ---------------------------------------------------------------------------

class TestSessionRetrieval:
    @pytest.mark.asyncio
    async def test_maps_session_user(self, service, client):
        client.auth.get_session.return_value = SimpleNamespace(
            user=make_user(name="Asha", role="doctor")
        )

        session = await service.get_current_session()

        assert session == AuthSession(
            user_id="u1",
            email="a@example.com",
            user_metadata={"name": "Asha", "role": "doctor"},
        )

    @pytest.mark.asyncio
    async def test_no_session(self, service, client):
        client.auth.get_session.return_value = None

        assert await service.get_current_session() is None

    @pytest.mark.asyncio
    async def test_transport_error_is_converted(self, service, client):
        client.auth.get_session.side_effect = httpx.ConnectError("unreachable")

        with pytest.raises(AuthServiceError) as exc_info:
            await service.get_current_session()

        assert exc_info.value.operation == "get_session"


# ---------------------------------------------------------------------------
# TestOperations
# ---------------------------------------------------------------------------

class TestOperations:
    @pytest.mark.asyncio
    async def test_sign_in_passes_credentials(self, service, client):
        client.auth.sign_in_with_password.return_value = SimpleNamespace(user=make_user())

        session = await service.sign_in("a@example.com", "secret1")

        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "a@example.com", "password": "secret1"}
        )
        assert session.user_id == "u1"

    @pytest.mark.asyncio
    async def test_sign_in_error(self, service, client):
        client.auth.sign_in_with_password.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(AuthServiceError) as exc_info:
            await service.sign_in("a@example.com", "secret1")

        assert exc_info.value.operation == "sign_in"
        assert "slow" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_sign_up_sends_metadata_as_options_data(self, service, client):
        client.auth.sign_up.return_value = SimpleNamespace(user=make_user(role="doctor"))

        await service.sign_up("a@example.com", "secret1", {"name": "A", "role": "doctor"})

        client.auth.sign_up.assert_called_once_with(
            {
                "email": "a@example.com",
                "password": "secret1",
                "options": {"data": {"name": "A", "role": "doctor"}},
            }
        )

    @pytest.mark.asyncio
    async def test_update_user_sends_data(self, service, client):
        client.auth.update_user.return_value = SimpleNamespace(user=make_user(name="X"))

        session = await service.update_user({"name": "X"})

        client.auth.update_user.assert_called_once_with({"data": {"name": "X"}})
        assert session.user_metadata["name"] == "X"

    @pytest.mark.asyncio
    async def test_sign_out(self, service, client):
        await service.sign_out()

        client.auth.sign_out.assert_called_once_with()


# ---------------------------------------------------------------------------
# TestSessionChange
# ---------------------------------------------------------------------------

class TestSessionChange:
    def _subscribe(self, service, client):
        captured = {}
        subscription = MagicMock()

        def register(callback):
            captured["callback"] = callback
            return subscription

        client.auth.on_auth_state_change.side_effect = register
        handler = MagicMock()
        returned = service.on_session_change(handler)
        return captured["callback"], handler, returned, subscription

    def test_events_are_typed(self, service, client):
        callback, handler, returned, subscription = self._subscribe(service, client)

        callback("SIGNED_IN", SimpleNamespace(user=make_user(role="admin")))

        event, session = handler.call_args.args
        assert event == AuthEvent.SIGNED_IN
        assert session.user_metadata["role"] == "admin"
        assert returned is subscription

    def test_signed_out_has_no_session(self, service, client):
        callback, handler, _, _ = self._subscribe(service, client)

        callback("SIGNED_OUT", None)

        handler.assert_called_once_with(AuthEvent.SIGNED_OUT, None)

    def test_unknown_events_are_dropped(self, service, client):
        callback, handler, _, _ = self._subscribe(service, client)

        callback("SOMETHING_NEW", None)

        handler.assert_not_called()
