"""Dependencies and route guards for the HTTP layer."""

import logging
from typing import Annotated, Callable

from fastapi import Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from mediconnect.auth.guard import GuardOutcome, decide
from mediconnect.auth.provider import AuthProvider
from mediconnect.config import get_settings
from mediconnect.db.client import DatabaseClient
from mediconnect.models.identity import Identity, Role
from mediconnect.services.admin import AdminDataService
from mediconnect.services.blood_donation import BloodDonationService
from mediconnect.services.profile import ProfileService
from mediconnect.services.notifier import ToastFeed

logger = logging.getLogger(__name__)


class RedirectRequired(Exception):
    """Raised by a guard to send the client elsewhere."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Redirect to {path}")


class SessionLoading(Exception):
    """Raised by a guard while the session is still resolving."""


async def redirect_handler(request: Request, exc: RedirectRequired) -> RedirectResponse:
    return RedirectResponse(exc.path, status_code=303)


async def loading_handler(request: Request, exc: SessionLoading) -> JSONResponse:
    return JSONResponse(
        {"view": "loading"},
        status_code=503,
        headers={"Retry-After": "1"},
    )


def get_auth_provider(request: Request) -> AuthProvider:
    """The provider owned by the running app."""
    return request.app.state.auth_provider


def get_toast_feed(request: Request) -> ToastFeed:
    return request.app.state.toast_feed


def get_db_client(request: Request) -> DatabaseClient:
    return request.app.state.db


def get_blood_donation_service(
    db: Annotated[DatabaseClient, Depends(get_db_client)],
    feed: Annotated[ToastFeed, Depends(get_toast_feed)],
) -> BloodDonationService:
    return BloodDonationService(db, feed)


def get_profile_service(
    db: Annotated[DatabaseClient, Depends(get_db_client)],
    donations: Annotated[BloodDonationService, Depends(get_blood_donation_service)],
) -> ProfileService:
    return ProfileService(db, donations)


def get_admin_service(
    db: Annotated[DatabaseClient, Depends(get_db_client)],
    feed: Annotated[ToastFeed, Depends(get_toast_feed)],
) -> AdminDataService:
    return AdminDataService(db, feed)


def guarded(
    required_role: Role | None = None,
    login_path: str | None = None,
) -> Callable:
    """Build a dependency that runs the route guard.

    Resolves to the signed-in Identity when the view may render; otherwise
    raises ``SessionLoading`` or ``RedirectRequired``.

    Args:
        required_role: Role the view needs, if any
        login_path: Where to send unauthenticated users (defaults to settings)
    """

    async def dependency(
        provider: Annotated[AuthProvider, Depends(get_auth_provider)],
    ) -> Identity:
        state = provider.state
        decision = decide(
            state,
            required_role=required_role,
            login_path=login_path or get_settings().login_path,
        )

        if decision.outcome == GuardOutcome.LOADING:
            raise SessionLoading()
        if decision.outcome == GuardOutcome.REDIRECT:
            raise RedirectRequired(decision.redirect_to)

        logger.debug(f"Access granted to {state.identity.id} (role required: {required_role})")
        return state.identity

    return dependency


# Type aliases for dependency injection
Provider = Annotated[AuthProvider, Depends(get_auth_provider)]
Feed = Annotated[ToastFeed, Depends(get_toast_feed)]
Database = Annotated[DatabaseClient, Depends(get_db_client)]
BloodDonations = Annotated[BloodDonationService, Depends(get_blood_donation_service)]
AdminData = Annotated[AdminDataService, Depends(get_admin_service)]
Profiles = Annotated[ProfileService, Depends(get_profile_service)]
Authenticated = Annotated[Identity, Depends(guarded())]
AdminOnly = Annotated[Identity, Depends(guarded(Role.ADMIN))]
DoctorOnly = Annotated[Identity, Depends(guarded(Role.DOCTOR))]
