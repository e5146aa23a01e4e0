"""FastAPI routes for the session and account operations."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from mediconnect import __version__
from mediconnect.api.deps import Database, Feed, Provider
from mediconnect.auth.navigation import navigation_for
from mediconnect.models.identity import Identity, Role
from mediconnect.models.navigation import NavigationMenu
from mediconnect.models.notification import Notification
from mediconnect.models.session import SessionState

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: Role = Role.PATIENT


class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    phone: str | None = None
    location: str | None = None
    role: Role | None = None


class ProfileUpdateResponse(BaseModel):
    identity: Identity | None = None


class RoleChangeRequest(BaseModel):
    role: Role


# =============================================================================
# Session
# =============================================================================

@router.get("/health")
async def health_check(provider: Provider, db: Database) -> dict[str, Any]:
    """Health check with session and database status."""
    state = provider.state
    return {
        "status": "ok",
        "version": __version__,
        "session": {
            "hydrated": provider.store.is_hydrated,
            "authenticated": state.is_authenticated,
            "loading": state.is_loading,
        },
        "database": await db.health_check(),
    }


@router.get("/session", response_model=SessionState)
async def get_session(provider: Provider) -> SessionState:
    """Current session snapshot."""
    return provider.state


@router.get("/navigation", response_model=NavigationMenu)
async def get_navigation(provider: Provider) -> NavigationMenu:
    """Navigation entries visible to the current user."""
    return navigation_for(provider.state.identity)


@router.get("/notifications", response_model=list[Notification])
async def drain_notifications(feed: Feed) -> list[Notification]:
    """Return and clear pending notifications."""
    return feed.drain()


# =============================================================================
# Account operations
# =============================================================================

@router.post("/auth/login", response_model=SessionState)
async def login(data: LoginRequest, provider: Provider) -> SessionState:
    """Sign in. Failures are reported through /notifications."""
    await provider.login(data.email, data.password)
    return provider.state


@router.post("/auth/register", response_model=SessionState)
async def register(data: RegisterRequest, provider: Provider) -> SessionState:
    """Create an account. The caller stays signed out."""
    await provider.register(data.email, data.password, data.name, data.role)
    return provider.state


@router.post("/auth/logout", response_model=SessionState)
async def logout(provider: Provider) -> SessionState:
    """Sign out."""
    await provider.logout()
    return provider.state


@router.patch("/auth/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    data: ProfileUpdateRequest,
    provider: Provider,
) -> ProfileUpdateResponse:
    """Update profile fields of the signed-in user."""
    identity = await provider.update_user_profile(**data.model_dump(exclude_none=True))
    return ProfileUpdateResponse(identity=identity)


@router.post("/auth/role")
async def change_role(data: RoleChangeRequest, provider: Provider) -> RedirectResponse:
    """Switch role and navigate to the role's landing page.

    Raises:
        HTTPException: If the role change was refused or failed
    """
    landing = await provider.set_user_role(data.role)
    if landing is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Role change failed",
        )
    return RedirectResponse(landing, status_code=status.HTTP_303_SEE_OTHER)
