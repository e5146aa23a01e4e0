"""Page routes. Each view is returned as a JSON page descriptor.

Guarded views take ``Authenticated``, ``AdminOnly`` or ``DoctorOnly``;
everything not matched here falls through to ``not_found_router``.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field

from mediconnect.api.deps import (
    AdminData,
    AdminOnly,
    Authenticated,
    BloodDonations,
    DoctorOnly,
    Profiles,
    Provider,
)
from mediconnect.models.identity import Identity
from mediconnect.models.records import (
    AdminOverview,
    BloodDonation,
    BloodDonationCreate,
    BloodDonor,
    BloodDonorCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])
not_found_router = APIRouter(tags=["pages"])


class PageView(BaseModel):
    """What the client renders for a route."""

    view: str
    identity: Identity | None = None
    data: dict[str, Any] = Field(default_factory=dict)


def _safe_return_path(value: str | None) -> str:
    """Only same-site absolute paths are accepted as a return target."""
    if not value or not value.startswith("/") or value.startswith("//"):
        return "/"
    return value


def _public(view: str):
    async def page(provider: Provider) -> PageView:
        return PageView(view=view, identity=provider.state.identity)

    page.__name__ = f"{view.replace('-', '_')}_page"
    return page


for _path, _view in (
    ("/", "home"),
    ("/consultation", "consultation"),
    ("/pharmacy", "pharmacy"),
    ("/blood-donation", "blood-donation"),
    ("/community", "community"),
    ("/cart", "cart"),
    ("/doctor-registration", "doctor-registration"),
):
    router.add_api_route(_path, _public(_view), methods=["GET"], response_model=PageView)


@router.get("/login", response_model=PageView)
async def login_page(
    provider: Provider,
    return_to: Annotated[str | None, Query(alias="from")] = None,
):
    """Login page; signed-in users are sent on to ``from`` (or home)."""
    state = provider.state
    if state.is_authenticated:
        target = _safe_return_path(return_to)
        logger.debug(f"User is authenticated, redirecting to {target}")
        return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    return PageView(view="login")


# =============================================================================
# Guarded pages
# =============================================================================

@router.get("/profile", response_model=PageView)
async def profile_page(identity: Authenticated, profiles: Profiles) -> PageView:
    """Profile with the user's appointments and, for donors, donations."""
    records = await profiles.records(identity.id)
    return PageView(view="profile", identity=identity, data=records.model_dump(mode="json"))


@router.get("/doctor-panel", response_model=PageView)
async def doctor_panel_page(identity: DoctorOnly) -> PageView:
    return PageView(view="doctor-panel", identity=identity)


@router.get("/admin", response_model=PageView)
async def admin_page(identity: AdminOnly, admin: AdminData) -> PageView:
    overview: AdminOverview = await admin.overview()
    return PageView(view="admin", identity=identity, data=overview.model_dump(mode="json"))


# =============================================================================
# Blood donation actions
# =============================================================================

@router.get("/blood-donation/status")
async def donor_status(identity: Authenticated, service: BloodDonations) -> dict[str, bool]:
    return {"is_donor": await service.check_donor_status(identity.id)}


@router.post(
    "/blood-donation/donors",
    response_model=BloodDonor,
    status_code=status.HTTP_201_CREATED,
)
async def register_donor(
    data: BloodDonorCreate,
    identity: Authenticated,
    service: BloodDonations,
) -> BloodDonor:
    """Register the signed-in user as a donor.

    Raises:
        HTTPException: If the donor could not be stored
    """
    donor = await service.register_donor(identity.id, data)
    if donor is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to register as donor",
        )
    return donor


@router.post("/blood-donation/donations")
async def schedule_donation(
    data: BloodDonationCreate,
    identity: Authenticated,
    service: BloodDonations,
) -> dict[str, bool]:
    return {"scheduled": await service.schedule_donation(identity.id, data)}


@router.get("/blood-donation/donations", response_model=list[BloodDonation])
async def list_donations(identity: Authenticated, service: BloodDonations) -> list[BloodDonation]:
    return await service.get_user_donations(identity.id)


# =============================================================================
# Catch-all
# =============================================================================

@not_found_router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def not_found(request: Request, path: str) -> JSONResponse:
    logger.debug(f"No route for {request.method} /{path}")
    return JSONResponse(
        {"view": "not_found", "path": f"/{path}"},
        status_code=status.HTTP_404_NOT_FOUND,
    )
