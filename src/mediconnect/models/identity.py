"""Identity models for the signed-in principal."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "India"


class Role(str, Enum):
    """Platform role controlling route access and navigation."""

    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


# Where a user lands after switching to a role
ROLE_LANDING_PATHS: dict[Role, str] = {
    Role.ADMIN: "/admin",
    Role.DOCTOR: "/doctor-panel",
    Role.PATIENT: "/",
}


class AuthSession(BaseModel):
    """Session payload handed back by the identity provider."""

    user_id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class Identity(BaseModel):
    """The authenticated principal as seen by the rest of the app."""

    id: str
    email: str = ""
    name: str | None = None
    phone: str | None = None
    location: str = DEFAULT_LOCATION
    role: Role = Role.PATIENT

    @classmethod
    def from_session(
        cls,
        session: AuthSession,
        default_location: str = DEFAULT_LOCATION,
    ) -> "Identity":
        """Map a provider session into an Identity.

        Missing metadata falls back to the documented defaults: location to
        ``default_location`` and role to patient. Unknown role strings are
        treated as missing.

        Args:
            session: The provider session
            default_location: Location used when the metadata has none

        Returns:
            The mapped Identity
        """
        metadata = session.user_metadata or {}
        return cls(
            id=session.user_id,
            email=session.email or "",
            name=metadata_text(metadata.get("name")),
            phone=metadata_text(metadata.get("phone")),
            location=metadata_text(metadata.get("location")) or default_location,
            role=parse_role(metadata.get("role")),
        )


def metadata_text(value: Any) -> str | None:
    """Read a free-form metadata value as text.

    Numbers are stringified (phones are often stored as integers); containers
    and empty strings count as missing.
    """
    if value is None or isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)):
        return str(value)
    logger.warning(f"Ignoring non-text metadata value of type {type(value).__name__}")
    return None


def parse_role(value: Any) -> Role:
    """Parse a role from free-form metadata, defaulting to patient."""
    if not value:
        return Role.PATIENT
    try:
        return Role(value)
    except (TypeError, ValueError):
        logger.warning(f"Unknown role {value!r} in user metadata, using patient")
        return Role.PATIENT
