"""Role-conditional navigation."""

from mediconnect.models.identity import Identity, Role
from mediconnect.models.navigation import NavEntry, NavigationMenu

PUBLIC_ENTRIES = (
    NavEntry(label="Consultation", path="/consultation"),
    NavEntry(label="Pharmacy", path="/pharmacy"),
    NavEntry(label="Blood Donation", path="/blood-donation"),
    NavEntry(label="Community", path="/community"),
)

FOR_DOCTORS = NavEntry(label="For Doctors", path="/doctor-registration")
DOCTOR_PANEL = NavEntry(label="Doctor Panel", path="/doctor-panel")
ADMIN_PANEL = NavEntry(label="Admin", path="/admin")

PROFILE = NavEntry(label="My Profile", path="/profile")
LOGOUT = NavEntry(label="Logout", path="/auth/logout", method="POST")
LOGIN = NavEntry(label="Login", path="/login")


def navigation_for(identity: Identity | None) -> NavigationMenu:
    """Build the navigation menu for the given identity (or a guest)."""
    role = identity.role if identity is not None else None

    primary = list(PUBLIC_ENTRIES)
    if role != Role.DOCTOR:
        primary.append(FOR_DOCTORS)
    if role == Role.DOCTOR:
        primary.append(DOCTOR_PANEL)
    if role == Role.ADMIN:
        primary.append(ADMIN_PANEL)

    if identity is None:
        return NavigationMenu(
            primary=primary,
            account=[LOGIN],
            display_name="Guest User",
            email="Not logged in",
        )

    return NavigationMenu(
        primary=primary,
        account=[PROFILE, LOGOUT],
        display_name=identity.name or "User",
        email=identity.email,
        role=identity.role,
    )
