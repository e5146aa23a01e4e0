"""Data models for MediConnect."""

from mediconnect.models.identity import (
    ROLE_LANDING_PATHS,
    AuthSession,
    Identity,
    Role,
    parse_role,
)
from mediconnect.models.navigation import NavEntry, NavigationMenu
from mediconnect.models.notification import Notification, NotificationVariant
from mediconnect.models.session import SessionState

__all__ = [
    "ROLE_LANDING_PATHS",
    "AuthSession",
    "Identity",
    "NavEntry",
    "NavigationMenu",
    "Notification",
    "NotificationVariant",
    "Role",
    "SessionState",
    "parse_role",
]
