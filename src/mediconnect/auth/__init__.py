"""Session and authorization: store, provider, route guard, navigation."""

from mediconnect.auth.guard import (
    GuardDecision,
    GuardOutcome,
    GuardState,
    classify,
    decide,
)
from mediconnect.auth.navigation import navigation_for
from mediconnect.auth.provider import AuthProvider
from mediconnect.auth.service import (
    AuthEvent,
    AuthService,
    SupabaseAuthService,
)
from mediconnect.auth.store import SessionStore

__all__ = [
    "AuthEvent",
    "AuthProvider",
    "AuthService",
    "GuardDecision",
    "GuardOutcome",
    "GuardState",
    "SessionStore",
    "SupabaseAuthService",
    "classify",
    "decide",
    "navigation_for",
]
