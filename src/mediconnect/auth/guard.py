"""Route guard - decides whether a protected view may render.

The guard is a pure function of a session snapshot and an optional
required role, evaluated on every request. It has four states:

    loading          hydration or an account operation is in flight
    unauthenticated  no identity
    wrong_role       identity present, role differs from the required one
    authorized       render the view

Only ``loading`` is transient; the rest hold until the session changes.
"""

import logging
from enum import Enum

from pydantic import BaseModel

from mediconnect.models.identity import Role
from mediconnect.models.session import SessionState

logger = logging.getLogger(__name__)

HOME_PATH = "/"
LOGIN_PATH = "/login"
DOCTOR_REGISTRATION_PATH = "/doctor-registration"


class GuardState(str, Enum):
    """Where a session stands relative to a protected view."""

    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    WRONG_ROLE = "wrong_role"
    AUTHORIZED = "authorized"


class GuardOutcome(str, Enum):
    """What the router should do."""

    LOADING = "loading"    # Show a placeholder, neither content nor redirect
    REDIRECT = "redirect"
    RENDER = "render"


class GuardDecision(BaseModel):
    """Result of evaluating the guard."""

    state: GuardState
    outcome: GuardOutcome
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome == GuardOutcome.RENDER


def classify(state: SessionState, required_role: Role | None = None) -> GuardState:
    """Place a session snapshot in the guard's state machine."""
    if state.is_loading:
        return GuardState.LOADING
    if not state.is_authenticated:
        return GuardState.UNAUTHENTICATED
    if required_role is not None and state.identity.role != required_role:
        return GuardState.WRONG_ROLE
    return GuardState.AUTHORIZED


def wrong_role_redirect(required_role: Role) -> str:
    """Where to send a user who lacks ``required_role``."""
    if required_role == Role.DOCTOR:
        return DOCTOR_REGISTRATION_PATH
    # Admin pages and anything else fall back to home
    return HOME_PATH


def decide(
    state: SessionState,
    required_role: Role | None = None,
    login_path: str = LOGIN_PATH,
) -> GuardDecision:
    """Decide between loading, redirect and render.

    Args:
        state: Current session snapshot
        required_role: Role the view needs, if any
        login_path: Where unauthenticated users are sent

    Returns:
        The guard decision
    """
    guard_state = classify(state, required_role)

    if guard_state == GuardState.LOADING:
        return GuardDecision(state=guard_state, outcome=GuardOutcome.LOADING)

    if guard_state == GuardState.UNAUTHENTICATED:
        logger.debug(f"User not authenticated, redirecting to {login_path}")
        return GuardDecision(
            state=guard_state,
            outcome=GuardOutcome.REDIRECT,
            redirect_to=login_path,
        )

    if guard_state == GuardState.WRONG_ROLE:
        target = wrong_role_redirect(required_role)
        logger.debug(
            f"Role {required_role.value} required, user has role "
            f"{state.identity.role.value}, redirecting to {target}"
        )
        return GuardDecision(
            state=guard_state,
            outcome=GuardOutcome.REDIRECT,
            redirect_to=target,
        )

    return GuardDecision(state=guard_state, outcome=GuardOutcome.RENDER)
