"""MediConnect - session and authorization server for the patient platform."""

__version__ = "0.1.0"

from mediconnect.exceptions import (
    AuthServiceError,
    InvalidRoleError,
    RoleChangeNotPermittedError,
    UnauthenticatedError,
)

__all__ = [
    "__version__",
    "AuthServiceError",
    "InvalidRoleError",
    "RoleChangeNotPermittedError",
    "UnauthenticatedError",
]
