"""Custom exceptions for MediConnect."""


class AuthServiceError(Exception):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        self.message = message
        self.operation = operation
        super().__init__(message)


class UnauthenticatedError(Exception):
    """Raised when an operation needs a signed-in identity and there is none."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} requires a signed-in user")


class RoleChangeNotPermittedError(Exception):
    """Raised when a user tries to grant themselves a privileged role."""

    def __init__(self, current_role: str, requested_role: str) -> None:
        self.current_role = current_role
        self.requested_role = requested_role
        super().__init__(
            f"Role change not permitted: {current_role} -> {requested_role}"
        )


class InvalidRoleError(ValueError):
    """Raised when a role name is not one the platform knows."""

    def __init__(self, role: object) -> None:
        self.role = role
        super().__init__(f"Unknown role: {role!r}")
