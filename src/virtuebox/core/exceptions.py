"""Custom exception classes for the VirtueBox back office.

Service-layer code raises these with human-readable messages; the
application maps each one to an HTTP status through ``status_code``.
"""


class VirtueBoxError(Exception):
    """Base exception for all VirtueBox errors."""

    status_code = 500


class ConfigurationError(VirtueBoxError):
    """Raised when there is a configuration error."""

    pass


class AuthenticationError(VirtueBoxError):
    """Raised when the caller is not authenticated (no or invalid token)."""

    status_code = 401


class InvalidCredentialsError(AuthenticationError):
    """Raised when a login email/password pair does not match."""

    def __init__(self):
        super().__init__("Invalid email or password")


class AuthorizationError(VirtueBoxError):
    """Raised when an authenticated caller lacks the required role."""

    status_code = 403


class AccountDeactivatedError(AuthorizationError):
    """Raised when a deactivated account tries to log in."""

    def __init__(self):
        super().__init__(
            "Your account has been deactivated. Please contact the administrator."
        )


class NotFoundError(VirtueBoxError):
    """Raised when a requested record does not exist."""

    status_code = 404


class PartnerNotFoundError(NotFoundError):
    """Raised when a requested partner cannot be found."""

    def __init__(self, user_id: str):
        """Initialize the exception.

        Args:
            user_id: The ID of the partner that was not found.
        """
        self.user_id = user_id
        super().__init__("Partner not found")


class DomainConflictError(VirtueBoxError):
    """Raised when a write would break a uniqueness rule."""

    status_code = 400


class EmailAlreadyExistsError(DomainConflictError):
    """Raised when an email is already used by another user."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("A user with this email already exists")


class PartnerIdAllocationError(DomainConflictError):
    """Raised when no free partner id could be claimed."""

    pass


class ValidationError(VirtueBoxError):
    """Raised when data validation fails."""

    status_code = 400
