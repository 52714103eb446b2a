"""
Custom exceptions for the license dashboard.

Every error carries an HTTP status and a machine-readable code; the server
turns them into the ``{"error": ..., "code": ...}`` envelope.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base exception for all dashboard failures."""

    status_code: int = 400
    code: str = "BAD_REQUEST"
    default_message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message or self.default_message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class BadRequestError(DashboardError):
    """Exception for malformed request bodies or parameters."""


class NotFoundError(DashboardError):
    """Exception for a referenced entity that does not exist."""

    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class AuthenticationError(DashboardError):
    """Base exception for failures resolved inside the authentication gate."""

    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class InvalidCredentialsError(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid username or password"


class MissingTokenError(AuthenticationError):
    code = "MISSING_TOKEN"
    default_message = "No authentication token provided"


class MalformedTokenError(AuthenticationError):
    code = "MALFORMED_TOKEN"
    default_message = "Token is malformed"


class InvalidSignatureError(AuthenticationError):
    code = "INVALID_SIGNATURE"
    default_message = "Invalid token signature"


class UnverifiableTokenError(AuthenticationError):
    code = "UNVERIFIABLE_TOKEN"
    default_message = "Token could not be verified"


class TokenExpiredError(AuthenticationError):
    """Raised for an expired token so clients can re-authenticate silently."""

    code = "TOKEN_EXPIRED"
    default_message = "Token has expired"


class TokenNotYetValidError(AuthenticationError):
    code = "TOKEN_NOT_YET_VALID"
    default_message = "Token not valid yet"


class BadAuthorizationError(DashboardError):
    """Exception for a structurally bad authorization header."""

    code = "BAD_AUTHORIZATION"
    default_message = "Bad request"


class InvalidStateTransitionError(DashboardError):
    """Exception for a license status change the lifecycle does not allow."""

    status_code = 409
    code = "INVALID_STATE_TRANSITION"

    def __init__(self, license_id: str, current: str, target: str) -> None:
        super().__init__(
            f"License {license_id} cannot move from {current} to {target}"
        )
        self.license_id = license_id
        self.current = current
        self.target = target


class DashboardAPIError(Exception):
    """Error response received by the dashboard client."""

    def __init__(self, message: str, status: int, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class SessionExpiredError(DashboardAPIError):
    """The server rejected the client's token as expired."""
