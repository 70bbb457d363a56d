"""Error kinds raised by the profile gateway and the payment verification flow."""

from typing import Optional


class ProfileClientError(Exception):
    """Base class for every error the client raises."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthExpired(ProfileClientError):
    """The API rejected the bearer token; the caller must re-authenticate."""

    def __init__(self, message: str = "Session Expired", status_code: Optional[int] = 401):
        super().__init__(message, status_code)


class NotFound(ProfileClientError):
    """The API has no record for the request.

    The profile gateway absorbs this for profile reads and returns a blank
    profile instead.
    """

    def __init__(self, message: str = "Not Found", status_code: Optional[int] = 404):
        super().__init__(message, status_code)


class SubscriptionRequired(ProfileClientError):
    """A save was forbidden because the account has no active subscription."""

    def __init__(self, message: str = "Subscription Required", status_code: Optional[int] = 403):
        super().__init__(message, status_code)


class RequestFailed(ProfileClientError):
    """Any other non-success response."""

    @classmethod
    def from_body(cls, status_code: int, body: object) -> "RequestFailed":
        message = None
        if isinstance(body, dict):
            message = body.get("message")
        return cls(message or f"Request failed with status {status_code}", status_code)


class BusinessRejected(ProfileClientError):
    """The transport succeeded but the payload reports a business failure."""
