"""Exception hierarchy shared by the API client and the controllers."""

from typing import List, Optional

AUTHENTICATION_REQUIRED_MESSAGE = "Authentication required"
REQUEST_FAILED_MESSAGE = "Request failed"
LOGIN_FAILED_MESSAGE = "Login failed"
REGISTRATION_FAILED_MESSAGE = "Registration failed"


class DashboardError(Exception):
    """Base class for every error raised by crawldash."""


class AuthenticationRequired(DashboardError):
    """The backend answered HTTP 401; the held token has been discarded."""

    def __init__(self, message: str = AUTHENTICATION_REQUIRED_MESSAGE) -> None:
        super().__init__(message)


class RequestFailed(DashboardError):
    """A non-2xx, non-401 response from the backend."""

    def __init__(self, message: str = REQUEST_FAILED_MESSAGE, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InputValidationError(DashboardError, ValueError):
    """Client-side input rejected before anything is sent over the network."""


class BulkActionFailed(DashboardError):
    """One or more per-job calls of a bulk action failed."""

    def __init__(self, action: str, failed_ids: List[str], errors: List[BaseException]) -> None:
        super().__init__(f"{action} failed for {len(failed_ids)} job(s): {', '.join(failed_ids)}")
        self.action = action
        self.failed_ids = failed_ids
        self.errors = errors
