"""Custom exceptions for the codeforces-cli application."""

import copy
from collections.abc import Iterator
from contextlib import contextmanager


class CodeforcesError(Exception):
    """Base exception for all codeforces-cli errors."""

    def __init__(self, message: str = "An error occurred with Codeforces CLI") -> None:
        self.message = message
        super().__init__(self.message)

    def with_context(self, context: str) -> "CodeforcesError":
        """Return a copy of this error with the message prefixed by context."""
        error = copy.copy(self)
        error.message = f"{context}: {self.message}"
        error.args = (error.message,)
        return error


@contextmanager
def wrap_errors(context: str) -> Iterator[None]:
    """Re-raise any CodeforcesError with an operation-scoped message, keeping its class."""
    try:
        yield
    except CodeforcesError as e:
        raise e.with_context(context) from e


class AuthError(CodeforcesError):
    """Raised when a session cannot be established or is required but missing."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class LoginTokenMissingError(AuthError):
    """Raised when the login page has no CSRF token."""

    def __init__(
        self, message: str = "Could not find CSRF token on the login page. The page layout may have changed or the request was blocked."
    ) -> None:
        super().__init__(message)


class NotLoggedInError(AuthError):
    """Raised when an operation needs an authenticated session."""

    def __init__(self, message: str = "Not logged in. Please run 'cf login' first.") -> None:
        super().__init__(message)


class VerificationFailedError(AuthError):
    """Raised when the profile page does not show a logged-in user."""

    def __init__(self, message: str = "Login verification failed") -> None:
        super().__init__(message)


class InvalidCookiesError(AuthError):
    """Raised when supplied session cookies do not produce a logged-in session."""

    def __init__(self, message: str = "Invalid session cookies or session expired") -> None:
        super().__init__(message)


class FetchError(CodeforcesError):
    """Raised when a page or API resource cannot be retrieved."""

    def __init__(self, message: str = "Failed to fetch data from Codeforces") -> None:
        super().__init__(message)


class PageUnavailableError(FetchError):
    """Raised when an HTML page is missing or doesn't have the expected content."""

    def __init__(self, message: str = "Page is unavailable") -> None:
        super().__init__(message)


class ApiUnavailableError(FetchError):
    """Raised when the JSON API fails or returns a non-OK status."""

    def __init__(self, message: str = "API request failed") -> None:
        super().__init__(message)


class SubmitError(CodeforcesError):
    """Raised when submission fails."""

    def __init__(self, message: str = "Submission failed") -> None:
        super().__init__(message)


class SubmitTokenMissingError(SubmitError):
    """Raised when the submit page has no CSRF token."""

    def __init__(self, message: str = "Could not find CSRF token on submit page") -> None:
        super().__init__(message)


class SubmissionRejectedError(SubmitError):
    """Raised when Codeforces refuses the submission form."""

    def __init__(self, message: str = "Submission request was rejected") -> None:
        super().__init__(message)


class TransportError(CodeforcesError):
    """Raised when a request never produced a response."""

    def __init__(self, message: str = "Request failed") -> None:
        super().__init__(message)


class RequestTimeoutError(TransportError):
    """Raised when a request exceeds the session timeout."""

    def __init__(self, message: str = "Request timed out") -> None:
        super().__init__(message)


class NetworkError(TransportError):
    """Raised on connection-level failures."""

    def __init__(self, message: str = "Network error") -> None:
        super().__init__(message)


class ProblemNotFoundError(CodeforcesError):
    """Raised when a problem isn't saved locally."""

    def __init__(self, problem_id: str | None = None) -> None:
        if problem_id:
            message = f"Problem not found: {problem_id}"
        else:
            message = "Problem not found"
        super().__init__(message)
        self.problem_id = problem_id
