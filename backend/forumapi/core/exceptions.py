"""
API error taxonomy.

Every error raised on purpose by the service carries the HTTP status it is
reported with. The application maps them to ``{"error": message}`` payloads.
"""


class ForumAPIError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFound(ForumAPIError):
    """Referenced forum, topic or post does not exist."""

    status_code = 404


class Unauthorized(ForumAPIError):
    """Caller lacks the capability required for the request."""

    status_code = 401


class BadFormat(ForumAPIError):
    """Request input could not be understood."""

    status_code = 400
