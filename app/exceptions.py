"""Exceptions raised by the moderation services."""


class ModerationError(Exception):
    """Base exception for the moderation service."""


class ActionNotAllowedError(ModerationError):
    """Raised when a quick action is not offered for the listing's current status."""

    def __init__(self, current_status: str, target: str):
        self.current_status = current_status
        self.target = target
        super().__init__(f"Cannot move listing from '{current_status}' to '{target}'")


class InvalidFilterError(ModerationError):
    """Raised when a filter key or value is outside the fixed option sets."""


class UpstreamError(ModerationError):
    """Raised when an upstream collaborator returns an unusable response."""

    def __init__(self, message: str, status_code: int = 502):
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(ModerationError):
    """Raised when the upstream auth service rejects a sign-in or sign-up."""

    def __init__(self, message: str, status_code: int = 401):
        self.status_code = status_code
        super().__init__(message)
