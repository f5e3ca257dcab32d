"""Typed exceptions for the bridge layer.

Callers catch specific exception types rather than matching on message
strings. Scripts turn ``MigrationError`` into exit status 1; the API layer
turns ``BackendAPIError`` into an HTTP status.
"""

from typing import Optional

from .config.constants import REMOVED_REPOSITORY_MESSAGE


class BridgeError(Exception):
    """Base exception for all bridge errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class RepositoryRemovedError(BridgeError):
    """Raised by every operation of a retired local-storage repository."""

    def __init__(self, message: str = REMOVED_REPOSITORY_MESSAGE) -> None:
        super().__init__(message)


class NotAuthenticatedError(BridgeError):
    """No current user is signed in."""

    def __init__(self, message: str = "No authenticated user. Sign in before calling this operation.") -> None:
        super().__init__(message)


class BackendAPIError(BridgeError):
    """The remote backend answered with a non-success status, or could not be reached.

    ``status_code`` is 0 when the request never got a response.
    """

    def __init__(self, status_code: int, reason: str = "", url: Optional[str] = None) -> None:
        super().__init__(f"Backend API error: {status_code} {reason}".rstrip())
        self.status_code = status_code
        self.reason = reason
        self.url = url


class MigrationError(BridgeError):
    """A migration or its verification failed. Fatal for the running script."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        detail: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.detail = detail
        self.hint = hint

    def describe(self) -> list[str]:
        """Lines for console output: message plus any structured fields present."""
        lines = [f"[ERROR] {self}"]
        if self.code:
            lines.append(f"  code: {self.code}")
        if self.detail:
            lines.append(f"  detail: {self.detail}")
        if self.hint:
            lines.append(f"  hint: {self.hint}")
        return lines
