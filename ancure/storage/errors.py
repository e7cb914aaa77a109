"""Storage error types and user-facing error text.

Raw driver and network errors are mapped onto short messages that can be
shown to a user as-is.  Unknown errors get a generic message unless the
app runs in debug mode.
"""

from __future__ import annotations

# Substring (matched case-insensitively) → user-facing message.  First match wins.
ERROR_MESSAGES: dict[str, str] = {
    # Session
    "jwt expired": "Your session has expired. Please sign in again.",
    "invalid jwt": "Your session is invalid. Please sign in again.",
    "refresh_token_not_found": "Your session has expired. Please sign in again.",
    # Row-level security
    "new row violates row-level security policy": (
        "You do not have permission to perform this action."
    ),
    "row-level security": "Access denied. Please ensure you are signed in.",
    # Network
    "connection refused": "Unable to reach the server. Please try again later.",
    "econnrefused": "Unable to reach the server. Please try again later.",
    "timeout": "The server took too long to respond. Please try again.",
    "pool not initialized": "Cloud sync is currently unavailable. Your data is kept on this device.",
    # Database
    "duplicate key value": "This record already exists.",
    "violates unique constraint": "This record already exists.",
    "violates foreign key constraint": "This operation references data that does not exist.",
}

GENERIC_MESSAGE = "Something went wrong. Please try again later."
UNREADABLE_MESSAGE = "Your saved data could not be read. Please enter it again."

SESSION_ERROR_MARKERS = (
    "jwt expired",
    "invalid jwt",
    "refresh_token_not_found",
    "not authenticated",
    "session_not_found",
)

NETWORK_ERROR_MARKERS = (
    "connection refused",
    "econnrefused",
    "connection reset",
    "network is unreachable",
    "name or service not known",
    "timeout",
)


class StorageError(Exception):
    """A configuration store could not complete an operation.

    ``user_message`` is safe to show to end users.
    """

    def __init__(self, message: str, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or GENERIC_MESSAGE


class StorageUnavailableError(StorageError):
    """The backing store is unreachable or not configured.  Retrying later may succeed."""


def _text(error: object) -> str:
    return str(error).lower()


def friendly_message(error: BaseException | None, debug: bool = False) -> str:
    """Map an exception to a message suitable for end users."""
    if error is None:
        return "An unknown error occurred."
    text = _text(error)
    for pattern, message in ERROR_MESSAGES.items():
        if pattern in text:
            return message
    if isinstance(error, TimeoutError):
        return ERROR_MESSAGES["timeout"]
    return str(error) if debug else GENERIC_MESSAGE


def is_session_error(error: BaseException | None) -> bool:
    """True if the error means the user has to sign in again."""
    if error is None:
        return False
    text = _text(error)
    return any(marker in text for marker in SESSION_ERROR_MARKERS)


def is_network_error(error: BaseException | None) -> bool:
    if error is None:
        return False
    if isinstance(error, (ConnectionError, TimeoutError)):
        return True
    text = _text(error)
    return any(marker in text for marker in NETWORK_ERROR_MARKERS)
