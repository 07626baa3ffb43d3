# feed_curator/exceptions.py
"""Error taxonomy for the curator.

Acquisition failures are reported to the UI but never stop curation;
delivery and persistence failures are handled where they occur.
"""

from __future__ import annotations

from enum import Enum


class CuratorError(Exception):
    """Root of all curator errors."""


class NetworkError(CuratorError):
    """Connectivity probe or download failure."""


class DownloadTimeoutError(CuratorError):
    """Provider construction exceeded its overall deadline."""


class ServerError(CuratorError):
    """Non-2xx response from the model distribution endpoint."""

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        super().__init__(message or f"HTTP {status}")


class LibraryError(CuratorError):
    """The inference library could not be imported or initialised."""


class DeliveryError(CuratorError):
    """A directive could not be delivered to a feed observer."""

    def __init__(self, message: str, unreachable: bool = False):
        self.unreachable = unreachable
        super().__init__(message)


class StorageError(CuratorError):
    """The persistent store failed to read or write."""


class ErrorCategory(str, Enum):
    """Categories reported with AI_LOAD_FAILED."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER = "server"
    LIBRARY = "library"

    @property
    def retryable(self) -> bool:
        """Whether an automatic deferred retry makes sense."""
        return self in (ErrorCategory.NETWORK, ErrorCategory.TIMEOUT)


def classify_load_error(exc: BaseException) -> ErrorCategory:
    """Map an acquisition failure to its category.

    Known error types win; anything else is classified by inspecting its
    message, the way third-party download errors have to be.
    """
    if isinstance(exc, NetworkError):
        return ErrorCategory.NETWORK
    if isinstance(exc, (DownloadTimeoutError, TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, ServerError):
        return ErrorCategory.SERVER
    if isinstance(exc, LibraryError):
        return ErrorCategory.LIBRARY

    message = str(exc).lower()
    if "timeout" in message or "timed out" in message:
        return ErrorCategory.TIMEOUT
    if "fetch" in message or "network" in message or "connect" in message:
        return ErrorCategory.NETWORK
    if "http" in message:
        return ErrorCategory.SERVER
    return ErrorCategory.LIBRARY


def describe_load_error(exc: BaseException) -> str:
    """Human-readable text shown in the UI for a failed acquisition."""
    category = classify_load_error(exc)
    if category is ErrorCategory.NETWORK:
        return "Network error: Check internet connection and try again"
    if category is ErrorCategory.TIMEOUT:
        return "Download timeout: Model download took too long"
    if category is ErrorCategory.SERVER:
        return f"Server error: {exc}"
    return f"AI library error: {exc}"
