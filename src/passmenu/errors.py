"""Exception classes for the configuration subsystem.

Decode problems, startup failures and dispatch misuse each get their own
type so callers never need to catch parser- or filesystem-specific errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from passmenu.settings.manager import LoadResult


class PassMenuError(Exception):
    """Base class for all errors raised by passmenu."""


class DecodeError(PassMenuError):
    """Raised when a config document cannot be decoded.

    Covers malformed YAML, undecodable bytes and documents whose shape
    does not match the requested type. The parser or validation error
    is kept on ``original_error`` for diagnostics.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize with decoding error details.

        Args:
            message: Description of the decoding error
            original_error: The original exception that was caught
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigLoadError(PassMenuError):
    """Raised by the startup routine when loading cannot proceed."""

    def __init__(self, result: LoadResult, path: object, detail: str = "") -> None:
        """Initialize with the load outcome that halted startup.

        Args:
            result: The LoadResult that could not be handled
            path: Config file the load was attempted on
            detail: Optional extra explanation
        """
        message = f"Could not load configuration file {path} ({result.name})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.result = result
        self.path = path


class DispatcherStoppedError(PassMenuError):
    """Raised when work is posted to an apply thread that is not running."""

    pass
