"""Error taxonomy for xcui-commands.

Argument problems are raised before any remote I/O happens. Remote failures
are raised by the proxy and pass through the command layer unchanged.
"""

from __future__ import annotations

from typing import Any, Optional


class XcuiCommandError(RuntimeError):
    """Base class for every error raised by this package."""


class InvalidArgumentError(XcuiCommandError):
    """Caller input is missing or has the wrong shape."""


class NotYetImplementedError(XcuiCommandError):
    """The requested command or parameter combination is not supported."""


class ConfigError(XcuiCommandError):
    """Configuration file or environment value is invalid."""


class ProcessRunnerError(XcuiCommandError):
    """Raised when a local process exits with a non-zero status."""


class RemoteCommandError(XcuiCommandError):
    """Raised when the remote automation endpoint rejects or fails a command."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.status_code = status_code
        self.error = error
        self.payload = payload
