"""xcui-commands: high-level iOS device commands over a WebDriverAgent endpoint."""

from __future__ import annotations

from xcui_commands.commands import CommandDispatcher, GeneralCommands
from xcui_commands.config import CommandsConfig, load_config
from xcui_commands.context import DriverContext, ScreenInfoCache
from xcui_commands.errors import (
    ConfigError,
    InvalidArgumentError,
    NotYetImplementedError,
    ProcessRunnerError,
    RemoteCommandError,
    XcuiCommandError,
)

__all__ = [
    "CommandDispatcher",
    "CommandsConfig",
    "ConfigError",
    "DriverContext",
    "GeneralCommands",
    "InvalidArgumentError",
    "NotYetImplementedError",
    "ProcessRunnerError",
    "RemoteCommandError",
    "ScreenInfoCache",
    "XcuiCommandError",
    "load_config",
]
