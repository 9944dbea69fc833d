"""Device commands: backgrounding, device time, geometry, buttons, Siri."""

from __future__ import annotations

from xcui_commands.commands.background import (
    BackgroundPolicy,
    parse_timing_spec,
    resolve_background_policy,
)
from xcui_commands.commands.dispatch import (
    CommandDispatcher,
    available_commands,
    register_command,
)
from xcui_commands.commands.general import GeneralCommands
from xcui_commands.commands.geometry import compute_viewport_rect
from xcui_commands.commands.timefmt import ISO8601_FORMAT, format_datetime

__all__ = [
    "BackgroundPolicy",
    "CommandDispatcher",
    "GeneralCommands",
    "ISO8601_FORMAT",
    "available_commands",
    "compute_viewport_rect",
    "format_datetime",
    "parse_timing_spec",
    "register_command",
    "resolve_background_policy",
]
