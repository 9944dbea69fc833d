"""Named-command registry and dispatcher.

Adding a command should not require changing the dispatcher: handlers
register themselves under the wire name clients use (`getWindowRect`,
`mobile: pressButton`, ...). Each handler checks its argument shape before
touching the device so a bad call has no side effects.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from xcui_commands.commands.general import (
    GeneralCommands,
    require_non_empty_str,
    require_optional_number,
)
from xcui_commands.commands.timefmt import ISO8601_FORMAT
from xcui_commands.errors import InvalidArgumentError, NotYetImplementedError

logger = logging.getLogger(__name__)

CommandHandler = Callable[[GeneralCommands, Mapping[str, Any]], Awaitable[Any]]

_REGISTRY: Dict[str, CommandHandler] = {}


def register_command(name: str) -> Callable[[CommandHandler], CommandHandler]:
    """Decorator to register a command handler under `name`."""

    def _decorator(handler: CommandHandler) -> CommandHandler:
        if name in _REGISTRY:
            raise ValueError(f"duplicate command name: {name}")
        _REGISTRY[name] = handler
        return handler

    return _decorator


def available_commands() -> Dict[str, CommandHandler]:
    return dict(_REGISTRY)


def _optional_str(args: Mapping[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    value = args.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise InvalidArgumentError(f'"{key}" is expected to be a string')
    return value


class CommandDispatcher:
    def __init__(self, commands: GeneralCommands) -> None:
        self._commands = commands

    async def execute(self, name: str, args: Optional[Mapping[str, Any]] = None) -> Any:
        handler = _REGISTRY.get(name)
        if handler is None:
            raise NotYetImplementedError(f"unknown command: {name}")
        if args is None:
            args = {}
        elif not isinstance(args, Mapping):
            raise InvalidArgumentError(
                f"arguments for {name!r} must be an object, got {type(args).__name__}"
            )
        logger.debug("Executing command '%s' with args %s", name, dict(args))
        return await handler(self._commands, args)


@register_command("background")
async def _background(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    # Legacy clients send `seconds`, W3C-ish clients send `{"timeout": ms}`.
    if "seconds" in args:
        return await cmds.background(args["seconds"])
    if "timeout" in args:
        return await cmds.background({"timeout": args["timeout"]})
    return await cmds.background(None)


@register_command("getDeviceTime")
async def _get_device_time(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    fmt = _optional_str(args, "format", ISO8601_FORMAT)
    return await cmds.get_device_time(fmt)


@register_command("mobile: getDeviceTime")
async def _mobile_get_device_time(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    fmt = _optional_str(args, "format", ISO8601_FORMAT)
    return await cmds.mobile_get_device_time(fmt)


@register_command("getWindowSize")
async def _get_window_size(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    handle = _optional_str(args, "windowHandle", "current")
    return await cmds.get_window_size(handle)


@register_command("getWindowRect")
async def _get_window_rect(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.get_window_rect()


@register_command("getViewportRect")
async def _get_viewport_rect(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.get_viewport_rect()


@register_command("getScreenInfo")
async def _get_screen_info(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.get_screen_info()


@register_command("getStatusBarHeight")
async def _get_status_bar_height(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.get_status_bar_height()


@register_command("getDevicePixelRatio")
async def _get_device_pixel_ratio(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.get_device_pixel_ratio()


@register_command("mobile: pressButton")
async def _press_button(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    name = require_non_empty_str(args.get("name"), "Button name is mandatory")
    duration = require_optional_number(
        args.get("durationSeconds"), "durationSeconds should be a number"
    )
    return await cmds.press_button(name, duration)


@register_command("mobile: siriCommand")
async def _siri_command(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    text = require_non_empty_str(args.get("text"), '"text" argument is mandatory')
    return await cmds.siri_command(text)


@register_command("active")
async def _active(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.active()


@register_command("setUrl")
async def _set_url(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    url = require_non_empty_str(args.get("url"), '"url" argument is mandatory')
    return await cmds.set_url(url)


@register_command("launchApp")
async def _launch_app(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.launch_app()


@register_command("closeApp")
async def _close_app(cmds: GeneralCommands, args: Mapping[str, Any]) -> Any:
    return await cmds.close_app()
