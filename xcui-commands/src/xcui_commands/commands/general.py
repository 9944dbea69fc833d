"""General device commands bound to an explicit driver context."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from xcui_commands.commands import device_time, geometry
from xcui_commands.commands.background import (
    HOMESCREEN,
    parse_timing_spec,
    resolve_background_policy,
)
from xcui_commands.commands.timefmt import ISO8601_FORMAT
from xcui_commands.context import DriverContext
from xcui_commands.errors import ConfigError, InvalidArgumentError

logger = logging.getLogger(__name__)


def require_non_empty_str(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(message)
    return value


def require_optional_number(value: Any, message: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(message)
    return value


def _describe(raw: Any) -> str:
    try:
        return json.dumps(raw)
    except (TypeError, ValueError):
        return repr(raw)


class GeneralCommands:
    def __init__(self, ctx: DriverContext) -> None:
        self.ctx = ctx

    @property
    def _app_name(self) -> str:
        return self.ctx.app_name or "<unknown app>"

    async def active(self) -> Any:
        if self.ctx.web_context:
            if self.ctx.atoms is None:
                raise ConfigError("an atom executor is required in a web context")
            return await self.ctx.atoms.execute_atom("active_element", [])
        return await self.ctx.proxy.command("/element/active", "GET")

    async def background(self, seconds: Any = None) -> Any:
        """Send the app to the background.

        `seconds` may be a number of seconds, None, or `{"timeout": <ms>}`.
        Non-negative durations restore the app afterwards; everything else
        leaves it on the home screen.
        """

        policy = resolve_background_policy(parse_timing_spec(seconds))
        if policy is None:
            raise InvalidArgumentError(
                "Argument value is expected to be a valid number. "
                f"{_describe(seconds)} has been provided instead"
            )
        return await self.ctx.proxy.command(
            policy.endpoint,
            "POST",
            policy.params,
            is_session_command=policy.endpoint != HOMESCREEN,
        )

    async def get_device_time(self, fmt: str = ISO8601_FORMAT) -> str:
        return await device_time.get_device_time(self.ctx, fmt)

    async def mobile_get_device_time(self, fmt: str = ISO8601_FORMAT) -> str:
        return await self.get_device_time(fmt)

    async def get_window_size(self, window_handle: str = "current") -> Dict[str, Any]:
        return await geometry.get_window_size(self.ctx, window_handle)

    async def get_window_rect(self) -> Dict[str, Any]:
        return await geometry.get_window_rect(self.ctx)

    async def get_viewport_rect(self) -> Dict[str, Any]:
        return await geometry.get_viewport_rect(self.ctx)

    async def get_screen_info(self) -> Dict[str, Any]:
        return await geometry.get_screen_info(self.ctx)

    async def get_status_bar_height(self) -> float:
        return await geometry.get_status_bar_height(self.ctx)

    async def get_device_pixel_ratio(self) -> float:
        return await geometry.get_device_pixel_ratio(self.ctx)

    async def press_button(self, name: Any, duration_seconds: Any = None) -> Any:
        require_non_empty_str(name, "Button name is mandatory")
        duration = require_optional_number(
            duration_seconds, "durationSeconds should be a number"
        )
        params: Dict[str, Any] = {"name": name}
        if duration is not None:
            params["duration"] = duration
        return await self.ctx.proxy.command("/wda/pressButton", "POST", params)

    async def siri_command(self, text: Any) -> Any:
        require_non_empty_str(text, '"text" argument is mandatory')
        return await self.ctx.proxy.command("/wda/siri/activate", "POST", {"text": text})

    async def set_url(self, url: Any) -> None:
        require_non_empty_str(url, '"url" argument is mandatory')
        logger.debug("Attempting to set url '%s'", url)

        if self.ctx.web_context:
            if self.ctx.web_navigator is None:
                raise ConfigError("a web navigator is required in a web context")
            await self.ctx.web_navigator.navigate(url)
            return

        if self.ctx.real_device:
            await self.ctx.proxy.command("/url", "POST", {"url": url})
            return

        if self.ctx.process_runner is None or not self.ctx.udid:
            raise ConfigError("a simulator UDID and process runner are required to open URLs")
        await self.ctx.process_runner.run("xcrun", "simctl", "openurl", self.ctx.udid, url)

    async def launch_app(self) -> None:
        logger.warning(
            "launchApp is deprecated. Please use activateApp, "
            "mobile:launchApp or create a new session instead."
        )
        if self.ctx.session is None:
            raise ConfigError("a session lifecycle is required to launch the app")
        try:
            await self.ctx.session.start()
            logger.info("Successfully started a session by launching '%s'.", self._app_name)
        except Exception:
            logger.warning("Something went wrong while launching the '%s' app.", self._app_name)
            raise

    async def close_app(self) -> None:
        logger.warning(
            "closeApp is deprecated. Please use terminateApp, "
            "mobile:terminateApp, mobile:killApp or quit the session instead."
        )
        if self.ctx.session is None:
            raise ConfigError("a session lifecycle is required to close the app")
        try:
            await self.ctx.session.stop()
            logger.info("Successfully stopped the session for '%s'.", self._app_name)
        except Exception:
            logger.warning("Something went wrong while closing the '%s' app.", self._app_name)
            raise
