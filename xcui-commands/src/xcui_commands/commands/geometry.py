"""Window and viewport geometry.

iOS reports window dimensions in logical points; screenshots and viewport
consumers want device pixels. The status bar height from `/wda/screen` is
also in points and is scaled before it is used as the viewport inset.
"""

from __future__ import annotations

import math
from typing import Any, Dict

from xcui_commands.context import DriverContext
from xcui_commands.errors import ConfigError, NotYetImplementedError, RemoteCommandError


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_viewport_rect(
    *, scale: float, status_bar_height: float, window_size: Dict[str, Any]
) -> Dict[str, Any]:
    # A status bar taller than the window yields a negative height; it is
    # returned as-is.
    top = round_half_up(status_bar_height * scale)
    return {
        "left": 0,
        "top": top,
        "width": window_size["width"] * scale,
        "height": window_size["height"] * scale - top,
    }


async def get_screen_info(ctx: DriverContext) -> Dict[str, Any]:
    return await ctx.proxy.command("/wda/screen", "GET")


async def get_status_bar_height(ctx: DriverContext) -> float:
    info = await get_screen_info(ctx)
    try:
        return info["statusBarSize"]["height"]
    except (KeyError, TypeError) as e:
        raise RemoteCommandError(
            f"screen info has no statusBarSize.height: {info!r}", path="/wda/screen", payload=info
        ) from e


async def get_device_pixel_ratio(ctx: DriverContext) -> float:
    info = await get_screen_info(ctx)
    try:
        return info["scale"]
    except (KeyError, TypeError) as e:
        raise RemoteCommandError(
            f"screen info has no scale: {info!r}", path="/wda/screen", payload=info
        ) from e


async def get_window_size(ctx: DriverContext, window_handle: str = "current") -> Dict[str, Any]:
    if window_handle != "current":
        raise NotYetImplementedError("Currently only getting current window size is supported.")
    if ctx.web_context:
        if ctx.atoms is None:
            raise ConfigError("an atom executor is required in a web context")
        return await ctx.atoms.execute_atom("get_window_size", [])
    return await ctx.proxy.command("/window/size", "GET")


async def get_window_rect(ctx: DriverContext) -> Dict[str, Any]:
    size = await get_window_size(ctx)
    return {"width": size["width"], "height": size["height"], "x": 0, "y": 0}


async def get_viewport_rect(ctx: DriverContext) -> Dict[str, Any]:
    scale = await get_device_pixel_ratio(ctx)
    status_bar_height = await get_status_bar_height(ctx)
    window_size = await get_window_size(ctx)
    return compute_viewport_rect(
        scale=scale, status_bar_height=status_bar_height, window_size=window_size
    )
