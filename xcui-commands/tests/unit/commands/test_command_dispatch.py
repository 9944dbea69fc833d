from __future__ import annotations

import asyncio

import pytest
from fakes import FakeProxy, FakeTimeProvider

from xcui_commands.commands.dispatch import (
    CommandDispatcher,
    available_commands,
    register_command,
)
from xcui_commands.commands.general import GeneralCommands
from xcui_commands.context import DriverContext
from xcui_commands.errors import InvalidArgumentError, NotYetImplementedError
from xcui_commands.runtime.device_time import DeviceTimeReading


def _dispatcher(**kwargs) -> tuple[CommandDispatcher, FakeProxy]:
    proxy = FakeProxy(
        {
            "/wda/screen": {"statusBarSize": {"width": 400, "height": 20}, "scale": 2},
            "/window/size": {"width": 400, "height": 800},
        }
    )
    ctx = DriverContext(proxy=proxy, **kwargs)
    return CommandDispatcher(GeneralCommands(ctx)), proxy


def test_builtin_commands_are_registered() -> None:
    names = set(available_commands())
    assert {
        "background",
        "getDeviceTime",
        "mobile: getDeviceTime",
        "getWindowSize",
        "getWindowRect",
        "getViewportRect",
        "getScreenInfo",
        "getStatusBarHeight",
        "getDevicePixelRatio",
        "mobile: pressButton",
        "mobile: siriCommand",
        "active",
        "setUrl",
        "launchApp",
        "closeApp",
    } <= names


def test_duplicate_registration_is_rejected() -> None:
    with pytest.raises(ValueError, match="duplicate command name"):

        @register_command("getWindowRect")
        async def _dup(cmds, args):  # pragma: no cover
            return None


def test_unknown_command() -> None:
    dispatcher, proxy = _dispatcher()
    with pytest.raises(NotYetImplementedError, match="unknown command"):
        asyncio.run(dispatcher.execute("mobile: shake"))
    assert proxy.calls == []


def test_non_mapping_args_are_rejected() -> None:
    dispatcher, proxy = _dispatcher()
    with pytest.raises(InvalidArgumentError):
        asyncio.run(dispatcher.execute("getWindowRect", ["x"]))  # type: ignore[arg-type]
    assert proxy.calls == []


@pytest.mark.parametrize(
    "name, args",
    [
        ("mobile: pressButton", {}),
        ("mobile: pressButton", {"name": ""}),
        ("mobile: pressButton", {"name": "home", "durationSeconds": "long"}),
        ("mobile: siriCommand", {}),
        ("mobile: siriCommand", {"text": ""}),
        ("mobile: getDeviceTime", {"format": 12}),
        ("setUrl", {"url": None}),
        ("getWindowSize", {"windowHandle": 1}),
    ],
)
def test_argument_shape_is_checked_before_io(name, args) -> None:
    dispatcher, proxy = _dispatcher()
    with pytest.raises(InvalidArgumentError):
        asyncio.run(dispatcher.execute(name, args))
    assert proxy.calls == []


def test_viewport_rect_through_dispatcher() -> None:
    dispatcher, _ = _dispatcher()
    rect = asyncio.run(dispatcher.execute("getViewportRect"))
    assert rect == {"left": 0, "top": 40, "width": 800, "height": 1560}


def test_window_rect_through_dispatcher() -> None:
    dispatcher, _ = _dispatcher()
    rect = asyncio.run(dispatcher.execute("getWindowRect", {}))
    assert rect == {"width": 400, "height": 800, "x": 0, "y": 0}


def test_background_accepts_seconds_or_timeout() -> None:
    dispatcher, proxy = _dispatcher()
    asyncio.run(dispatcher.execute("background", {"seconds": 3}))
    asyncio.run(dispatcher.execute("background", {"timeout": 1000}))
    asyncio.run(dispatcher.execute("background", {}))
    assert [(c["path"], c["params"]) for c in proxy.calls] == [
        ("/wda/deactivateApp", {"duration": 3.0}),
        ("/wda/deactivateApp", {"duration": 1.0}),
        ("/wda/homescreen", {}),
    ]


def test_press_button_through_dispatcher() -> None:
    dispatcher, proxy = _dispatcher()
    asyncio.run(
        dispatcher.execute("mobile: pressButton", {"name": "home", "durationSeconds": 1})
    )
    assert proxy.calls[0]["params"] == {"name": "home", "duration": 1}


def test_mobile_get_device_time_through_dispatcher() -> None:
    provider = FakeTimeProvider(
        DeviceTimeReading(timestamp=1700000000, utc_offset=120, time_zone=None)
    )
    dispatcher, _ = _dispatcher(device_time_provider=provider, udid="U1", real_device=True)
    out = asyncio.run(dispatcher.execute("mobile: getDeviceTime", {"format": "HH:mm"}))
    assert out == "00:13"
    out = asyncio.run(dispatcher.execute("getDeviceTime", {}))
    assert out == "2023-11-15T00:13:20+02:00"
