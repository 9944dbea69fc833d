"""Collaborator contracts and the driver context that bundles them.

Commands never reach for ambient driver state; everything they touch is
passed in through a `DriverContext`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from xcui_commands.runtime.device_time import DeviceTimeReading
from xcui_commands.runtime.process import ProcessResult


class RemoteProxy(Protocol):
    async def command(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        is_session_command: bool = True,
    ) -> Any: ...


class DeviceTimeProvider(Protocol):
    async def get_device_time(self, udid: str) -> DeviceTimeReading: ...


class ProcessRunner(Protocol):
    async def run(
        self,
        command: str,
        *args: str,
        timeout_s: float | None = None,
        check: bool = True,
    ) -> ProcessResult: ...


class AtomExecutor(Protocol):
    async def execute_atom(self, name: str, args: Sequence[Any]) -> Any: ...


class WebNavigator(Protocol):
    async def navigate(self, url: str) -> None: ...


class SessionLifecycle(Protocol):
    async def start(self) -> None: ...

    async def stop(self) -> None: ...


@dataclass
class DriverContext:
    proxy: RemoteProxy
    process_runner: Optional[ProcessRunner] = None
    device_time_provider: Optional[DeviceTimeProvider] = None
    atoms: Optional[AtomExecutor] = None
    web_navigator: Optional[WebNavigator] = None
    session: Optional[SessionLifecycle] = None
    udid: Optional[str] = None
    real_device: bool = False
    web_context: bool = False
    app_name: Optional[str] = None


class ScreenInfoCache:
    """Caller-side memo for `/wda/screen`.

    Scale and status bar height do not change during a session, so drivers
    usually fetch them once. Wrap the proxy with this to get that behaviour;
    the command core does not cache on its own.
    """

    def __init__(self, proxy: RemoteProxy) -> None:
        self._proxy = proxy
        self._screen_info: Optional[Dict[str, Any]] = None

    async def command(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        is_session_command: bool = True,
    ) -> Any:
        if path == "/wda/screen" and method.upper() == "GET":
            if self._screen_info is None:
                self._screen_info = await self._proxy.command(
                    path, method, params, is_session_command
                )
            return self._screen_info
        return await self._proxy.command(path, method, params, is_session_command)

    def invalidate(self) -> None:
        self._screen_info = None
