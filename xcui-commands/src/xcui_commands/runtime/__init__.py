"""Host-side runtime helpers (local processes, device time source)."""

from __future__ import annotations

from xcui_commands.runtime.device_time import DeviceTimeReading, IdeviceinfoTimeProvider
from xcui_commands.runtime.process import AsyncProcessRunner, ProcessResult

__all__ = [
    "AsyncProcessRunner",
    "DeviceTimeReading",
    "IdeviceinfoTimeProvider",
    "ProcessResult",
]
