"""Physical-device time source.

Reads the lockdown time values through libimobiledevice's `ideviceinfo`:

  * TimeIntervalSince1970  (float seconds)
  * TimeZoneOffsetFromUTC  (float seconds, reported here in minutes)
  * TimeZone               (zone name, e.g. Europe/Berlin)

Firmware has not always been consistent about these values, so nothing here
is validated beyond parsing; the normalizer decides what to trust.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Union

from xcui_commands.errors import ProcessRunnerError

if TYPE_CHECKING:
    from xcui_commands.context import ProcessRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceTimeReading:
    timestamp: int
    utc_offset: Optional[float]
    time_zone: Union[str, float, None]


def _parse_float(raw: Any) -> Optional[float]:
    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    try:
        value = float(s)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


class IdeviceinfoTimeProvider:
    def __init__(
        self,
        runner: ProcessRunner,
        *,
        ideviceinfo_path: str = "ideviceinfo",
        timeout_s: float = 10.0,
    ) -> None:
        self._runner = runner
        self._ideviceinfo_path = ideviceinfo_path
        self._timeout_s = timeout_s

    async def _read_key(self, udid: str, key: str) -> str:
        res = await self._runner.run(
            self._ideviceinfo_path,
            "-u",
            udid,
            "-k",
            key,
            timeout_s=self._timeout_s,
            check=False,
        )
        if not res.ok():
            raise ProcessRunnerError(
                f"cannot read {key} from device {udid} (rc={res.returncode}): "
                f"{res.stderr.strip()[:500]}"
            )
        return res.stdout.strip()

    async def get_device_time(self, udid: str) -> DeviceTimeReading:
        raw_ts = await self._read_key(udid, "TimeIntervalSince1970")
        raw_offset = await self._read_key(udid, "TimeZoneOffsetFromUTC")
        raw_tz = await self._read_key(udid, "TimeZone")

        ts = _parse_float(raw_ts)
        if ts is None:
            raise ProcessRunnerError(f"device {udid} returned an unusable timestamp: {raw_ts!r}")
        offset_s = _parse_float(raw_offset)
        return DeviceTimeReading(
            timestamp=int(ts),
            utc_offset=offset_s / 60 if offset_s is not None else None,
            time_zone=raw_tz or None,
        )
