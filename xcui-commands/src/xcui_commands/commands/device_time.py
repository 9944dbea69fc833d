"""Device time retrieval and normalization.

Simulators share the host clock, so the host `date` output is used. Real
devices report `(timestamp, utc_offset, time_zone)` and firmware has been
inconsistent about the units: `utc_offset` is sometimes minutes and sometimes
garbage, `time_zone` is sometimes a zone name and sometimes an offset in
seconds. The reading is resolved with a fixed cascade and never raises for
ambiguity; the worst case is the bare UTC instant.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from xcui_commands.commands.background import coerce_number
from xcui_commands.commands.timefmt import ISO8601_FORMAT, format_datetime
from xcui_commands.context import DriverContext
from xcui_commands.errors import ConfigError, InvalidArgumentError
from xcui_commands.runtime.device_time import DeviceTimeReading

logger = logging.getLogger(__name__)

SIMULATOR_DATE_CMD = "date"
SIMULATOR_DATE_ARGS = ("+%Y-%m-%dT%H:%M:%S%z",)
SIMULATOR_DATE_INPUT_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

MAX_OFFSET_MINUTES = 12 * 60
MAX_OFFSET_SECONDS = 12 * 60 * 60


def _fixed_offset(minutes: float) -> tzinfo:
    return timezone(timedelta(minutes=minutes))


def resolve_device_tz(reading: DeviceTimeReading) -> Optional[tzinfo]:
    """Pick the timezone to apply to a reading, or None if it cannot be told."""

    utc_offset = coerce_number(reading.utc_offset)
    if utc_offset is not None and abs(utc_offset) <= MAX_OFFSET_MINUTES:
        return _fixed_offset(utc_offset)

    tz = reading.time_zone
    if isinstance(tz, str) and "/" in tz:
        try:
            return ZoneInfo(tz.strip())
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown time zone name '%s' reported by the device", tz)
            return None

    tz_seconds = coerce_number(tz)
    if tz_seconds is not None and abs(tz_seconds) <= MAX_OFFSET_SECONDS:
        return _fixed_offset(tz_seconds / 60)
    return None


def format_device_reading(reading: DeviceTimeReading, fmt: str = ISO8601_FORMAT) -> str:
    try:
        utc = datetime.fromtimestamp(int(reading.timestamp), tz=timezone.utc)
    except (ValueError, OverflowError, OSError, TypeError):
        logger.warning(
            "Cannot build a date out of the device timestamp '%s'. Returning it as is",
            reading.timestamp,
        )
        return str(reading.timestamp)

    tz = resolve_device_tz(reading)
    if tz is None:
        logger.warning(
            "Did not know how to apply the UTC offset. Returning the timestamp without it"
        )
        return format_datetime(utc, fmt)
    try:
        local = utc.astimezone(tz)
    except (ValueError, OverflowError):
        # Instants at the edge of the supported range cannot be shifted.
        logger.warning("Cannot apply the UTC offset to '%s'. Returning it without it", utc)
        return format_datetime(utc, fmt)
    return format_datetime(local, fmt)


def format_simulator_output(stdout: str, fmt: str = ISO8601_FORMAT) -> str:
    """Format host `date` output, or return it untouched if it does not parse."""

    raw = stdout.strip()
    try:
        parsed = datetime.strptime(raw, SIMULATOR_DATE_INPUT_FORMAT)
    except ValueError:
        logger.warning(
            "Cannot parse the timestamp '%s' returned by '%s' command. Returning it as is",
            raw,
            SIMULATOR_DATE_CMD,
        )
        return raw
    return format_datetime(parsed, fmt)


async def get_device_time(ctx: DriverContext, fmt: Any = ISO8601_FORMAT) -> str:
    if fmt is None:
        fmt = ISO8601_FORMAT
    if not isinstance(fmt, str):
        raise InvalidArgumentError(f"format is expected to be a string, got {fmt!r}")

    logger.info("Attempting to capture iOS device date and time")
    if not ctx.real_device:
        logger.info("On simulator. Assuming device time is the same as host time")
        if ctx.process_runner is None:
            raise ConfigError("a process runner is required to read the host time")
        res = await ctx.process_runner.run(SIMULATOR_DATE_CMD, *SIMULATOR_DATE_ARGS)
        logger.debug(
            "Got the following output out of '%s %s': %s",
            SIMULATOR_DATE_CMD,
            " ".join(SIMULATOR_DATE_ARGS),
            res.stdout.strip(),
        )
        return format_simulator_output(res.stdout, fmt)

    if ctx.device_time_provider is None or not ctx.udid:
        raise ConfigError("a device UDID and time provider are required on real devices")
    reading = await ctx.device_time_provider.get_device_time(ctx.udid)
    logger.debug(
        "timestamp: %s, utcOffset: %s, timeZone: %s",
        reading.timestamp,
        reading.utc_offset,
        reading.time_zone,
    )
    return format_device_reading(reading, fmt)
