"""App backgrounding policy.

The caller's timeout argument is loosely typed:

  * None                       -> go home, never come back
  * number of seconds (>= 0)   -> come back after that many seconds
  * negative number            -> go home, never come back
  * {"timeout": 5000}          -> come back after 5 seconds (milliseconds!)
  * {"timeout": None}, {"timeout": -2} -> go home, never come back

Anything that does not coerce to a finite number is treated as "never come
back" rather than rejected.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

HOMESCREEN = "/wda/homescreen"
DEACTIVATE_APP = "/wda/deactivateApp"


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Seconds:
    value: Any


@dataclass(frozen=True)
class Structured:
    timeout_ms: Any


TimingSpec = Union[Absent, Seconds, Structured]


@dataclass(frozen=True)
class BackgroundPolicy:
    endpoint: str
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def restores(self) -> bool:
        return self.endpoint == DEACTIVATE_APP


def parse_timing_spec(raw: Any) -> TimingSpec:
    if raw is None:
        return Absent()
    if isinstance(raw, Mapping) and "timeout" in raw:
        return Structured(raw["timeout"])
    return Seconds(raw)


def coerce_number(value: Any) -> Optional[float]:
    """Return a finite float for numbers and numeric strings, else None."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def _policy_for_seconds(seconds: Optional[float]) -> BackgroundPolicy:
    if seconds is None or seconds < 0:
        return BackgroundPolicy(HOMESCREEN)
    return BackgroundPolicy(DEACTIVATE_APP, {"duration": seconds})


def resolve_background_policy(spec: TimingSpec) -> Optional[BackgroundPolicy]:
    """Map a timing spec to the endpoint to call (None for unknown spec types)."""

    if isinstance(spec, Absent):
        return BackgroundPolicy(HOMESCREEN)
    if isinstance(spec, Structured):
        timeout_ms = coerce_number(spec.timeout_ms)
        return _policy_for_seconds(None if timeout_ms is None else timeout_ms / 1000.0)
    if isinstance(spec, Seconds):
        return _policy_for_seconds(coerce_number(spec.value))
    return None
