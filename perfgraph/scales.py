from __future__ import annotations

from bisect import bisect_left
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal, InvalidOperation
import math
from typing import Any

import numpy as np


def as_number(value: Any) -> float:
    """Numeric key for a data value; datetimes become epoch seconds."""

    if isinstance(value, datetime):
        return value.timestamp()
    return float(value)


class LinearScale:
    """Invertible affine map from a numeric domain onto a pixel range."""

    def __init__(
        self,
        domain: tuple[Any, Any] = (0.0, 1.0),
        range_: tuple[float, float] = (0.0, 1.0),
    ) -> None:
        self._d0 = 0.0
        self._d1 = 1.0
        self._r0 = float(range_[0])
        self._r1 = float(range_[1])
        self.set_domain(domain)

    def set_domain(self, domain: tuple[Any, Any]) -> "LinearScale":
        lo, hi = domain
        self._d0 = self._to_number(lo)
        self._d1 = self._to_number(hi)
        return self

    def set_range(self, range_: tuple[float, float]) -> "LinearScale":
        self._r0 = float(range_[0])
        self._r1 = float(range_[1])
        return self

    @property
    def domain(self) -> tuple[Any, Any]:
        return (self._from_number(self._d0), self._from_number(self._d1))

    @property
    def range(self) -> tuple[float, float]:
        return (self._r0, self._r1)

    def __call__(self, value: Any) -> float:
        v = self._to_number(value)
        span = self._d1 - self._d0
        if span == 0:
            # Degenerate domain (single distinct value): center it.
            return (self._r0 + self._r1) * 0.5
        t = (v - self._d0) / span
        return self._r0 + t * (self._r1 - self._r0)

    def invert(self, pixel: float) -> Any:
        span = self._r1 - self._r0
        if span == 0:
            return self._from_number(self._d0)
        t = (float(pixel) - self._r0) / span
        return self._from_number(self._d0 + t * (self._d1 - self._d0))

    def ticks(self, count: int) -> list[Any]:
        lo, hi = sorted((self._d0, self._d1))
        return [self._from_number(float(v)) for v in generate_nice_ticks(lo, hi, count)]

    def format_ticks(self, ticks: list[Any]) -> list[str]:
        return format_ticks_for_axis(np.asarray([self._to_number(t) for t in ticks], dtype=np.float64))

    def _to_number(self, value: Any) -> float:
        return as_number(value)

    def _from_number(self, value: float) -> Any:
        return float(value)


_SECOND = 1.0
_MINUTE = 60.0
_HOUR = 3600.0
_DAY = 86400.0

# Candidate tick intervals in seconds, ascending.
_TIME_STEPS = (
    _SECOND,
    5 * _SECOND,
    15 * _SECOND,
    30 * _SECOND,
    _MINUTE,
    5 * _MINUTE,
    15 * _MINUTE,
    30 * _MINUTE,
    _HOUR,
    3 * _HOUR,
    6 * _HOUR,
    12 * _HOUR,
    _DAY,
    2 * _DAY,
    7 * _DAY,
    30 * _DAY,
    90 * _DAY,
    365 * _DAY,
)


class TimeScale(LinearScale):
    """LinearScale over datetimes; inverts back to datetimes in the domain's zone.

    Plain numbers are accepted as epoch seconds so accessors may return either.
    """

    def __init__(
        self,
        domain: tuple[Any, Any] | None = None,
        range_: tuple[float, float] = (0.0, 1.0),
    ) -> None:
        self._tz: tzinfo | None = None
        if domain is None:
            epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
            domain = (epoch, epoch + timedelta(days=1))
        super().__init__(domain, range_)

    def set_domain(self, domain: tuple[Any, Any]) -> "TimeScale":
        lo = domain[0]
        self._tz = lo.tzinfo if isinstance(lo, datetime) else timezone.utc
        super().set_domain(domain)
        return self

    def ticks(self, count: int) -> list[Any]:
        if count <= 0:
            raise ValueError("count must be > 0")
        lo, hi = sorted((self._d0, self._d1))
        if lo == hi:
            return [self._from_number(lo)]
        step = _time_step(hi - lo, count)
        if step >= _DAY:
            start = self._from_number(lo)
            # Day-or-longer intervals start at local midnight.
            cursor = start.replace(hour=0, minute=0, second=0, microsecond=0)
            if cursor < start:
                cursor += timedelta(days=1)
            out: list[Any] = []
            while as_number(cursor) <= hi + 1e-6:
                out.append(cursor)
                cursor += timedelta(seconds=step)
            return out
        first = math.ceil(lo / step) * step
        values = np.arange(first, hi + step * 1e-9, step, dtype=np.float64)
        return [self._from_number(float(v)) for v in values]

    def format_ticks(self, ticks: list[Any]) -> list[str]:
        if not ticks:
            return []
        if len(ticks) > 1:
            step = abs(as_number(ticks[1]) - as_number(ticks[0]))
        else:
            step = _DAY
        if step < _MINUTE:
            fmt = "%H:%M:%S"
        elif step < _DAY:
            fmt = "%H:%M"
        elif step < 28 * _DAY:
            fmt = "%b %d"
        else:
            fmt = "%b %Y"
        return [self._from_number(as_number(t)).strftime(fmt) for t in ticks]

    def _from_number(self, value: float) -> Any:
        return datetime.fromtimestamp(float(value), tz=self._tz)


def _time_step(span: float, count: int) -> float:
    target = span / max(1, count)
    i = bisect_left(_TIME_STEPS, target)
    if i == 0:
        return _TIME_STEPS[0]
    if i >= len(_TIME_STEPS):
        years = _nice_number(target / (365 * _DAY), round_result=True)
        return max(1.0, years) * 365 * _DAY
    below = _TIME_STEPS[i - 1]
    above = _TIME_STEPS[i]
    return below if target / below < above / target else above


def tick_step(vmin: float, vmax: float, count: int) -> float:
    """Step from the 1-2-5 family closest to (vmax - vmin) / count."""
    raw = (vmax - vmin) / max(1, count)
    power = 10 ** np.floor(np.log10(raw))
    error = raw / power
    if error >= np.sqrt(50.0):
        factor = 10.0
    elif error >= np.sqrt(10.0):
        factor = 5.0
    elif error >= np.sqrt(2.0):
        factor = 2.0
    else:
        factor = 1.0
    return float(factor * power)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    """Round ticks inside [vmin, vmax], roughly `target` of them."""
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    step = tick_step(vmin, vmax, target)
    if step < 1.0:
        # Divide by the inverse step so 0.1-style steps do not accumulate drift.
        inv = float(np.rint(1.0 / step))
        ticks = np.arange(np.ceil(vmin * inv), np.floor(vmax * inv) + 1.0, dtype=np.float64) / inv
    else:
        ticks = np.arange(np.ceil(vmin / step), np.floor(vmax / step) + 1.0, dtype=np.float64) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
