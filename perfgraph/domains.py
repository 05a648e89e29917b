from __future__ import annotations

from collections.abc import Callable, Iterable
import math
from typing import Any

from perfgraph.curve import Curve, Domain


Y_LOWER_HEADROOM = 0.97
Y_UPPER_HEADROOM = 1.05
# Legend rows stack inside the plot area, so more curves need more room on top.
Y_UPPER_HEADROOM_FEW_CURVES = 1.15
Y_UPPER_HEADROOM_MANY_CURVES = 1.25


def aggregate(curves: Iterable[Curve[Any]], domain_of: Callable[[Curve[Any]], Domain | None]) -> Domain | None:
    """Union of per-curve domains; None when no curve contributes one."""

    lo = None
    hi = None
    for curve in curves:
        domain = domain_of(curve)
        if domain is None:
            continue
        if lo is None or domain[0] < lo:
            lo = domain[0]
        if hi is None or domain[1] > hi:
            hi = domain[1]
    if lo is None:
        return None
    return (lo, hi)


def y_extension_factor(curve_count: int) -> float:
    # Three curves fall through to the single-curve factor; kept as-is.
    if 1 < curve_count < 3:
        return Y_UPPER_HEADROOM_FEW_CURVES
    if curve_count > 3:
        return Y_UPPER_HEADROOM_MANY_CURVES
    return Y_UPPER_HEADROOM


def extend_y_domain(domain: Domain, curve_count: int) -> tuple[int, int]:
    lo, hi = domain
    return (
        math.floor(lo * Y_LOWER_HEADROOM),
        math.ceil(hi * y_extension_factor(curve_count)),
    )


class DomainAggregator:
    """Shared X and Y domains over every curve of a chart."""

    def __init__(self, curves: Iterable[Curve[Any]], *, curve_count: int | None = None) -> None:
        self._curves = [c for c in curves if not c.is_empty]
        self._curve_count = len(self._curves) if curve_count is None else int(curve_count)

    @property
    def curve_count(self) -> int:
        return self._curve_count

    def x_domain(self) -> Domain | None:
        return aggregate(self._curves, lambda c: c.x_domain())

    def raw_y_domain(self) -> Domain | None:
        return aggregate(self._curves, lambda c: c.y_domain())

    def y_domain(self) -> tuple[int, int] | None:
        raw = self.raw_y_domain()
        if raw is None:
            return None
        return extend_y_domain(raw, self._curve_count)
