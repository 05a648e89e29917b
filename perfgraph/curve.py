from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from perfgraph.errors import GraphDataError


R = TypeVar("R")

# (min, max) along one axis; min <= max.
Domain = tuple[Any, Any]


def _extent(values: Sequence[Any]) -> Domain | None:
    lo = None
    hi = None
    for value in values:
        if lo is None or value < lo:
            lo = value
        if hi is None or value > hi:
            hi = value
    if lo is None:
        return None
    return (lo, hi)


@dataclass(frozen=True)
class Curve(Generic[R]):
    """One named series plus the accessors that read X and Y from its records.

    Records are opaque to the curve. They must already be sorted ascending by
    X; nearest-point lookup relies on it and nothing here re-sorts.
    """

    name: str
    data: Sequence[R]
    get_x: Callable[[R], Any]
    get_y: Callable[[R], float]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise GraphDataError("curve name must be a non-empty string")
        if not callable(self.get_x) or not callable(self.get_y):
            raise GraphDataError(f"curve {self.name!r} accessors must be callable")
        # Snapshot; the caller may keep mutating its own list.
        object.__setattr__(self, "data", tuple(self.data))

    @property
    def is_empty(self) -> bool:
        return len(self.data) == 0

    def __len__(self) -> int:
        return len(self.data)

    def x_values(self) -> list[Any]:
        return [self.get_x(d) for d in self.data]

    def y_values(self) -> list[float]:
        return [self.get_y(d) for d in self.data]

    def x_domain(self) -> Domain | None:
        return _extent(self.x_values())

    def y_domain(self) -> Domain | None:
        return _extent(self.y_values())


@dataclass(frozen=True)
class CurveVisual:
    """A registered curve and the color its chart gave it."""

    curve: Curve[Any]
    color: str
    slot: int

    @property
    def name(self) -> str:
        return self.curve.name
