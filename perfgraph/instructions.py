from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, TypeAlias, TypeVar


Layer = Literal["grid", "axes", "legend", "curves", "focus"]
Axis = Literal["x", "y"]
Anchor = Literal["start", "middle", "end"]

# Back-to-front paint order.
LAYER_ORDER: tuple[Layer, ...] = ("grid", "axes", "legend", "curves", "focus")


@dataclass(frozen=True)
class GridLine:
    axis: Axis
    x1: float
    y1: float
    x2: float
    y2: float
    layer: Layer = "grid"


@dataclass(frozen=True)
class AxisLine:
    axis: Axis
    x1: float
    y1: float
    x2: float
    y2: float
    layer: Layer = "axes"


@dataclass(frozen=True)
class AxisTick:
    """Tick mark at (x, y) on the axis, pointing away from the plot."""

    axis: Axis
    x: float
    y: float
    length: float
    label: str
    layer: Layer = "axes"


@dataclass(frozen=True)
class TextLabel:
    x: float
    y: float
    text: str
    anchor: Anchor = "start"
    rotate_deg: int = 0
    layer: Layer = "axes"


@dataclass(frozen=True)
class LegendSwatch:
    x: float
    y: float
    width: float
    height: float
    color: str
    label: str
    layer: Layer = "legend"


@dataclass(frozen=True)
class Polyline:
    curve_name: str
    color: str
    points: tuple[tuple[float, float], ...]
    layer: Layer = "curves"


@dataclass(frozen=True)
class Marker:
    x: float
    y: float
    radius: float
    color: str | None = None
    curve_name: str | None = None
    layer: Layer = "curves"


@dataclass(frozen=True)
class GuideLine:
    orientation: Literal["vertical", "horizontal"]
    x1: float
    y1: float
    x2: float
    y2: float
    layer: Layer = "focus"


@dataclass(frozen=True)
class InfoPanel:
    x: float
    y: float
    width: float
    height: float
    rows: tuple[tuple[str, str], ...]
    layer: Layer = "focus"


Instruction: TypeAlias = GridLine | AxisLine | AxisTick | TextLabel | LegendSwatch | Polyline | Marker | GuideLine | InfoPanel

T = TypeVar("T")


@dataclass(frozen=True)
class DrawBatch:
    """Ordered draw instructions for one chart frame.

    Coordinates are plot-space: (0, 0) is the top-left of the plot area, which
    sits at `origin` inside a `width` x `height` surface.
    """

    width: int
    height: int
    origin: tuple[int, int]
    instructions: tuple[Instruction, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.instructions

    def of_type(self, kind: type[T]) -> list[T]:
        return [ins for ins in self.instructions if isinstance(ins, kind)]

    def layer(self, name: Layer) -> list[Instruction]:
        return [ins for ins in self.instructions if ins.layer == name]

    def layers(self) -> list[Layer]:
        """Distinct layers in emission order."""
        seen: list[Layer] = []
        for ins in self.instructions:
            if ins.layer not in seen:
                seen.append(ins.layer)
        return seen


class ChartRenderer(Protocol):
    """Drawing collaborator that paints a chart's instruction batch."""

    def draw_batch(self, batch: DrawBatch) -> None:
        ...
