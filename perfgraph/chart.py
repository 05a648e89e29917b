from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any

from perfgraph.config import DEFAULT_CONFIG, ChartConfig
from perfgraph.curve import Curve, CurveVisual, Domain
from perfgraph.domains import DomainAggregator
from perfgraph.errors import GraphDataError
from perfgraph.focus import FocusState, FocusTracker, InfoRow
from perfgraph.instructions import (
    AxisLine,
    AxisTick,
    ChartRenderer,
    DrawBatch,
    GridLine,
    Instruction,
    LegendSwatch,
    Marker,
    Polyline,
    TextLabel,
)
from perfgraph.layout import ChartLayout
from perfgraph.scales import LinearScale, TimeScale


LOGGER = logging.getLogger(__name__)

TICK_LENGTH = 6.0


@dataclass(frozen=True)
class CurveGeometry:
    name: str
    color: str
    points: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class ChartGeometry:
    """Everything a frame needs before any instruction is emitted."""

    x_domain: Domain
    y_domain: Domain
    layout: ChartLayout
    curves: tuple[CurveGeometry, ...]
    show_legend: bool


class Chart:
    """Multi-curve line chart with a shared coordinate space and hover readout."""

    def __init__(
        self,
        container_width: int,
        container_height: int | None = None,
        *,
        config: ChartConfig = DEFAULT_CONFIG,
    ) -> None:
        if container_width <= 0:
            raise ValueError("container_width must be > 0")
        if container_height is not None and container_height <= 0:
            raise ValueError("container_height must be > 0")
        self.config = config
        self.container_width = int(container_width)
        self.container_height = container_height
        self._registry: dict[str, CurveVisual] = {}
        self._focus: FocusTracker | None = None
        self._layout: ChartLayout | None = None
        self._pointer_x: float | None = None
        self._focus_state: FocusState | None = None

    @property
    def curves(self) -> tuple[Curve[Any], ...]:
        return tuple(v.curve for v in self._registry.values())

    @property
    def visuals(self) -> tuple[CurveVisual, ...]:
        return tuple(self._registry.values())

    @property
    def layout(self) -> ChartLayout | None:
        return self._layout

    @property
    def focus(self) -> FocusTracker | None:
        return self._focus

    @property
    def focus_state(self) -> FocusState | None:
        return self._focus_state

    def color_of(self, name: str) -> str:
        return self._registry[name].color

    def add_curve(self, curve: Curve[Any]) -> CurveVisual:
        existing = self._registry.get(curve.name)
        if existing is not None:
            # Same name replaces the series but keeps its slot and color.
            visual = CurveVisual(curve=curve, color=existing.color, slot=existing.slot)
        else:
            palette = self.config.palette
            slot = len(self._registry)
            visual = CurveVisual(curve=curve, color=palette[slot % len(palette)], slot=slot)
            if slot >= len(palette):
                LOGGER.debug("palette exhausted; curve %r reuses color %s", curve.name, visual.color)
        if curve.is_empty:
            LOGGER.warning("curve %r has no data points; it will not be drawn", curve.name)
        self._registry[curve.name] = visual
        if self._focus is not None and self._focus.curve.name == curve.name:
            self._bind_focus(curve, self._focus.info_rows)
        return visual

    def set_focus(self, curve_name: str, info_rows: Sequence[InfoRow] = ()) -> FocusTracker:
        visual = self._registry.get(curve_name)
        if visual is None:
            raise GraphDataError(f"unknown focus curve: {curve_name}")
        return self._bind_focus(visual.curve, info_rows)

    def _bind_focus(self, curve: Curve[Any], info_rows: Sequence[InfoRow]) -> FocusTracker:
        """Swap in a tracker for `curve`, keeping pointer visibility.

        The previous focus state belongs to other data, so it is dropped; the
        next move or draw resolves it again from the stored pointer position.
        """
        was_visible = self._focus is not None and self._focus.visible
        self._focus = FocusTracker(curve, info_rows)
        if was_visible:
            self._focus.on_enter()
        self._focus_state = None
        return self._focus

    def _drawable(self) -> list[CurveVisual]:
        return [v for v in self._registry.values() if not v.curve.is_empty]

    def geometry(self) -> ChartGeometry | None:
        drawable = self._drawable()
        if not drawable:
            return None
        aggregator = DomainAggregator([v.curve for v in drawable])
        x_domain = aggregator.x_domain()
        y_domain = aggregator.y_domain()
        assert x_domain is not None and y_domain is not None
        layout = ChartLayout.from_container(
            self.container_width,
            height=self.container_height,
            config=self.config,
            x_scale=TimeScale() if isinstance(x_domain[0], datetime) else LinearScale(),
        )
        layout.with_domains(x_domain, y_domain)
        curves = tuple(
            CurveGeometry(
                name=v.name,
                color=v.color,
                points=tuple(layout.project(v.curve.get_x(d), v.curve.get_y(d)) for d in v.curve.data),
            )
            for v in drawable
        )
        return ChartGeometry(
            x_domain=x_domain,
            y_domain=y_domain,
            layout=layout,
            curves=curves,
            show_legend=aggregator.curve_count >= 2,
        )

    def draw(self, renderer: ChartRenderer | None = None) -> DrawBatch:
        geometry = self.geometry()
        if geometry is None:
            self._layout = None
            return DrawBatch(width=0, height=0, origin=(0, 0))
        layout = geometry.layout
        self._layout = layout

        instructions: list[Instruction] = []
        instructions.extend(self._grid(layout))
        instructions.extend(self._axes(layout))
        if geometry.show_legend:
            instructions.extend(self._legend(geometry))
        for curve in geometry.curves:
            instructions.extend(self._curve(curve))
        if self._focus is not None and self._pointer_x is not None:
            self._focus_state = self._focus.on_move(layout, self._pointer_x)
        instructions.extend(self._overlay())

        batch = DrawBatch(
            width=layout.total_width,
            height=layout.total_height,
            origin=(layout.margin.left, layout.margin.top),
            instructions=tuple(instructions),
        )
        LOGGER.debug(
            "chart drawn: %d curves, x=%s, y=%s, %d instructions",
            len(geometry.curves),
            geometry.x_domain,
            geometry.y_domain,
            len(batch.instructions),
        )
        if renderer is not None:
            renderer.draw_batch(batch)
        return batch

    def overlay_batch(self) -> DrawBatch:
        """Focus layer alone, for hosts that repaint the overlay on every move."""
        layout = self._layout
        if layout is None:
            return DrawBatch(width=0, height=0, origin=(0, 0))
        return DrawBatch(
            width=layout.total_width,
            height=layout.total_height,
            origin=(layout.margin.left, layout.margin.top),
            instructions=tuple(self._overlay()),
        )

    def on_pointer_enter(self) -> None:
        if self._focus is not None:
            self._focus.on_enter()

    def on_touch_start(self) -> None:
        self.on_pointer_enter()

    def on_pointer_leave(self) -> None:
        if self._focus is not None:
            self._focus.on_leave()

    def on_pointer_move(self, pixel_x: float) -> FocusState | None:
        if self._focus is None or self._layout is None:
            return None
        self._pointer_x = float(pixel_x)
        self._focus_state = self._focus.on_move(self._layout, self._pointer_x)
        return self._focus_state

    def on_touch_move(self, pixel_x: float) -> FocusState | None:
        return self.on_pointer_move(pixel_x)

    def _overlay(self) -> list[Instruction]:
        if self._focus is None or self._focus_state is None:
            return []
        return self._focus.overlay(self._focus_state, self.config)

    def _ticks(self, layout: ChartLayout) -> tuple[list[Any], list[str], list[Any], list[str]]:
        count = self.config.tick_count
        x_ticks = layout.x_scale.ticks(count)
        y_ticks = layout.y_scale.ticks(count)
        return (
            x_ticks,
            layout.x_scale.format_ticks(x_ticks),
            y_ticks,
            layout.y_scale.format_ticks(y_ticks),
        )

    def _grid(self, layout: ChartLayout) -> list[Instruction]:
        x_ticks, _, y_ticks, _ = self._ticks(layout)
        w = float(layout.plot_width)
        h = float(layout.plot_height)
        out: list[Instruction] = []
        for t in x_ticks:
            px = layout.x_scale(t)
            out.append(GridLine("x", px, h, px, 0.0))
        for t in y_ticks:
            py = layout.y_scale(t)
            out.append(GridLine("y", 0.0, py, w, py))
        return out

    def _axes(self, layout: ChartLayout) -> list[Instruction]:
        x_ticks, x_labels, y_ticks, y_labels = self._ticks(layout)
        w = float(layout.plot_width)
        h = float(layout.plot_height)
        out: list[Instruction] = [AxisLine("x", 0.0, h, w, h)]
        for t, label in zip(x_ticks, x_labels, strict=True):
            out.append(AxisTick("x", layout.x_scale(t), h, TICK_LENGTH, label))
        out.append(
            TextLabel(
                x=w / 2,
                y=h + layout.margin.top + self.config.x_label_gap,
                text=self.config.x_label,
                anchor="middle",
            )
        )
        out.append(AxisLine("y", 0.0, h, 0.0, 0.0))
        for t, label in zip(y_ticks, y_labels, strict=True):
            out.append(AxisTick("y", 0.0, layout.y_scale(t), TICK_LENGTH, label))
        out.append(
            TextLabel(
                x=-float(layout.margin.left),
                y=h / 2,
                text=self.config.y_label,
                anchor="middle",
                rotate_deg=-90,
            )
        )
        return out

    def _legend(self, geometry: ChartGeometry) -> list[Instruction]:
        cfg = self.config
        out: list[Instruction] = []
        for i, curve in enumerate(geometry.curves):
            row_y = cfg.legend_row_height * i
            out.append(
                LegendSwatch(
                    x=float(cfg.legend_x),
                    y=float(6 + row_y),
                    width=float(cfg.legend_swatch_width),
                    height=float(cfg.legend_swatch_height),
                    color=curve.color,
                    label=curve.name,
                )
            )
            out.append(
                TextLabel(
                    x=float(cfg.legend_x + cfg.legend_swatch_width + 5),
                    y=float(10 + row_y),
                    text=curve.name,
                    layer="legend",
                )
            )
        return out

    def _curve(self, curve: CurveGeometry) -> list[Instruction]:
        out: list[Instruction] = [Polyline(curve_name=curve.name, color=curve.color, points=curve.points)]
        radius = self.config.marker_radius
        for px, py in curve.points:
            out.append(Marker(x=px, y=py, radius=radius, color=curve.color, curve_name=curve.name))
        return out
