from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging
from typing import Any

import numpy as np

from perfgraph.config import DEFAULT_CONFIG, ChartConfig
from perfgraph.curve import Curve
from perfgraph.instructions import GuideLine, InfoPanel, Instruction, Marker
from perfgraph.layout import ChartLayout
from perfgraph.scales import as_number


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class InfoRow:
    """One labelled line of the hover readout."""

    label: str
    extractor: Callable[[Any], Any]


@dataclass(frozen=True)
class FocusState:
    record: Any
    index: int
    x: float
    y: float
    vertical_guide: tuple[float, float, float, float]
    horizontal_guide: tuple[float, float, float, float]
    rows: tuple[tuple[str, str], ...]


class FocusTracker:
    """Nearest-point hover readout over a reference curve.

    X keys are extracted once; every lookup after that is a bisection, so the
    tracker keeps up with pointer-move rates on large series. Each move is
    resolved from scratch against the pointer position alone.
    """

    def __init__(self, curve: Curve[Any], info_rows: Sequence[InfoRow] = ()) -> None:
        self.curve = curve
        self.info_rows: tuple[InfoRow, ...] = tuple(info_rows)
        self._keys = np.asarray([as_number(curve.get_x(d)) for d in curve.data], dtype=np.float64)
        self._visible = False
        self._focused_index: int | None = None

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def focused(self) -> Any | None:
        if self._focused_index is None:
            return None
        return self.curve.data[self._focused_index]

    def on_enter(self) -> None:
        self._visible = True

    def on_leave(self) -> None:
        self._visible = False

    def locate_index(self, data_x: Any) -> int | None:
        n = self._keys.size
        if n == 0:
            return None
        if n == 1:
            return 0
        q = as_number(data_x)
        i = int(np.searchsorted(self._keys, q, side="left"))
        i = max(1, min(n - 1, i))
        before = float(self._keys[i - 1])
        after = float(self._keys[i])
        # Equidistant pointers go to the later point.
        if q - before >= after - q:
            return i
        return i - 1

    def locate(self, data_x: Any) -> Any | None:
        idx = self.locate_index(data_x)
        if idx is None:
            return None
        return self.curve.data[idx]

    def on_move(self, layout: ChartLayout, pixel_x: float) -> FocusState | None:
        data_x = layout.x_scale.invert(pixel_x)
        idx = self.locate_index(data_x)
        if idx is None:
            self._focused_index = None
            return None
        self._focused_index = idx
        record = self.curve.data[idx]
        px, py = layout.project(self.curve.get_x(record), self.curve.get_y(record))
        return FocusState(
            record=record,
            index=idx,
            x=px,
            y=py,
            vertical_guide=(px, float(layout.plot_height), px, 0.0),
            horizontal_guide=(0.0, py, float(layout.plot_width), py),
            rows=self.info_values(record),
        )

    def info_values(self, record: Any) -> tuple[tuple[str, str], ...]:
        out: list[tuple[str, str]] = []
        for row in self.info_rows:
            try:
                value = row.extractor(record)
            except Exception:
                LOGGER.warning("info row %r failed for focused record", row.label, exc_info=True)
                value = None
            out.append((row.label, "" if value is None else str(value)))
        return tuple(out)

    def overlay(self, state: FocusState, config: ChartConfig = DEFAULT_CONFIG) -> list[Instruction]:
        if not self._visible:
            return []
        return [
            Marker(x=state.x, y=state.y, radius=config.focus_radius, layer="focus"),
            GuideLine("vertical", *state.vertical_guide),
            GuideLine("horizontal", *state.horizontal_guide),
            InfoPanel(
                x=float(config.info_panel_offset),
                y=0.0,
                width=float(config.info_panel_width),
                height=float(config.info_panel_height),
                rows=state.rows,
            ),
        ]
