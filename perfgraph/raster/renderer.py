from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from perfgraph.instructions import (
    AxisLine,
    AxisTick,
    DrawBatch,
    GridLine,
    GuideLine,
    InfoPanel,
    LegendSwatch,
    Marker,
    Polyline,
    TextLabel,
)
from perfgraph.raster.canvas import RGBA, fill_rect, new_canvas, parse_color, stroke_rect
from perfgraph.raster.draw_lines import draw_polyline, draw_segment
from perfgraph.raster.draw_markers import draw_disc
from perfgraph.raster.draw_text import draw_text, text_size


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RasterStyle:
    background: RGBA = (255, 255, 255, 255)
    grid_color: RGBA = (220, 220, 220, 255)
    axis_color: RGBA = (40, 40, 40, 255)
    text_color: RGBA = (30, 30, 30, 255)
    guide_color: RGBA = (120, 120, 120, 200)
    focus_color: RGBA = (70, 130, 180, 255)
    panel_background: RGBA = (255, 255, 255, 220)
    panel_border: RGBA = (150, 150, 150, 255)
    line_width: int = 1
    guide_dash: int = 3
    font_size_px: float = 11.0


def _round(v: float) -> int:
    return int(round(v))


def render_rgba(batch: DrawBatch, style: RasterStyle = RasterStyle()) -> np.ndarray:
    """Paint a draw batch into an (H, W, 4) uint8 frame."""

    if batch.is_empty:
        return new_canvas(max(1, batch.width), max(1, batch.height), color=style.background)

    canvas = new_canvas(batch.width, batch.height, color=style.background)
    ox, oy = batch.origin

    def at(x: float, y: float) -> tuple[int, int]:
        return (_round(x + ox), _round(y + oy))

    for ins in batch.instructions:
        if isinstance(ins, GridLine):
            draw_segment(canvas, *at(ins.x1, ins.y1), *at(ins.x2, ins.y2), style.grid_color)
        elif isinstance(ins, AxisLine):
            draw_segment(canvas, *at(ins.x1, ins.y1), *at(ins.x2, ins.y2), style.axis_color)
        elif isinstance(ins, AxisTick):
            _draw_tick(canvas, ins, at, style)
        elif isinstance(ins, TextLabel):
            _draw_label(canvas, ins, at, style)
        elif isinstance(ins, LegendSwatch):
            x0, y0 = at(ins.x, ins.y)
            fill_rect(canvas, x0, y0, x0 + _round(ins.width) - 1, y0 + _round(ins.height) - 1, parse_color(ins.color))
        elif isinstance(ins, Polyline):
            draw_polyline(canvas, [at(x, y) for x, y in ins.points], parse_color(ins.color), width=style.line_width)
        elif isinstance(ins, Marker):
            color = parse_color(ins.color) if ins.color is not None else style.focus_color
            draw_disc(canvas, ins.x + ox, ins.y + oy, ins.radius, color)
        elif isinstance(ins, GuideLine):
            draw_segment(canvas, *at(ins.x1, ins.y1), *at(ins.x2, ins.y2), style.guide_color, dash=style.guide_dash)
        elif isinstance(ins, InfoPanel):
            _draw_panel(canvas, ins, at, style)
        else:
            LOGGER.warning("raster backend skipped unknown instruction %s", type(ins).__name__)
    return canvas


def _draw_tick(canvas: np.ndarray, tick: AxisTick, at, style: RasterStyle) -> None:
    x, y = at(tick.x, tick.y)
    length = _round(tick.length)
    w, h = text_size(tick.label, font_size_px=style.font_size_px)
    if tick.axis == "x":
        draw_segment(canvas, x, y, x, y + length, style.axis_color)
        draw_text(canvas, x - w // 2, y + length + 2, tick.label, style.text_color, font_size_px=style.font_size_px)
    else:
        draw_segment(canvas, x - length, y, x, y, style.axis_color)
        draw_text(canvas, x - length - 3 - w, y - h // 2, tick.label, style.text_color, font_size_px=style.font_size_px)


def _draw_label(canvas: np.ndarray, label: TextLabel, at, style: RasterStyle) -> None:
    x, y = at(label.x, label.y)
    w, h = text_size(label.text, font_size_px=style.font_size_px, rotate_deg=label.rotate_deg)
    if label.rotate_deg % 180 != 0:
        # Rotated labels center vertically on y and hang right of x.
        left = x
        top = y - h // 2 if label.anchor == "middle" else y
    else:
        if label.anchor == "middle":
            left = x - w // 2
        elif label.anchor == "end":
            left = x - w
        else:
            left = x
        top = y - h
    draw_text(
        canvas,
        left,
        top,
        label.text,
        style.text_color,
        font_size_px=style.font_size_px,
        rotate_deg=label.rotate_deg,
    )


def _draw_panel(canvas: np.ndarray, panel: InfoPanel, at, style: RasterStyle) -> None:
    x0, y0 = at(panel.x, panel.y)
    x1 = x0 + _round(panel.width) - 1
    y1 = y0 + _round(panel.height) - 1
    fill_rect(canvas, x0, y0, x1, y1, style.panel_background)
    stroke_rect(canvas, x0, y0, x1, y1, style.panel_border)
    row_h = int(style.font_size_px * 1.6)
    label_w = max((text_size(label, font_size_px=style.font_size_px)[0] for label, _ in panel.rows), default=0)
    for i, (label, value) in enumerate(panel.rows):
        ty = y0 + 6 + i * row_h
        if ty + row_h > y1:
            break
        draw_text(canvas, x0 + 6, ty, label, style.text_color, font_size_px=style.font_size_px)
        draw_text(canvas, x0 + 14 + label_w, ty, value, style.text_color, font_size_px=style.font_size_px)


class RasterRenderer:
    """ChartRenderer that keeps the last painted frame."""

    def __init__(self, style: RasterStyle = RasterStyle()) -> None:
        self.style = style
        self._last_frame: np.ndarray | None = None

    def draw_batch(self, batch: DrawBatch) -> None:
        self._last_frame = render_rgba(batch, self.style)

    def last_frame(self) -> np.ndarray | None:
        if self._last_frame is None:
            return None
        return self._last_frame.copy()

    def save_png(self, path: str | Path) -> Path:
        if self._last_frame is None:
            raise ValueError("nothing has been drawn yet")
        out = Path(path)
        Image.fromarray(self._last_frame).save(out)
        return out
