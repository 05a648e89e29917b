from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from perfgraph.raster.canvas import RGBA, draw_pixel


def draw_polyline(
    dst: np.ndarray,
    points: Sequence[tuple[int, int]],
    color: RGBA,
    *,
    width: int = 1,
) -> None:
    if len(points) < 2:
        return
    for (x0, y0), (x1, y1) in zip(points[:-1], points[1:], strict=True):
        draw_segment(dst, x0, y0, x1, y1, color, width=width)


def draw_segment(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: RGBA,
    *,
    width: int = 1,
    dash: int = 0,
) -> None:
    """Bresenham segment; `dash` > 0 alternates `dash` pixels on and off."""
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    step = 0

    while True:
        if dash <= 0 or (step // dash) % 2 == 0:
            _draw_square_brush(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        step += 1
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    radius = max(0, width // 2)
    for yy in range(y - radius, y + radius + 1):
        for xx in range(x - radius, x + radius + 1):
            draw_pixel(dst, xx, yy, color)
