from __future__ import annotations

import numpy as np

from perfgraph.raster.canvas import RGBA, draw_pixel


def draw_disc(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    r = max(0.5, float(radius))
    x0 = int(np.floor(cx - r))
    x1 = int(np.ceil(cx + r))
    y0 = int(np.floor(cy - r))
    y1 = int(np.ceil(cy + r))
    r2 = r * r
    for yy in range(y0, y1 + 1):
        for xx in range(x0, x1 + 1):
            if (xx - cx) ** 2 + (yy - cy) ** 2 <= r2:
                draw_pixel(dst, xx, yy, color)
