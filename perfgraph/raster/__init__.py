from .canvas import draw_hline, draw_vline, fill_rect, new_canvas, parse_color
from .draw_lines import draw_polyline, draw_segment
from .draw_markers import draw_disc
from .draw_text import draw_text, text_size
from .renderer import RasterRenderer, RasterStyle, render_rgba

__all__ = [
    "RasterRenderer",
    "RasterStyle",
    "draw_disc",
    "draw_hline",
    "draw_polyline",
    "draw_segment",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "parse_color",
    "render_rgba",
    "text_size",
]
