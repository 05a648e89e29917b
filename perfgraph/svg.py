from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from perfgraph.instructions import (
    AxisLine,
    AxisTick,
    DrawBatch,
    GridLine,
    GuideLine,
    InfoPanel,
    Instruction,
    LegendSwatch,
    Marker,
    Polyline,
    TextLabel,
)


LOGGER = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


def _num(value: float) -> str:
    out = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return "0" if out == "-0" else out


def _path_data(points: tuple[tuple[float, float], ...]) -> str:
    if not points:
        return ""
    head, *rest = points
    parts = [f"M{_num(head[0])},{_num(head[1])}"]
    parts.extend(f"L{_num(x)},{_num(y)}" for x, y in rest)
    return "".join(parts)


def build_svg(batch: DrawBatch) -> ET.Element:
    root = ET.Element(
        "svg",
        {"xmlns": SVG_NS, "width": str(batch.width), "height": str(batch.height)},
    )
    if batch.is_empty:
        return root
    ox, oy = batch.origin
    plot = ET.SubElement(root, "g", {"transform": f"translate({ox},{oy})"})
    groups: dict[str, ET.Element] = {}

    def group(layer: str) -> ET.Element:
        if layer not in groups:
            attrs = {"class": layer}
            if layer == "focus":
                attrs["class"] = "focus-overlay"
            groups[layer] = ET.SubElement(plot, "g", attrs)
        return groups[layer]

    for ins in batch.instructions:
        _append(group(ins.layer), ins)
    return root


def _append(parent: ET.Element, ins: Instruction) -> None:
    if isinstance(ins, (GridLine, AxisLine)):
        ET.SubElement(
            parent,
            "line",
            {
                "class": f"{ins.axis} {'grid' if isinstance(ins, GridLine) else 'axis'}",
                "x1": _num(ins.x1),
                "y1": _num(ins.y1),
                "x2": _num(ins.x2),
                "y2": _num(ins.y2),
            },
        )
    elif isinstance(ins, AxisTick):
        tick = ET.SubElement(parent, "g", {"class": f"tick {ins.axis}", "transform": f"translate({_num(ins.x)},{_num(ins.y)})"})
        if ins.axis == "x":
            ET.SubElement(tick, "line", {"y2": _num(ins.length)})
            text = ET.SubElement(tick, "text", {"y": _num(ins.length + 3), "dy": ".71em", "text-anchor": "middle"})
        else:
            ET.SubElement(tick, "line", {"x2": _num(-ins.length)})
            text = ET.SubElement(tick, "text", {"x": _num(-ins.length - 3), "dy": ".32em", "text-anchor": "end"})
        text.text = ins.label
    elif isinstance(ins, TextLabel):
        attrs = {"text-anchor": ins.anchor}
        if ins.rotate_deg:
            # Rotation happens about the origin, so coordinates move into the rotated frame.
            attrs["transform"] = f"rotate({ins.rotate_deg})"
            attrs["x"] = _num(-ins.y) if ins.rotate_deg == -90 else _num(ins.y)
            attrs["y"] = _num(ins.x) if ins.rotate_deg == -90 else _num(-ins.x)
            attrs["dy"] = "1em"
        else:
            attrs["x"] = _num(ins.x)
            attrs["y"] = _num(ins.y)
        ET.SubElement(parent, "text", attrs).text = ins.text
    elif isinstance(ins, LegendSwatch):
        ET.SubElement(
            parent,
            "rect",
            {
                "x": _num(ins.x),
                "y": _num(ins.y),
                "width": _num(ins.width),
                "height": _num(ins.height),
                "fill": ins.color,
            },
        )
    elif isinstance(ins, Polyline):
        ET.SubElement(
            parent,
            "path",
            {
                "class": f"curve-{ins.color}",
                "d": _path_data(ins.points),
                "fill": "none",
                "stroke": ins.color,
            },
        )
    elif isinstance(ins, Marker):
        attrs = {"r": _num(ins.radius), "transform": f"translate({_num(ins.x)},{_num(ins.y)})"}
        if ins.color is not None:
            attrs["fill"] = ins.color
        ET.SubElement(parent, "circle", attrs)
    elif isinstance(ins, GuideLine):
        ET.SubElement(
            parent,
            "line",
            {
                "id": "verticalHighlightLine" if ins.orientation == "vertical" else "horizontalHighlightLine",
                "x1": _num(ins.x1),
                "y1": _num(ins.y1),
                "x2": _num(ins.x2),
                "y2": _num(ins.y2),
            },
        )
    elif isinstance(ins, InfoPanel):
        panel = ET.SubElement(parent, "g", {"class": "focus-info", "transform": f"translate({_num(ins.x)},{_num(ins.y)})"})
        ET.SubElement(panel, "rect", {"width": _num(ins.width), "height": _num(ins.height)})
        for i, (label, value) in enumerate(ins.rows):
            row_y = _num(16 + i * 16)
            ET.SubElement(panel, "text", {"class": "info-label", "x": "6", "y": row_y}).text = label
            ET.SubElement(panel, "text", {"class": "info-value", "x": _num(ins.width / 2), "y": row_y}).text = value
    else:
        LOGGER.warning("svg backend skipped unknown instruction %s", type(ins).__name__)


def render_svg(batch: DrawBatch) -> str:
    return ET.tostring(build_svg(batch), encoding="unicode")


class SvgRenderer:
    """ChartRenderer that keeps the last SVG document as markup."""

    def __init__(self) -> None:
        self._last_markup: str | None = None

    def draw_batch(self, batch: DrawBatch) -> None:
        self._last_markup = render_svg(batch)

    @property
    def markup(self) -> str | None:
        return self._last_markup
