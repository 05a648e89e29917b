from __future__ import annotations

from pathlib import Path
import tempfile
import unittest
import xml.etree.ElementTree as ET

import numpy as np
from PIL import Image

from perfgraph import Chart, Curve, DrawBatch, InfoRow
from perfgraph.raster import (
    RasterRenderer,
    draw_hline,
    draw_vline,
    fill_rect,
    new_canvas,
    parse_color,
    render_rgba,
    text_size,
)
from perfgraph.svg import SVG_NS, SvgRenderer, render_svg


def _chart() -> Chart:
    chart = Chart(container_width=700)
    for name, points in (("A", [(0, 10), (1, 20), (2, 15)]), ("B", [(0, 5), (1, 25), (2, 10)])):
        chart.add_curve(Curve(name=name, data=points, get_x=lambda d: d[0], get_y=lambda d: d[1]))
    chart.set_focus("A", [InfoRow("Value", lambda d: d[1])])
    return chart


class RasterBackendTests(unittest.TestCase):
    def test_frame_shape_and_content(self) -> None:
        batch = _chart().draw()
        frame = render_rgba(batch)
        self.assertEqual(frame.shape, (270, 600, 4))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertTrue(np.any(frame[:, :, :3] != 255))
        np.testing.assert_array_equal(frame, render_rgba(batch))

    def test_curve_color_reaches_pixels(self) -> None:
        frame = render_rgba(_chart().draw())
        red = (frame[:, :, 0] == 255) & (frame[:, :, 1] == 0) & (frame[:, :, 2] == 0)
        self.assertTrue(red.any())

    def test_empty_batch_yields_blank_frame(self) -> None:
        frame = render_rgba(DrawBatch(width=0, height=0, origin=(0, 0)))
        self.assertEqual(frame.shape, (1, 1, 4))

    def test_renderer_saves_png(self) -> None:
        renderer = RasterRenderer()
        with self.assertRaises(ValueError):
            renderer.save_png("unused.png")
        _chart().draw(renderer)
        frame = renderer.last_frame()
        assert frame is not None
        with tempfile.TemporaryDirectory() as tmp:
            out = renderer.save_png(Path(tmp) / "chart.png")
            with Image.open(out) as img:
                self.assertEqual(img.size, (600, 270))


class RasterPrimitiveTests(unittest.TestCase):
    def test_spans_clip_to_canvas(self) -> None:
        canvas = new_canvas(5, 4)
        draw_hline(canvas, -3, 10, 1, (0, 0, 0, 255))
        draw_vline(canvas, 2, -1, 9, (0, 0, 0, 255))
        draw_hline(canvas, 0, 4, 7, (0, 0, 0, 255))
        black = np.all(canvas[:, :, :3] == 0, axis=2)
        expected = np.zeros((4, 5), dtype=bool)
        expected[1, :] = True
        expected[:, 2] = True
        np.testing.assert_array_equal(black, expected)

    def test_fill_rect_accepts_either_corner_order(self) -> None:
        canvas = new_canvas(6, 6)
        red = parse_color("red")
        fill_rect(canvas, 3, 3, 1, 2, red)
        painted = np.all(canvas == np.asarray(red, dtype=np.uint8), axis=2)
        self.assertEqual(int(painted.sum()), 6)
        self.assertTrue(painted[2:4, 1:4].all())

    def test_text_size_rotation_swaps_extent(self) -> None:
        w, h = text_size("Execution time (ms)")
        self.assertGreater(w, h)
        self.assertEqual(text_size("Execution time (ms)", rotate_deg=-90), (h, w))
        empty_w, empty_h = text_size("")
        self.assertEqual(empty_w, 0)
        self.assertGreater(empty_h, 0)


class SvgBackendTests(unittest.TestCase):
    def test_document_structure(self) -> None:
        markup = render_svg(_chart().draw())
        root = ET.fromstring(markup)
        self.assertEqual(root.tag, f"{{{SVG_NS}}}svg")
        self.assertEqual((root.get("width"), root.get("height")), ("600", "270"))
        paths = root.findall(f".//{{{SVG_NS}}}path")
        self.assertEqual([p.get("class") for p in paths], ["curve-red", "curve-green"])
        self.assertNotIn("focus-overlay", markup)

    def test_focus_overlay_when_hovering(self) -> None:
        chart = _chart()
        chart.draw()
        chart.on_pointer_enter()
        chart.on_pointer_move(chart.layout.x_scale(1.0))
        renderer = SvgRenderer()
        chart.draw(renderer)
        markup = renderer.markup
        assert markup is not None
        root = ET.fromstring(markup)
        self.assertIsNotNone(root.find(f".//{{{SVG_NS}}}g[@class='focus-overlay']"))
        self.assertIsNotNone(root.find(f".//{{{SVG_NS}}}line[@id='verticalHighlightLine']"))
        values = [t.text for t in root.iter(f"{{{SVG_NS}}}text") if t.get("class") == "info-value"]
        self.assertEqual(values, ["20"])

    def test_empty_batch(self) -> None:
        root = ET.fromstring(render_svg(DrawBatch(width=0, height=0, origin=(0, 0))))
        self.assertEqual(list(root), [])


if __name__ == "__main__":
    unittest.main()
