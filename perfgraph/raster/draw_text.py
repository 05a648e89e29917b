from __future__ import annotations

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from perfgraph.raster.canvas import RGBA


DEFAULT_FONT_SIZE_PX = 11.0
# Tried in order through Pillow's own font search path.
FONT_CANDIDATES = (
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
    "Arial.ttf",
    "Helvetica.ttc",
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Blend `text` with the top-left corner of its (rotated) box at (x, y).

    Positive `rotate_deg` turns clockwise, matching SVG's rotate().
    """
    if not text:
        return
    mask = _glyph_mask(text, _font(_size_key(font_size_px)), rotate_deg)
    _blend_coverage(dst, x, y, mask, color)


def text_size(
    text: str,
    *,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> tuple[int, int]:
    font = _font(_size_key(font_size_px))
    if not text:
        _, top, _, bottom = font.getbbox("Ag")
        return (0, max(1, int(bottom - top)))
    h, w = _glyph_mask(text, font, rotate_deg).shape
    return (w, h)


def _size_key(font_size_px: float) -> int:
    return max(1, int(round(font_size_px)))


@lru_cache(maxsize=16)
def _font(size: int) -> Font:
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=512)
def _glyph_mask(text: str, font: Font, rotate_deg: int) -> np.ndarray:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    if rotate_deg % 360:
        # PIL rotates counter-clockwise.
        image = image.rotate(-rotate_deg, expand=True)
    mask = np.asarray(image, dtype=np.uint8)
    mask.flags.writeable = False
    return mask


def _blend_coverage(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    rows = slice(max(0, y), min(dst.shape[0], y + mask.shape[0]))
    cols = slice(max(0, x), min(dst.shape[1], x + mask.shape[1]))
    if rows.start >= rows.stop or cols.start >= cols.stop:
        return
    alpha = mask[rows.start - y : rows.stop - y, cols.start - x : cols.stop - x].astype(np.float32)
    alpha *= color[3] / 255.0 / 255.0
    if not alpha.any():
        return
    region = dst[rows, cols]
    ink = np.asarray(color[:3], dtype=np.float32)
    mixed = ink * alpha[:, :, None] + region[:, :, :3].astype(np.float32) * (1.0 - alpha[:, :, None])
    region[:, :, :3] = np.clip(np.rint(mixed), 0, 255).astype(np.uint8)
    region[:, :, 3] = 255
