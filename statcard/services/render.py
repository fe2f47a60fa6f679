from __future__ import annotations

import logging
import unicodedata
from abc import ABC, abstractmethod
from functools import lru_cache
from io import BytesIO
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFont

from statcard.core.errors import RenderError
from statcard.services.layout import (
    KIND_HEADING,
    KIND_LINE_PATH,
    KIND_PARAGRAPH,
    KIND_POINT_MARKER,
    KIND_TEXT_LABEL,
    CardLayout,
    Gradient,
    VisualElement,
)

log = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

FONT_PATHS = {
    "normal": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    ],
    "bold": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    ],
}
# monochrome glyph fonts; colour bitmap emoji fonts only load at their fixed strike size
SYMBOL_FONT_PATHS = [
    "/usr/share/fonts/truetype/noto/NotoEmoji-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansSymbols2-Regular.ttf",
    "/usr/share/fonts/truetype/ancient-scripts/Symbola_hint.ttf",
]
VARIATION_SELECTORS = ("\ufe0e", "\ufe0f")
TEXT_KINDS = (KIND_HEADING, KIND_PARAGRAPH, KIND_TEXT_LABEL)


class CardRenderer(ABC):
    """Anything that can turn a CardLayout into image bytes."""

    @abstractmethod
    def render(self, layout: CardLayout) -> bytes:
        ...


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    h = value.strip().lstrip("#")
    if len(h) != 6:
        raise ValueError(f"Invalid hex color: {value}")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def rgba(value: str, opacity: float = 1.0) -> RGBA:
    alpha = int(round(max(0.0, min(1.0, opacity)) * 255))
    return (*hex_to_rgb(value), alpha)


@lru_cache(maxsize=32)
def load_font(size: int, weight: str = "normal") -> ImageFont.ImageFont:
    for p in FONT_PATHS.get(weight, FONT_PATHS["normal"]):
        try:
            return ImageFont.truetype(p, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=32)
def load_symbol_font(size: int) -> Optional[ImageFont.FreeTypeFont]:
    for p in SYMBOL_FONT_PATHS:
        try:
            return ImageFont.truetype(p, size)
        except OSError:
            continue
    return None


def is_symbol(ch: str) -> bool:
    return unicodedata.category(ch) == "So" or ord(ch) >= 0x1F000


def text_runs(text: str, font, symbol_font=None) -> List[Tuple[str, object]]:
    """Split text into (segment, font) runs, routing pictographs to the symbol font."""
    text = "".join(ch for ch in text if ch not in VARIATION_SELECTORS)
    if symbol_font is None:
        return [(text, font)]
    runs: List[Tuple[str, object]] = []
    for ch in text:
        f = symbol_font if is_symbol(ch) else font
        if runs and runs[-1][1] is f:
            runs[-1] = (runs[-1][0] + ch, f)
        else:
            runs.append((ch, f))
    return runs


def _channel_lut(stops: Sequence[Tuple[int, int, int]], channel: int) -> List[int]:
    """256-entry table interpolating one colour channel across evenly spaced stops."""
    segments = len(stops) - 1
    lut = []
    for i in range(256):
        t = i / 255 * segments
        k = min(int(t), segments - 1)
        frac = t - k
        a, b = stops[k][channel], stops[k + 1][channel]
        lut.append(int(round(a + (b - a) * frac)))
    return lut


def gradient_image(gradient: Gradient, size: Tuple[int, int]) -> Image.Image:
    stops = [hex_to_rgb(s) for s in gradient.stops]
    if len(stops) == 1:
        return Image.new("RGB", size, stops[0])
    vertical = Image.linear_gradient("L").resize(size)
    if gradient.direction == "diagonal":
        horizontal = Image.linear_gradient("L").rotate(90, expand=True)
        ramp = ImageChops.add(vertical, horizontal.resize(size), scale=2.0)
    else:
        ramp = vertical
    bands = [ramp.point(_channel_lut(stops, c)) for c in range(3)]
    return Image.merge("RGB", bands)


class PillowRenderer(CardRenderer):
    """Rasterizes a CardLayout to PNG with Pillow, painting children back-to-front."""

    def render(self, layout: CardLayout) -> bytes:
        try:
            img = Image.new("RGB", (layout.width, layout.height), (0, 0, 0))
            self._paint(img, layout.root)
            buf = BytesIO()
            img.save(buf, format="PNG")
            return buf.getvalue()
        except Exception as e:
            log.exception("Failed to rasterize %dx%d card", layout.width, layout.height)
            raise RenderError(str(e)) from e

    def _paint(self, img: Image.Image, el: VisualElement) -> None:
        if el.kind in TEXT_KINDS:
            self._text(img, el)
        elif el.kind == KIND_LINE_PATH:
            self._path(img, el)
        elif el.kind == KIND_POINT_MARKER:
            self._marker(img, el)
        else:
            self._box(img, el)
        for child in el.children:
            self._paint(img, child)

    @staticmethod
    def _bounds(el: VisualElement) -> Tuple[int, int, int, int]:
        x0, y0 = int(round(el.x)), int(round(el.y))
        return x0, y0, int(round(el.x + el.width)), int(round(el.y + el.height))

    def _box(self, img: Image.Image, el: VisualElement) -> None:
        s = el.style
        x0, y0, x1, y1 = self._bounds(el)
        if x1 <= x0 or y1 <= y0:
            return
        radius = max(0, min(int(s.radius), (x1 - x0 - 1) // 2, (y1 - y0 - 1) // 2))
        if s.gradient is not None:
            # gradient tile pasted through a rounded mask
            tile = gradient_image(s.gradient, (x1 - x0, y1 - y0))
            mask = Image.new("L", tile.size, 0)
            ImageDraw.Draw(mask).rounded_rectangle((0, 0, tile.width - 1, tile.height - 1), radius=radius,
                                                   fill=int(round(s.opacity * 255)))
            img.paste(tile, (x0, y0), mask)
        if s.fill is None and s.stroke is None:
            return
        draw = ImageDraw.Draw(img, "RGBA")
        fill = rgba(s.fill, s.opacity) if s.fill else None
        outline = rgba(s.stroke, s.stroke_opacity) if s.stroke and s.stroke_width else None
        draw.rounded_rectangle((x0, y0, x1 - 1, y1 - 1), radius=radius, fill=fill, outline=outline,
                               width=max(1, int(s.stroke_width)))

    def _path(self, img: Image.Image, el: VisualElement) -> None:
        s = el.style
        if len(el.points) < 2:
            return
        draw = ImageDraw.Draw(img, "RGBA")
        if s.fill:
            draw.polygon(list(el.points), fill=rgba(s.fill, s.opacity))
        if s.stroke and s.stroke_width:
            draw.line(list(el.points), fill=rgba(s.stroke, s.stroke_opacity), width=int(s.stroke_width),
                      joint="curve")

    def _marker(self, img: Image.Image, el: VisualElement) -> None:
        s = el.style
        draw = ImageDraw.Draw(img, "RGBA")
        outline = rgba(s.stroke, s.stroke_opacity) if s.stroke else None
        draw.ellipse(self._bounds(el), fill=rgba(s.fill, s.opacity) if s.fill else None,
                     outline=outline, width=max(1, int(s.stroke_width)))

    def _text(self, img: Image.Image, el: VisualElement) -> None:
        s = el.style
        if not el.text:
            return
        size = s.font_size or 14
        runs = text_runs(el.text, load_font(size, s.font_weight), load_symbol_font(size))
        draw = ImageDraw.Draw(img, "RGBA")
        fill = rgba(s.text_color or "#ffffff", s.opacity)
        total = sum(draw.textlength(seg, font=f) for seg, f in runs)
        if s.text_align == "center":
            x = el.x + (el.width - total) / 2
        elif s.text_align == "right":
            x = el.x + el.width - total
        else:
            x = el.x
        for seg, f in runs:
            draw.text((x, el.y), seg, font=f, fill=fill)
            x += draw.textlength(seg, font=f)
