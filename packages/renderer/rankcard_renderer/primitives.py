"""Drawing primitives and standalone image helpers built on Pillow."""

from __future__ import annotations

import logging
import math
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageFont

from .errors import ValidationError, type_name
from .formatting import get_acronym, invert_color
from .models import BarStyle, TrackStyle


logger = logging.getLogger("rankcard.primitives")

RGBA = tuple[int, int, int, int]


def parse_color(value: object, default: str = "#000000") -> RGBA:
    """Resolve any CSS-style color string to RGBA, falling back to ``default``."""
    if isinstance(value, str) and value:
        try:
            return ImageColor.getcolor(value, "RGBA")  # type: ignore[return-value]
        except ValueError:
            logger.warning("unparsable color %r; using %s", value, default, extra={"event": "color_fallback"})
    return ImageColor.getcolor(default, "RGBA")  # type: ignore[return-value]


def encode_png(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def _ascent(font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> float:
    getmetrics = getattr(font, "getmetrics", None)
    if getmetrics is not None:
        return float(getmetrics()[0])
    bbox = font.getbbox("A")
    return float(bbox[3])


def text_width(font: ImageFont.FreeTypeFont | ImageFont.ImageFont, text: str) -> float:
    return float(ImageDraw.Draw(Image.new("L", (1, 1))).textlength(text, font=font))


def draw_text(
    canvas: Image.Image,
    xy: tuple[float, float],
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    fill: str,
    align: str = "start",
    emoji: bool = False,
) -> None:
    """Draw ``text`` with ``xy`` on the baseline; ``align="end"`` puts x at the right edge."""
    x, baseline = xy
    if align == "end":
        x -= text_width(font, text)
    y = baseline - _ascent(font)
    color = parse_color(fill, "#FFFFFF")

    if emoji:
        from pilmoji import Pilmoji

        with Pilmoji(canvas) as pilmoji:
            pilmoji.text((int(x), int(y)), text, font=font, fill=color)
        return

    ImageDraw.Draw(canvas).text((x, y), text, font=font, fill=color)


def rect(
    draw: ImageDraw.ImageDraw,
    x: float,
    y: float,
    width: float,
    height: float,
    color: str | None = None,
    stroke: bool = False,
    line_width: int = 1,
) -> ImageDraw.ImageDraw:
    for name, value in (("x", x), ("y", y), ("width", width), ("height", height)):
        if not isinstance(value, (int, float)) or isinstance(value, bool) or math.isnan(value):
            raise ValidationError(name, f"Expected {name} to be a number, received {type_name(value)}!")
    ink = parse_color(color or "#000000")

    if stroke:
        draw.rectangle((x, y, x + width - 1, y + height - 1), outline=ink, width=max(1, int(line_width)))
    elif width > 0 and height > 0:
        draw.rectangle((x, y, x + width - 1, y + height - 1), fill=ink)
    return draw


def round_rect(
    draw: ImageDraw.ImageDraw,
    x: float,
    y: float,
    width: float,
    height: float,
    radius: bool | float = 5,
    color: str = "#000000",
) -> ImageDraw.ImageDraw:
    if radius is True:
        radius = 5
    if not radius or isinstance(radius, bool) or not isinstance(radius, (int, float)):
        radius = 0
    draw.rounded_rectangle((x, y, x + width, y + height), radius=radius, fill=parse_color(color))
    return draw


def circle_mask(size: tuple[int, int]) -> Image.Image:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size[0] - 1, size[1] - 1), fill=255)
    return mask


def crop_circle(image: Image.Image) -> Image.Image:
    """Keep only the centred circle of radius ``height / 2``."""
    image = image.convert("RGBA")
    w, h = image.size
    r = h / 2
    mask = Image.new("L", image.size, 0)
    ImageDraw.Draw(mask).ellipse((w / 2 - r, 0, w / 2 + r - 1, h - 1), fill=255)
    image.putalpha(ImageChops.multiply(image.getchannel("A"), mask))
    return image


def linear_gradient(size: tuple[int, int], color_from: str, color_to: str) -> Image.Image:
    """Left-to-right two-stop gradient."""
    w, h = max(int(size[0]), 1), max(int(size[1]), 1)
    start = np.array(parse_color(color_from), dtype=np.float32)
    end = np.array(parse_color(color_to), dtype=np.float32)
    t = np.linspace(0.0, 1.0, num=w, dtype=np.float32)[:, None]
    row = start + (end - start) * t
    pixels = np.repeat(row[None, :, :], h, axis=0)
    return Image.fromarray(np.rint(pixels).astype(np.uint8))


# ── standalone images ──


def create_progress_bar(track: TrackStyle, bar: BarStyle) -> bytes:
    if track is None:
        raise ValidationError("track", "Invalid track args!")
    if bar is None:
        raise ValidationError("bar", "Invalid progressbar args!")

    canvas = Image.new("RGBA", (max(int(track.width), 1), max(int(track.height), 1)), (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    bar_width = min(max(bar.width, 0), track.width)

    if track.stroke:
        rect(draw, track.x, track.y, bar_width, track.height, bar.color)
        rect(draw, track.x, track.y, track.width, track.height, track.color, True, track.line_width)
    else:
        rect(draw, track.x, track.y, track.width, track.height, track.color)
        rect(draw, track.x, track.y, bar_width, track.height, bar.color)
    return encode_png(canvas)


def color_swatch(
    color: str = "#FFFFFF",
    display_hex: bool = False,
    height: int = 1024,
    width: int = 1024,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None,
) -> bytes:
    canvas = Image.new("RGBA", (width, height), parse_color(color))
    if display_hex:
        font = font or ImageFont.load_default(size=72)
        draw_text(canvas, (width / 3, height / 2), color.upper(), font, invert_color(color))
    return encode_png(canvas)


def rectangle(x: float, y: float, width: int, height: int, color: str, stroke: bool = False, line_width: int = 1) -> bytes:
    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    rect(draw, x, y, width, height, color, bool(stroke), line_width)
    return encode_png(canvas)


def gradient(color_from: str, color_to: str, width: int = 400, height: int = 200) -> bytes:
    if not color_from:
        raise ValidationError("color_from", "ColorFrom was not provided!")
    if not color_to:
        raise ValidationError("color_to", "ColorTo was not provided!")
    return encode_png(linear_gradient((width or 400, height or 200), color_from, color_to))


async def circle(source: object, loader=None) -> bytes:
    if not source:
        raise ValidationError("image", "Image was not provided!")
    if loader is None:
        from .assets import ImageLoader

        loader = ImageLoader()
    image = await loader.load(source)
    return encode_png(crop_circle(image))


def guild_icon(name: str, size: int = 1024, font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None) -> bytes:
    acronym = get_acronym(name)
    if not acronym:
        raise ValidationError("name", "Couldn't parse acronym!")
    if not isinstance(size, int) or size < 16 or size > 4096 or size % 16 != 0:
        raise ValidationError("size", "Invalid icon size!")

    canvas = Image.new("RGBA", (size, size), parse_color("#7289DA"))
    font = font or ImageFont.load_default(size=size // 4)
    draw_text(canvas, (size / 4, size / 1.7), acronym, font, "#FFFFFF")
    return encode_png(canvas)


def write(data: bytes, name: str | Path) -> Path:
    path = Path(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
