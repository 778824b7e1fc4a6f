"""Greedy width-constrained line wrapping."""

from __future__ import annotations

from typing import Callable

from PIL import Image, ImageDraw, ImageFont


MeasureFn = Callable[[str], float]

_SCRATCH = Image.new("L", (1, 1))


def pillow_measure(font: ImageFont.ImageFont | ImageFont.FreeTypeFont) -> MeasureFn:
    """Return a measure function for ``font`` backed by Pillow's advance widths."""
    draw = ImageDraw.Draw(_SCRATCH)

    def measure(text: str) -> float:
        return float(draw.textlength(text, font=font))

    return measure


def get_lines(text: str, measure: MeasureFn | None, max_width: float) -> list[str]:
    if not text:
        return []
    if measure is None:
        raise ValueError("A measure function was not provided")
    if not max_width or max_width <= 0:
        raise ValueError("No max width provided")

    lines: list[str] = []
    while text:
        i = len(text)
        while i > 1 and measure(text[:i]) > max_width:
            i -= 1
        result = text[:i]

        cut = 0
        if i != len(text):
            # keep everything up to and including the last space
            cut = result.rfind(" ") + 1
        line = result[:cut] if cut else result
        lines.append(line)
        text = text[len(line) :]

    return lines
