"""
CSS Color Utilities

Parses CSS colour strings into RGBA, blends them channel-wise and encodes the
result back to ``rgb()`` / ``rgba()`` strings.

Hex, named, hsl() and hsv() colours go through Pillow's ImageColor; rgb() and
rgba() are parsed here because CSS alpha is a 0-1 float, which Pillow does
not accept.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from PIL import ImageColor

from .utils import clamp, lerp


logger = logging.getLogger(__name__)


@dataclass
class RGBA:
    """Colour with 0-255 float channels and 0-1 alpha"""
    r: float
    g: float
    b: float
    a: float = 1.0

    def lerp(self, other: 'RGBA', t: float) -> 'RGBA':
        """Channel-wise interpolation, clamped to valid ranges"""
        return RGBA(
            clamp(lerp(self.r, other.r, t), 0.0, 255.0),
            clamp(lerp(self.g, other.g, t), 0.0, 255.0),
            clamp(lerp(self.b, other.b, t), 0.0, 255.0),
            clamp(lerp(self.a, other.a, t), 0.0, 1.0),
        )

    def to_css(self) -> str:
        """Encode as rgb(...) when opaque, rgba(...) otherwise"""
        r, g, b = (int(round(c)) for c in (self.r, self.g, self.b))
        a = round(self.a, 3)
        if a >= 1.0:
            return f"rgb({r}, {g}, {b})"
        return f"rgba({r}, {g}, {b}, {a:g})"


_CHANNEL = r"\s*([-+]?(?:\d+\.?\d*|\.\d+))(%?)\s*"
_RGB_RE = re.compile(
    r"^rgba?\(" + ",".join([_CHANNEL] * 3) + r"(?:,\s*([-+]?(?:\d+\.?\d*|\.\d+))(%?)\s*)?\)$"
)


def _parse_functional_rgb(text: str) -> Optional[RGBA]:
    match = _RGB_RE.match(text)
    if not match:
        return None
    groups = match.groups()
    channels = []
    for i in range(3):
        value, percent = float(groups[2 * i]), groups[2 * i + 1]
        if percent:
            value = value * 255.0 / 100.0
        channels.append(clamp(value, 0.0, 255.0))

    alpha = 1.0
    if groups[6] is not None:
        alpha = float(groups[6])
        if groups[7]:
            alpha /= 100.0
    return RGBA(channels[0], channels[1], channels[2], clamp(alpha, 0.0, 1.0))


def parse_color(value) -> Optional[RGBA]:
    """
    Parse a CSS colour string.

    Args:
        value: Colour string ('#f00', 'red', 'rgba(0, 0, 0, 0.5)', ...)

    Returns:
        RGBA, or None when the value is not a colour
    """
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    if not text or text == 'none' or text.startswith('url('):
        return None
    if text == 'transparent':
        return RGBA(0.0, 0.0, 0.0, 0.0)
    if text.startswith('rgb'):
        return _parse_functional_rgb(text)

    try:
        rgb = ImageColor.getrgb(text)
    except ValueError:
        return None
    alpha = rgb[3] / 255.0 if len(rgb) == 4 else 1.0
    return RGBA(float(rgb[0]), float(rgb[1]), float(rgb[2]), alpha)


def is_color(value) -> bool:
    """True when the value parses as a CSS colour"""
    return parse_color(value) is not None


def blend_colors(c1: str, c2: str, t: float) -> str:
    """
    Interpolate two CSS colours.

    The endpoints are returned verbatim at t <= 0 and t >= 1. When either side
    cannot be parsed the earlier colour is held.
    """
    if t <= 0:
        return c1
    if t >= 1:
        return c2
    rgba1, rgba2 = parse_color(c1), parse_color(c2)
    if rgba1 is None or rgba2 is None:
        logger.debug("Unparsable colour pair %r / %r, holding %r", c1, c2, c1)
        return c1
    return rgba1.lerp(rgba2, t).to_css()
