"""
Color parsing and sanitization helpers.

Every color that reaches the pixel pipeline goes through ``parse_color``, so
malformed user input never surfaces as a pipeline error: it becomes white.
"""
import colorsys
import re
from typing import NamedTuple, Optional


class Color(NamedTuple):
    """An RGB triple, 8 bits per channel."""
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)

# Basic names accepted from the color picker
NAMED_COLORS = {
    "white": Color(255, 255, 255),
    "black": Color(0, 0, 0),
    "red": Color(255, 0, 0),
    "blue": Color(0, 0, 255),
    "green": Color(0, 128, 0),
    "yellow": Color(255, 255, 0),
    "orange": Color(255, 165, 0),
    "purple": Color(128, 0, 128),
    "teal": Color(0, 128, 128),
    "navy": Color(0, 0, 128),
    "silver": Color(192, 192, 192),
    "gold": Color(255, 215, 0),
    "maroon": Color(128, 0, 0),
    "brown": Color(165, 42, 42),
    "pink": Color(255, 192, 203),
    "aqua": Color(0, 255, 255),
    "lime": Color(0, 255, 0),
    "gray": Color(128, 128, 128),
    "grey": Color(128, 128, 128),
}

HEX_PATTERN = re.compile(r"^#([0-9a-f]{6}|[0-9a-f]{3})$", re.IGNORECASE)

DEFAULT_COLOR = "#FFFFFF"


def sanitize_color(value: Optional[str]) -> str:
    """
    Normalize free-form color text.

    Returns an upper-case hex string, a lower-case named color, or
    ``#FFFFFF`` when the input is neither.
    """
    v = (value or "").strip()
    if HEX_PATTERN.match(v):
        return v.upper()
    if v.lower() in NAMED_COLORS:
        return v.lower()
    return DEFAULT_COLOR


def parse_color(value: Optional[str]) -> Color:
    """Resolve sanitized or raw color text to an RGB triple."""
    v = sanitize_color(value)
    if v in NAMED_COLORS:
        return NAMED_COLORS[v]
    h = v.lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    return Color(int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def color_name(value: str) -> str:
    """
    Describe a color with a plain word the image model understands.

    Named colors pass through; hex colors are bucketed by hue, with
    dedicated buckets for very dark, gray and white.
    """
    v = sanitize_color(value)
    if v in NAMED_COLORS:
        return v

    r, g, b = parse_color(v)
    hue, sat, val = colorsys.rgb_to_hsv(r / 255, g / 255, b / 255)
    hue *= 360

    if val < 0.12:
        return "black"
    if sat < 0.10:
        return "white" if val > 0.85 else "gray"

    buckets = [
        (15, "red"), (45, "orange"), (70, "gold"), (90, "yellow-green"),
        (135, "green"), (160, "teal"), (200, "cyan"), (225, "sky blue"),
        (250, "blue"), (275, "indigo"), (300, "purple"), (330, "magenta"),
        (345, "crimson"),
    ]
    for upper, name in buckets:
        if hue < upper:
            return name
    return "red"
